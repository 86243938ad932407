"""
Contributor passes: bind arguments whose names carry a well-known prefix.

Each pass only looks at formal arguments inside its own namespace. A name in
the namespace that the pass does not understand is a configuration error.
"""

import getpass
import logging
import socket
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from .. import constants
from ..datacls import ProjectInfo
from ..exceptions import ArgumentValidationError, ArtifactNotFoundError, MetadataNotFoundError
from ..io import copy_into
from ..utils import override
from .. import vcs
from .directives import EvalContext, POM_KEYS

logger = logging.getLogger(__name__)


def build_origin() -> str:
    """`user@host` of the machine running the build."""
    try:
        return f"{getpass.getuser()}@{socket.getfqdn()}"
    except (OSError, KeyError) as e:
        return f"unknown host: {e}"


class Contributor(ABC):
    """A pass that binds the arguments in one name space."""

    prefix: str = ""

    def applies(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def contribute(self, arguments) -> None:
        """Bind every formal argument of `arguments` this pass is responsible for."""
        for name in arguments.names():
            if self.applies(name):
                value = self.value(name)
                logger.debug(f"{self.__class__.__name__}: {name}={value}")
                arguments.set(name, value)

    @abstractmethod
    def value(self, name: str) -> str:
        pass


class ArtifactContributor(Contributor):
    """`artifactWar` copies `<finalName>.war` into the context and binds its file name."""

    prefix = constants.ARTIFACT_PREFIX

    def __init__(self, ctx: EvalContext):
        self.ctx = ctx

    @override
    def value(self, name: str) -> str:
        extension = name[len(self.prefix):].lower()
        if not extension:
            raise ArgumentValidationError(
                f"invalid argument name '{name}': expected '{self.prefix}<Extension>', e.g. {self.prefix}War"
            )
        source = self.ctx.project.build_directory / f"{self.ctx.project.final_name}.{extension}"
        if not source.is_file():
            raise ArtifactNotFoundError(f"{name}: artifact not found: {source}")
        return copy_into(self.ctx.context_dir, source)


class BuildContributor(Contributor):
    """Build metadata: `buildOrigin`, `buildScm` and `buildComment`."""

    prefix = constants.BUILD_PREFIX

    def __init__(self, project: ProjectInfo, comment: str = "",
                 origin: Optional[Callable[[], str]] = None,
                 scm: Optional[Callable[[], str]] = None):
        self.project = project
        self.comment = comment
        self._origin = origin or build_origin
        self._scm = scm or (lambda: vcs.origin_or_unknown(self.project.basedir))

    @override
    def value(self, name: str) -> str:
        if name == "buildOrigin":
            return self._origin()
        if name == "buildScm":
            return self._scm()
        if name == "buildComment":
            return self.comment
        raise ArgumentValidationError(f"unknown build argument: {name}")


class PomContributor(Contributor):
    """`pomScm`, `pomGroupId`, ... taken from the project metadata."""

    prefix = constants.POM_PREFIX

    def __init__(self, project: ProjectInfo):
        self.project = project

    def _keys(self) -> Dict[str, str]:
        keys = {}
        for key in POM_KEYS:
            if key == "finalName":
                continue
            keys[f"{self.prefix}{key[0].upper()}{key[1:]}"] = key
        return keys

    @override
    def value(self, name: str) -> str:
        key = self._keys().get(name)
        if key is None:
            raise ArgumentValidationError(f"unknown pom argument: {name}")
        result = POM_KEYS[key](self.project)
        if result is None:
            if key == "scm":
                raise MetadataNotFoundError(f"{name} argument: scm is not defined in this project")
            raise MetadataNotFoundError(f"{name} argument: {key} is not defined in this project")
        return result
