"""
Template sources: where a dockerbuild template is copied from.

A template is a directory holding a Dockerfile plus helper files. It can live
in a plain directory, inside a zip/jar/war archive (optionally below a sub
directory, written `archive.jar!sub/dir`), or ship with dockerbuild itself as
a named built-in template.
"""

import logging
import zipfile
from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Tuple

import fsspec

from .. import constants
from ..exceptions import TemplateNotFoundError
from ..utils import override
from .decorators import wrap_io_error
from .path import contained_path

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES_PACKAGE = "dockerbuild.resources.templates"


def _excluded(rel: PurePosixPath) -> bool:
    return bool(rel.parts) and rel.parts[0] in constants.TEMPLATE_EXCLUDES


class TemplateSource(ABC):
    """
    Abstract template source. Subclasses enumerate files relative to the
    template root; copying and exclusion handling is shared.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @abstractmethod
    def _files(self) -> Iterator[Tuple[PurePosixPath, bytes]]:
        """Yield (relative path, content) for every file of the template."""
        pass

    @abstractmethod
    def has_dockerfile(self) -> bool:
        pass

    @wrap_io_error
    def copy_to(self, dest: Path) -> List[str]:
        """
        Copy the template into `dest`, skipping the excluded metadata tree.

        Returns the copied relative paths.
        """
        if not self.has_dockerfile():
            raise TemplateNotFoundError(f"template {self.description} has no {constants.DOCKERFILE_NAME}")
        copied = []
        for rel, content in self._files():
            if _excluded(rel):
                logger.debug(f"Skipping excluded template file '{rel}'")
                continue
            target = contained_path(dest, rel.as_posix())
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            copied.append(rel.as_posix())
        logger.debug(f"Copied {len(copied)} files from template {self.description}")
        return copied

    def __str__(self) -> str:
        return self.description


class FsspecTemplateSource(TemplateSource, ABC):
    """Template stored in an fsspec file system below `root`."""

    def __init__(self, fs, root: str):
        self.fs = fs
        self.root = root

    @abstractmethod
    def _base(self) -> str:
        """The root as spelled in the paths the file system returns."""
        pass

    def _join(self, name: str) -> str:
        base = self._base()
        return f"{base.rstrip('/')}/{name}" if base else name

    @override
    def has_dockerfile(self) -> bool:
        return self.fs.isfile(self._join(constants.DOCKERFILE_NAME))

    @override
    def _files(self) -> Iterator[Tuple[PurePosixPath, bytes]]:
        base = self._base().rstrip("/")
        for path in sorted(self.fs.find(base)):
            rel = path[len(base):].lstrip("/") if base else path.lstrip("/")
            with self.fs.open(path, "rb") as f:
                yield PurePosixPath(rel), f.read()


class DirectoryTemplateSource(FsspecTemplateSource):
    """Template in a local directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory).absolute()
        super().__init__(fsspec.filesystem("file"), self.directory.as_posix())

    @property
    @override
    def description(self) -> str:
        return f"'{self.directory}'"

    @override
    def _base(self) -> str:
        return self.fs.info(self.root)["name"]


class ArchiveTemplateSource(FsspecTemplateSource):
    """Template inside a zip, jar or war archive, optionally below a sub directory."""

    def __init__(self, archive: Path, subdir: str = ""):
        self.archive = Path(archive)
        try:
            fs = fsspec.filesystem("zip", fo=str(self.archive))
        except FileNotFoundError as e:
            raise TemplateNotFoundError(f"template archive not found: {self.archive}") from e
        except zipfile.BadZipFile as e:
            raise TemplateNotFoundError(f"template archive is not a zip file: {self.archive}") from e
        super().__init__(fs, subdir.strip("/"))

    @property
    @override
    def description(self) -> str:
        if self.root:
            return f"'{self.archive}{constants.ARCHIVE_SEPARATOR}{self.root}'"
        return f"'{self.archive}'"

    @override
    def _base(self) -> str:
        return self.root


class ResourceTemplateSource(TemplateSource):
    """Template shipped with dockerbuild in `dockerbuild.resources.templates`."""

    def __init__(self, name: str):
        self.name = name
        self.traversable = resources.files(BUILTIN_TEMPLATES_PACKAGE).joinpath(name)
        if not self.traversable.is_dir():
            raise TemplateNotFoundError(f"no built-in template named '{name}'")

    @property
    @override
    def description(self) -> str:
        return f"builtin '{self.name}'"

    @override
    def has_dockerfile(self) -> bool:
        return self.traversable.joinpath(constants.DOCKERFILE_NAME).is_file()

    @override
    def _files(self) -> Iterator[Tuple[PurePosixPath, bytes]]:
        stack = [(PurePosixPath(), self.traversable)]
        while stack:
            rel, node = stack.pop()
            for child in sorted(node.iterdir(), key=lambda c: c.name):
                if child.name == "__pycache__" or child.name.endswith((".py", ".pyc")):
                    continue
                if child.is_dir():
                    stack.append((rel / child.name, child))
                else:
                    yield rel / child.name, child.read_bytes()


def builtin_templates() -> List[str]:
    """Names of the templates shipped with dockerbuild."""
    root = resources.files(BUILTIN_TEMPLATES_PACKAGE)
    return sorted(c.name for c in root.iterdir() if c.is_dir() and c.name != "__pycache__")


def open_template(spec: str, basedir: Path) -> TemplateSource:
    """
    Select the template source for a configured template string.

    Args:
        spec: directory, archive (with optional '!sub/dir') or built-in template name
        basedir: project base directory, relative paths are resolved against it

    Raises:
        TemplateNotFoundError: if nothing matches
    """
    archive, sep, subdir = spec.partition(constants.ARCHIVE_SEPARATOR)
    path = Path(archive).expanduser()
    if not path.is_absolute():
        path = Path(basedir) / path

    if sep or path.suffix.lower() in constants.ARCHIVE_SUFFIXES:
        if not path.is_file():
            raise TemplateNotFoundError(f"template archive not found: {path}")
        logger.debug(f"Using archive template {path} (sub directory '{subdir}')")
        return ArchiveTemplateSource(path, subdir)
    if path.is_dir():
        logger.debug(f"Using directory template {path}")
        return DirectoryTemplateSource(path)
    if spec in builtin_templates():
        logger.debug(f"Using built-in template {spec}")
        return ResourceTemplateSource(spec)
    raise TemplateNotFoundError(
        f"template not found: {spec} (neither a directory, an archive nor one of: {', '.join(builtin_templates())})"
    )
