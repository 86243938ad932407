"""
Image reference templates.

`%a` artifact id, `%g` last segment of the group id, `%V` version (snapshots
get a build timestamp), `%b` current git branch. `%-x` emits `-<value>`, or
nothing when the value is empty. Every substituted value is sanitized.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from . import constants
from . import vcs
from .datacls import ProjectInfo
from .exceptions import PlaceholderError, VcsError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sanitize(value: str) -> str:
    """Lower-case ASCII letters and digits, keep `_-.`, drop everything else."""
    result = []
    for c in value:
        if ("a" <= c <= "z") or ("0" <= c <= "9") or c in constants.SANITIZE_EXTRA:
            result.append(c)
        elif "A" <= c <= "Z":
            result.append(c.lower())
    return "".join(result)


def timestamp(moment: datetime) -> str:
    """`yyyyMMdd-HHmmss-SSS`"""
    return f"{moment:%Y%m%d-%H%M%S}-{moment.microsecond // 1000:03d}"


class Placeholders:
    """
    Resolves image reference templates against project metadata.

    Args:
        project: project metadata
        clock: returns "now" for snapshot timestamps
        branch_on_release: emit `%b` for release versions too
        branch: returns the current branch; defaults to asking git in the project basedir
    """

    def __init__(self, project: ProjectInfo, clock: Optional[Clock] = None,
                 branch_on_release: bool = False, branch: Optional[Callable[[], str]] = None):
        self.project = project
        self.clock = clock or utc_now
        self.branch_on_release = branch_on_release
        self._branch = branch or (lambda: vcs.current_branch(self.project.basedir))

    def artifact(self) -> str:
        return self.project.artifact_id

    def group(self) -> str:
        return self.project.group_id.rsplit(".", 1)[-1]

    def version(self) -> str:
        version = self.project.version
        if self.project.is_snapshot:
            base = version[: -len(constants.SNAPSHOT_SUFFIX)]
            return f"{base}.{timestamp(self.clock())}"
        return version

    def branch(self) -> str:
        if not self.project.is_snapshot and not self.branch_on_release:
            return ""
        try:
            return self._branch()
        except VcsError as e:
            raise PlaceholderError(f"%b: {e}") from e

    def _value(self, code: str, template: str) -> str:
        if code == "a":
            return self.artifact()
        if code == "g":
            return self.group()
        if code == "V":
            return self.version()
        if code == "b":
            return self.branch()
        raise PlaceholderError(f"unknown placeholder %{code} in '{template}'")

    def resolve(self, template: str) -> str:
        """
        Raises:
            PlaceholderError: dangling `%`/`%-`, an unknown placeholder or an unresolvable branch
        """
        out = []
        i = 0
        n = len(template)
        while i < n:
            c = template[i]
            i += 1
            if c != constants.PLACEHOLDER_SIGIL:
                out.append(c)
                continue
            if i >= n:
                raise PlaceholderError(f"missing placeholder after '%' in '{template}'")
            optional = template[i] == constants.PLACEHOLDER_OPTIONAL
            if optional:
                i += 1
                if i >= n:
                    raise PlaceholderError(f"missing placeholder after '%-' in '{template}'")
            value = sanitize(self._value(template[i], template))
            i += 1
            if optional:
                if value:
                    out.append(f"-{value}")
            else:
                out.append(value)
        result = "".join(out)
        logger.debug(f"Resolved '{template}' to '{result}'")
        return result
