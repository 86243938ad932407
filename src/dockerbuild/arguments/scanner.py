import logging
import re
import shlex
from pathlib import Path
from typing import Dict, Iterator, Tuple

from ..datacls import FormalArgument
from ..exceptions import DockerfileSyntaxError, DockerbuildIOError

logger = logging.getLogger(__name__)

_ARG_RE = re.compile(r"^ARG(?:\s+(?P<rest>.*))?$", re.IGNORECASE | re.DOTALL)
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _instructions(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (first line number, instruction) with continuations joined and comments dropped."""
    pending = []
    start = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if stripped.startswith("#"):
            continue
        if not pending:
            if not stripped:
                continue
            start = lineno
        if stripped.endswith("\\"):
            pending.append(stripped[:-1])
            continue
        pending.append(stripped)
        yield start, " ".join(part.strip() for part in pending if part.strip())
        pending = []
    if pending:
        yield start, " ".join(part.strip() for part in pending if part.strip())


def _parse_arg(lineno: int, instruction: str, rest: str) -> Iterator[FormalArgument]:
    try:
        tokens = shlex.split(rest, comments=False, posix=True)
    except ValueError as e:
        raise DockerfileSyntaxError(f"line {lineno}: {e}: {instruction}")
    if not tokens:
        raise DockerfileSyntaxError(f"line {lineno}: missing argument name: {instruction}")
    for token in tokens:
        if "=" in token:
            name, default = token.split("=", 1)
        else:
            name, default = token, None
        if not _NAME_RE.match(name):
            raise DockerfileSyntaxError(f"line {lineno}: invalid argument name '{name}': {instruction}")
        yield FormalArgument(name=name, default=default)


def scan(text: str) -> Dict[str, FormalArgument]:
    """
    Collect the build arguments declared by a Dockerfile.

    The result is ordered by first declaration. A redeclared name stays at its
    original position; a later default replaces the earlier one, while a later
    declaration without a default keeps the earlier default.

    Raises:
        DockerfileSyntaxError: for an ARG instruction without a valid name
    """
    formals: Dict[str, FormalArgument] = {}
    for lineno, instruction in _instructions(text):
        match = _ARG_RE.match(instruction)
        if not match:
            continue
        for arg in _parse_arg(lineno, instruction, match.group("rest") or ""):
            previous = formals.get(arg.name)
            if previous is not None:
                logger.debug(f"ARG {arg.name} redeclared at line {lineno}")
                if arg.default is None:
                    continue
            formals[arg.name] = arg
    logger.debug(f"Scanned {len(formals)} build arguments: {', '.join(formals)}")
    return formals


def scan_file(path: Path) -> Dict[str, FormalArgument]:
    """Read and scan a Dockerfile."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DockerbuildIOError(f"cannot read Dockerfile '{path}': {e}")
    return scan(text)
