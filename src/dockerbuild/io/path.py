import logging
import shutil
from pathlib import Path
from typing import Optional

from ..exceptions import ArtifactNotFoundError, ContextEscapeError
from .decorators import wrap_io_error

logger = logging.getLogger(__name__)


def contained_path(root: Path, name: str) -> Path:
    """
    Resolve `name` below `root`, refusing anything that lands outside of it.

    Raises:
        ContextEscapeError: if the resolved path is not inside `root`
    """
    base = Path(root).resolve()
    target = (base / name).resolve()
    if target == base or base not in target.parents:
        raise ContextEscapeError(f"'{name}' resolves outside of '{base}'")
    return target


@wrap_io_error
def copy_into(root: Path, source: Path, name: Optional[str] = None) -> str:
    """Copy a regular file into `root` under `name` (default: its own name), return that name."""
    source = Path(source)
    if not source.is_file():
        raise ArtifactNotFoundError(f"file not found: {source}")
    name = name or source.name
    target = contained_path(root, name)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    logger.debug(f"Copied '{source}' into context as '{name}'")
    return name


@wrap_io_error
def read_text(path: Path, encoding: str = "utf-8") -> str:
    return Path(path).read_text(encoding=encoding)


@wrap_io_error
def write_text(path: Path, content: str, encoding: str = "utf-8"):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)


@wrap_io_error
def rmtree(path: Path):
    path = Path(path)
    if path.exists():
        shutil.rmtree(path)
    else:
        logger.debug(f"Path {path} does not exist, skipping rmtree.")
