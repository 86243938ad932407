"""
Git metadata for build arguments, labels and the `%b` placeholder.
"""

import logging
from pathlib import Path

import git

from . import constants
from .exceptions import VcsError

logger = logging.getLogger(__name__)


def _repo(path: Path) -> git.Repo:
    return git.Repo(str(path), search_parent_directories=True)


def origin(path: Path) -> str:
    """
    The `remote.origin.url` of the repository containing `path`.

    Raises:
        VcsError: if `path` is not inside a git repository or has no origin
    """
    try:
        repo = _repo(path)
        url = repo.git.config("--get", "remote.origin.url").strip()
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise VcsError(f"not a git repository: {path}") from e
    except git.exc.GitCommandNotFound as e:
        raise VcsError(f"git is not available: {e}") from e
    except git.exc.GitCommandError as e:
        raise VcsError(f"no origin configured for {path}: {e.stderr.strip() if e.stderr else e}") from e
    if not url:
        raise VcsError(f"no origin configured for {path}")
    return url


def origin_or_unknown(path: Path) -> str:
    """`git:<origin url>` or `unknown` when it cannot be determined."""
    try:
        return f"{constants.GIT_ORIGIN_PREFIX}{origin(path)}"
    except VcsError as e:
        logger.debug(f"Origin lookup failed, using '{constants.UNKNOWN_ORIGIN}': {e}")
        return constants.UNKNOWN_ORIGIN


def current_branch(path: Path) -> str:
    """
    Short name of the checked out branch (`git symbolic-ref --short -q HEAD`).

    Raises:
        VcsError: not a repository, or a detached HEAD
    """
    try:
        repo = _repo(path)
        branch = repo.git.symbolic_ref("--short", "-q", "HEAD").strip()
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise VcsError(f"cannot determine branch, not a git repository: {path}") from e
    except git.exc.GitCommandNotFound as e:
        raise VcsError(f"cannot determine branch, git is not available: {e}") from e
    except git.exc.GitCommandError as e:
        raise VcsError(f"cannot determine branch of {path} (detached HEAD?)") from e
    if not branch:
        raise VcsError(f"cannot determine branch of {path}")
    logger.debug(f"Current branch of {path}: {branch}")
    return branch
