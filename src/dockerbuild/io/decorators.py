"""
File system decorators for consistent error handling.

- Wrap OS level errors into dockerbuild IO exceptions, keeping the offending path (wrap_io_error)
"""

import functools
import logging

from ..exceptions import ArtifactNotFoundError, DockerbuildError, DockerbuildIOError

logger = logging.getLogger(__name__)


def wrap_io_error(func):
    """
    Decorator to wrap IO errors into dockerbuild exceptions.

    FileNotFoundError becomes ArtifactNotFoundError, any other OSError becomes
    DockerbuildIOError. dockerbuild's own errors pass through unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DockerbuildError:
            raise
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(f"file not found: {e.filename or e}") from e
        except OSError as e:
            target = e.filename or ""
            logger.debug(f"IO error in {func.__name__}: {e}")
            raise DockerbuildIOError(f"{e.strerror or e}: {target}".rstrip(": ")) from e

    return wrapper
