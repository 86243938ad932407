import logging
import tarfile
import tempfile
from pathlib import Path
from typing import Dict, IO

from .. import constants
from ..arguments import scan_file
from ..datacls import FormalArgument
from ..exceptions import TemplateNotFoundError
from ..io import TemplateSource, rmtree
from ..io.decorators import wrap_io_error

logger = logging.getLogger(__name__)


class Context:
    """
    The build context directory handed to the build engine.

    Owned by a single build: `create()` wipes whatever was there before.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    @property
    def dockerfile(self) -> Path:
        return self.directory / constants.DOCKERFILE_NAME

    @classmethod
    def create(cls, source: TemplateSource, directory: Path) -> "Context":
        """Recreate `directory` as a copy of the template."""
        logger.debug(f"Creating build context {directory} from {source}")
        rmtree(directory)
        Path(directory).mkdir(parents=True)
        source.copy_to(directory)
        context = cls(directory)
        if not context.dockerfile.is_file():
            raise TemplateNotFoundError(f"no {constants.DOCKERFILE_NAME} in build context {directory}")
        return context

    def formals(self) -> Dict[str, FormalArgument]:
        """The arguments declared by the context's Dockerfile."""
        return scan_file(self.dockerfile)

    @wrap_io_error
    def tar(self) -> IO[bytes]:
        """
        Pack the context into a temporary tar file, positioned at the start.

        The caller closes the file; it is deleted on close.
        """
        fileobj = tempfile.TemporaryFile()
        with tarfile.open(fileobj=fileobj, mode="w") as archive:
            for path in sorted(self.directory.rglob("*")):
                archive.add(str(path), arcname=path.relative_to(self.directory).as_posix(), recursive=False)
        fileobj.seek(0)
        logger.debug(f"Packed build context {self.directory}")
        return fileobj

    def __str__(self) -> str:
        return str(self.directory)
