import logging
from pathlib import Path
from typing import Optional

from .. import constants
from .. import vcs
from ..arguments import build_origin
from ..auth import CredentialResolver, split_reference
from ..config import Config
from ..exceptions import ArtifactNotFoundError, PushError
from ..io import read_text
from ..placeholders import Clock, Placeholders
from .engine import BuildEngine, create_engine

logger = logging.getLogger(__name__)


def read_image_file(path: Path) -> str:
    """The image reference recorded by the last build."""
    try:
        reference = read_text(path).strip()
    except ArtifactNotFoundError as e:
        raise PushError(f"no image recorded at {path}, build the image first") from e
    if not reference:
        raise PushError(f"image file {path} is empty")
    return reference


class Pusher:
    """
    Pushes the image of the last build to its registry.
    """

    def __init__(self, config: Config, engine: Optional[BuildEngine] = None,
                 resolver: Optional[CredentialResolver] = None):
        self.config = config
        self._engine = engine
        self.resolver = resolver or CredentialResolver(config.docker_config)

    @property
    def engine(self) -> BuildEngine:
        if self._engine is None:
            self._engine = create_engine(self.config.dockerbuild.engine)
        return self._engine

    @property
    def image_file(self) -> Path:
        return self.config.dockerbuild_dir / constants.IMAGE_FILENAME

    def run(self) -> str:
        reference = read_image_file(self.image_file)
        registry, repository = split_reference(reference)
        credentials = self.resolver.resolve(registry)
        if credentials is None:
            logger.info(f"No credentials for {registry}, pushing anonymously")
        logger.info(f"Pushing {reference} ({repository} to {registry})")
        self.engine.push(reference, credentials)
        logger.info(f"Pushed {reference}")
        return reference


class Properties:
    """
    Resolves what a build would record without building: image reference,
    build origin (`user@host`) and SCM origin.
    """

    def __init__(self, config: Config, image: Optional[str] = None, clock: Optional[Clock] = None):
        self.config = config
        self.image_template = image or config.image
        self.placeholders = Placeholders(
            config.project, clock=clock, branch_on_release=config.dockerbuild.branch_on_release
        )

    def image(self) -> str:
        return self.placeholders.resolve(self.image_template)

    def origin(self) -> str:
        return build_origin()

    def scm(self) -> str:
        return vcs.origin_or_unknown(self.config.project.basedir)
