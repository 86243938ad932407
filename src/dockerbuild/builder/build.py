import logging
import time
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .. import constants
from .. import vcs
from ..arguments import (
    ArtifactContributor,
    BuildContributor,
    EvalContext,
    Evaluator,
    PomContributor,
    bind,
    build_origin,
)
from ..config import Config
from ..exceptions import BuildFailure
from ..io import open_template, write_text
from ..placeholders import Clock, Placeholders
from .context import Context
from .engine import BuildEngine, create_engine
from .listener import BuildListener

logger = logging.getLogger(__name__)


class BuildResult(BaseModel):
    """
        Class describes the outcome of a successful build
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    image_id: str
    arguments: Dict[str, str]
    seconds: float


def command_line(tag: str, no_cache: bool, build_args: Mapping[str, str], context: Path, log: Path) -> str:
    """The docker command equivalent to a build, for the log."""
    parts = ["docker", "build", "-t", f'"{tag}"']
    if no_cache:
        parts.append("--no-cache")
    for name, value in build_args.items():
        parts.extend(["--build-arg", f"{name}={value}"])
    parts.append(str(context))
    parts.append(f">{log}")
    return " ".join(parts)


class Builder:
    """
    Builds the project's image: resolves the image reference, materializes the
    build context, binds the build arguments and runs the build engine.

    Options left as None fall back to the configuration.
    """

    def __init__(self, config: Config, image: Optional[str] = None, no_cache: Optional[bool] = None,
                 comment: Optional[str] = None, arguments: Optional[Mapping[str, str]] = None,
                 engine: Optional[BuildEngine] = None, clock: Optional[Clock] = None):
        self.config = config
        self.project = config.project
        settings = config.dockerbuild
        self.image_template = image or settings.image
        self.no_cache = settings.no_cache if no_cache is None else no_cache
        self.comment = settings.comment if comment is None else comment
        self.arguments = config.arguments
        self.arguments.update(arguments or {})
        self.labels_enabled = settings.labels
        self._engine = engine
        self.placeholders = Placeholders(self.project, clock=clock, branch_on_release=settings.branch_on_release)
        self.directory = config.dockerbuild_dir
        logger.debug(f"Builder initialized for '{self.project.artifact_id}'. Output dir: '{self.directory}'")

    @property
    def engine(self) -> BuildEngine:
        if self._engine is None:
            self._engine = create_engine(self.config.dockerbuild.engine)
        return self._engine

    @property
    def context_dir(self) -> Path:
        return self.directory / constants.CONTEXT_SUBDIR

    @property
    def image_file(self) -> Path:
        return self.directory / constants.IMAGE_FILENAME

    @property
    def log_file(self) -> Path:
        return self.directory / constants.BUILD_LOG_FILENAME

    def resolve_image(self) -> str:
        """Resolve the image reference and record it for the push step."""
        tag = self.placeholders.resolve(self.image_template)
        write_text(self.image_file, f"{tag}\n")
        logger.debug(f"Image reference '{tag}' written to {self.image_file}")
        return tag

    def prepare(self) -> Dict[str, str]:
        """Create the build context and bind the build arguments."""
        source = open_template(self.config.template, self.project.basedir)
        context = Context.create(source, self.context_dir)
        formals = context.formals()
        logger.info(f"Build arguments: {' '.join(str(f) for f in formals.values()) or '(none)'}")

        ctx = EvalContext(project=self.project, context_dir=context.directory)
        contributors = [
            ArtifactContributor(ctx),
            BuildContributor(self.project, comment=self.comment),
            PomContributor(self.project),
        ]
        return bind(formals, self.arguments, Evaluator(ctx), contributors)

    def labels(self, build_args: Mapping[str, str]) -> Dict[str, str]:
        if not self.labels_enabled:
            return {}
        labels = {
            constants.LABEL_COMMENT: self.comment,
            constants.LABEL_ORIGIN_SCM: vcs.origin_or_unknown(self.project.basedir),
            constants.LABEL_ORIGIN_USER: build_origin(),
        }
        for name, value in build_args.items():
            labels[f"{constants.LABEL_ARG_PREFIX}{name}"] = value
        return labels

    def run(self) -> BuildResult:
        """Orchestrates the entire build process step by step."""
        started = time.monotonic()
        tag = self.resolve_image()
        logger.info(f"[Builder] Building image '{tag}'...")

        build_args = self.prepare()
        labels = self.labels(build_args)
        logger.info(command_line(tag, self.no_cache, build_args, self.context_dir, self.log_file))

        image_id = self._build(tag, build_args, labels)
        seconds = round(time.monotonic() - started, 1)
        logger.info(f"Done: tag={tag} id={image_id} seconds={seconds}")
        return BuildResult(tag=tag, image_id=image_id, arguments=build_args, seconds=seconds)

    def _build(self, tag: str, build_args: Dict[str, str], labels: Dict[str, str]) -> str:
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_file, "w", encoding="utf-8") as log:
            listener = BuildListener(log)
            self.engine.build(Context(self.context_dir), tag, self.no_cache, build_args, labels, listener)
            try:
                return listener.await_image_id()
            except BuildFailure as e:
                logger.error(f"Build failed: {e.error}")
                for line in _lines(e.output):
                    logger.error(f"  {line}")
                raise
            finally:
                listener.join(timeout=5)


def _lines(output: str) -> List[str]:
    return [line for line in output.splitlines() if line.strip()]
