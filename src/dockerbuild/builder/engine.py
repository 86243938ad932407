"""
Build engines: what turns a build context into an image.

- ApiEngine: talks to the docker daemon through the docker SDK, sending the
  context as a tar stream
- CliEngine: drives the docker command line through python_on_whales

Both report progress to a BuildListener as docker API style events.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional

import docker
from docker.errors import DockerException
from python_on_whales import DockerClient
from python_on_whales.exceptions import DockerException as CliDockerException

from .. import constants
from ..auth import Credentials, split_tag
from ..exceptions import BuildError, PushError
from ..utils import override
from .context import Context
from .listener import BuildListener

logger = logging.getLogger(__name__)


class BuildEngine(ABC):
    """
    Abstract build engine.
    """

    @abstractmethod
    def build(self, context: Context, tag: str, no_cache: bool, build_args: Dict[str, str],
              labels: Dict[str, str], listener: BuildListener) -> BuildListener:
        """Start building; progress and the outcome go to `listener`."""
        pass

    @abstractmethod
    def push(self, reference: str, credentials: Optional[Credentials] = None):
        """
        Raises:
            PushError: the registry or daemon rejected the push
        """
        pass


class ApiEngine(BuildEngine):
    """Docker SDK engine; the context is sent as a tar stream."""

    def __init__(self, client: Optional[docker.DockerClient] = None):
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            try:
                self._client = docker.from_env()
            except DockerException as e:
                raise BuildError(f"Docker is not available: {e}") from e
        return self._client

    @override
    def build(self, context: Context, tag: str, no_cache: bool, build_args: Dict[str, str],
              labels: Dict[str, str], listener: BuildListener) -> BuildListener:
        fileobj = context.tar()
        try:
            stream = self.client.api.build(
                fileobj=fileobj,
                custom_context=True,
                tag=tag,
                nocache=no_cache,
                buildargs=build_args,
                labels=labels,
                decode=True,
                rm=True,
            )
        except DockerException as e:
            fileobj.close()
            raise BuildError(f"Docker build request failed: {e}") from e

        def close():
            try:
                stream.close()
            finally:
                fileobj.close()

        return listener.start(stream, close)

    @override
    def push(self, reference: str, credentials: Optional[Credentials] = None):
        repository, tag = split_tag(reference)
        auth_config = credentials.auth_config() if credentials else None
        try:
            for event in self.client.api.push(repository, tag=tag, auth_config=auth_config, stream=True, decode=True):
                if "error" in event:
                    raise PushError(f"push of {reference} failed: {event['error']}")
                if "status" in event:
                    logger.debug(f"{event.get('id', '')} {event['status']}".strip())
        except DockerException as e:
            raise PushError(f"push of {reference} failed: {e}") from e


class CliEngine(BuildEngine):
    """docker CLI engine (buildx, loaded into the local image store)."""

    def __init__(self, client: Optional[DockerClient] = None):
        self.client = client or DockerClient()

    def _events(self, context: Context, tag: str, no_cache: bool, build_args: Dict[str, str],
                labels: Dict[str, str]) -> Iterator[Dict[str, Any]]:
        try:
            for line in self.client.buildx.build(
                str(context.directory),
                tags=[tag],
                build_args=build_args,
                labels=labels,
                cache=not no_cache,
                load=True,
                stream_logs=True,
            ):
                yield {"stream": line if line.endswith("\n") else f"{line}\n"}
            yield {"aux": {"ID": self.client.image.inspect(tag).id}}
        except CliDockerException as e:
            yield {"error": str(e)}

    @override
    def build(self, context: Context, tag: str, no_cache: bool, build_args: Dict[str, str],
              labels: Dict[str, str], listener: BuildListener) -> BuildListener:
        return listener.start(self._events(context, tag, no_cache, build_args, labels))

    @override
    def push(self, reference: str, credentials: Optional[Credentials] = None):
        try:
            if credentials is not None:
                self.client.login(
                    server=credentials.registry,
                    username=credentials.username,
                    password=credentials.password,
                )
            self.client.push(reference)
        except CliDockerException as e:
            raise PushError(f"push of {reference} failed: {e}") from e


def create_engine(name: str = constants.ENGINE_API) -> BuildEngine:
    if name == constants.ENGINE_API:
        return ApiEngine()
    if name == constants.ENGINE_CLI:
        return CliEngine()
    raise BuildError(f"unknown build engine: {name}")
