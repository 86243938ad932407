"""
Registry credentials from the docker client configuration.

Lookup order for a registry: `credHelpers.<registry>`, the global
`credsStore`, then the inline `auths.<registry>.auth` entry (base64 of
`user:password`). Helpers are executables named `docker-credential-<name>`,
called with `get` and the registry on stdin; they answer with JSON holding
`Username` and `Secret`.
"""

import base64
import binascii
import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from . import constants
from .exceptions import CredentialError

logger = logging.getLogger(__name__)


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    registry: str

    def auth_config(self) -> Dict[str, str]:
        """The shape docker expects as `auth_config`."""
        return {"username": self.username, "password": self.password, "serveraddress": self.registry}


class AuthEntry(BaseModel):
    auth: Optional[str] = None


class DockerClientConfig(BaseModel):
    """The parts of ~/.docker/config.json relevant for credentials."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    auths: Dict[str, AuthEntry] = Field(default_factory=dict)
    creds_store: Optional[str] = Field(None, alias='credsStore')
    cred_helpers: Dict[str, str] = Field(default_factory=dict, alias='credHelpers')


def default_config_path() -> Path:
    directory = os.environ.get(constants.DOCKER_CONFIG_ENV)
    base = Path(directory) if directory else Path.home() / ".docker"
    return base / constants.DOCKER_CONFIG_FILENAME


def split_reference(reference: str) -> Tuple[str, str]:
    """
    Split an image reference into (registry, repository without tag).

    The first path component is a registry if it contains '.' or ':' or is
    'localhost'; otherwise the image lives on Docker Hub.
    """
    name = reference
    if "@" in name:
        name = name.split("@", 1)[0]
    last = name.rsplit("/", 1)[-1]
    if ":" in last:
        name = name[: len(name) - len(last)] + last.split(":", 1)[0]
    first, sep, rest = name.partition("/")
    if sep and ("." in first or ":" in first or first == "localhost"):
        registry = first
        repository = rest
    else:
        registry = constants.DOCKER_HUB_REGISTRY
        repository = name
    if registry in constants.DOCKER_HUB_ALIASES:
        registry = constants.DOCKER_HUB_REGISTRY
    return registry, repository


def split_tag(reference: str) -> Tuple[str, Optional[str]]:
    """(repository, tag); the tag is None when the reference has none."""
    last = reference.rsplit("/", 1)[-1]
    if ":" in last and "@" not in last:
        repo, tag = reference.rsplit(":", 1)
        return repo, tag
    return reference, None


class CredentialResolver:
    """
    Resolves credentials for a registry from a docker client config file.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else default_config_path()
        self._config: Optional[DockerClientConfig] = None

    @property
    def config(self) -> DockerClientConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> DockerClientConfig:
        if not self.config_path.is_file():
            logger.debug(f"No docker client config at {self.config_path}")
            return DockerClientConfig()
        try:
            raw = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CredentialError(f"cannot read docker config {self.config_path}: {e}") from e
        return DockerClientConfig.model_validate(raw)

    def _lookup(self, entries: Dict, registry: str):
        """Entries may be keyed by bare host or by URL."""
        if registry in entries:
            return entries[registry]
        for key, value in entries.items():
            host = key.split("://", 1)[-1].split("/", 1)[0]
            if host == registry or (registry == constants.DOCKER_HUB_REGISTRY and host in constants.DOCKER_HUB_ALIASES):
                return value
        return None

    def resolve(self, registry: str) -> Optional[Credentials]:
        """
        Credentials for `registry`, or None when nothing is configured.

        Raises:
            CredentialError: a helper fails or an inline entry is malformed
        """
        config = self.config
        helper = self._lookup(config.cred_helpers, registry)
        if helper:
            logger.debug(f"Using credential helper '{helper}' for {registry}")
            return self.from_helper(helper, registry)
        if config.creds_store:
            logger.debug(f"Using credential store '{config.creds_store}' for {registry}")
            return self.from_helper(config.creds_store, registry)
        entry = self._lookup(config.auths, registry)
        if entry is not None and entry.auth:
            logger.debug(f"Using inline auth entry for {registry}")
            return self.from_auth(entry.auth, registry)
        logger.debug(f"No credentials configured for {registry}")
        return None

    @staticmethod
    def from_auth(auth: str, registry: str) -> Credentials:
        try:
            decoded = base64.b64decode(auth, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CredentialError(f"invalid auth entry for {registry}: {e}") from e
        username, sep, password = decoded.partition(":")
        if not sep:
            raise CredentialError(f"invalid auth entry for {registry}: expected user:password")
        return Credentials(username=username, password=password, registry=registry)

    @staticmethod
    def from_helper(helper: str, registry: str) -> Credentials:
        command = f"{constants.CREDENTIAL_HELPER_PREFIX}{helper}"
        try:
            result = subprocess.run(
                [command, "get"],
                input=registry,
                capture_output=True,
                text=True,
                check=True
            )
        except FileNotFoundError as e:
            raise CredentialError(f"credential helper not found: {command}") from e
        except subprocess.CalledProcessError as e:
            raise CredentialError(
                f"{command} get failed for {registry}: {(e.stderr or e.stdout or '').strip()}"
            ) from e
        try:
            data = json.loads(result.stdout)
            return Credentials(username=data["Username"], password=data["Secret"], registry=registry)
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise CredentialError(f"unexpected output of {command}: {e}") from e
