import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Literal
from pydantic import BaseModel, Field, ValidationError, model_validator, ConfigDict

from . import constants
from . import pom
from .datacls import ProjectInfo
from .exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
)

logger = logging.getLogger(__name__)


class ScmModel(BaseModel):
    """
        Class Config-Validation Model describe `project.scm`
    """
    connection: Optional[str] = None
    developer_connection: Optional[str] = Field(None, alias='developerConnection')
    url: Optional[str] = None
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ProjectBuildModel(BaseModel):
    """
        Class Config-Validation Model describe `project.build`
    """
    directory: Optional[str] = None
    final_name: Optional[str] = Field(None, alias='finalName')
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ProjectModel(BaseModel):
    """
        Class Config-Validation Model describe `project`

    Either `pom` points at a pom.xml, or `groupId`, `artifactId` and `version`
    are given. Fields given here win over the pom.
    """
    pom: Optional[str] = None
    group_id: Optional[str] = Field(None, alias='groupId')
    artifact_id: Optional[str] = Field(None, alias='artifactId')
    version: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    scm: Optional[ScmModel] = None
    properties: Dict[str, str] = Field(default_factory=dict)
    build: ProjectBuildModel = Field(default_factory=ProjectBuildModel)
    model_config = ConfigDict(extra="forbid", populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode='after')
    def check_pom_or_coordinates(self) -> 'ProjectModel':
        """Check pom exists or groupId/artifactId/version is given"""
        if self.pom is None and not (self.group_id and self.artifact_id and self.version):
            raise ValueError("A project without 'pom' must have 'groupId', 'artifactId' and 'version' keys.")
        return self


class DockerbuildModel(BaseModel):
    """
        Class Config-Validation Model describe `dockerbuild`
    """
    template: str
    image: str = constants.DEFAULT_IMAGE_TEMPLATE
    no_cache: bool = Field(False, alias='noCache')
    comment: str = ""
    arguments: Dict[str, str] = Field(default_factory=dict)
    engine: Literal["api", "cli"] = constants.ENGINE_API
    branch_on_release: bool = Field(False, alias='branchOnRelease')
    labels: bool = True
    docker_config: Optional[str] = Field(None, alias='dockerConfig')
    build_directory: Optional[str] = Field(None, alias='buildDirectory')
    model_config = ConfigDict(extra="forbid", populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode='after')
    def check_image_template(self) -> 'DockerbuildModel':
        """Reject an empty image template early"""
        if not self.image.strip():
            raise ValueError("'image' must not be empty.")
        return self


class ConfigModel(BaseModel):
    """
        Class Config-Validation Model desribe top-level of config
    """
    project: ProjectModel
    dockerbuild: DockerbuildModel
    model_config = ConfigDict(extra="forbid")


class Config:
    """
    Loads and validates the dockerbuild.yml file using Pydantic models.
    It is the sole gatekeeper for configuration.
    """
    def __init__(self, config_path: str = constants.DEFAULT_CONFIG_FILENAME):
        self.path = Path(config_path)
        logger.info(f"Loading configuration from '{self.path}'...")
        raw_data = self._load_raw_config()

        logger.debug("Validating configuration structure with Pydantic...")
        try:
            self.model = ConfigModel.model_validate(raw_data)
            logger.debug(f"Configuration model validated successfully: \n{self.model.model_dump_json(indent=2)}")
        except ValidationError as e:
            raise ConfigValidationError(f"Configuration validation failed:\n{e}")
        self._project: Optional[ProjectInfo] = None

    def _load_raw_config(self) -> Dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
            config_data = yaml.safe_load(content)
            if not isinstance(config_data, dict):
                raise ConfigParsingError("Configuration file must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return config_data
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Configuration file not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    @property
    def basedir(self) -> Path:
        return self.path.parent.absolute()

    @property
    def project(self) -> ProjectInfo:
        """Project metadata, from the pom (if any) overlaid with the explicit fields."""
        if self._project is None:
            self._project = self._load_project()
        return self._project

    def _load_project(self) -> ProjectInfo:
        model = self.model.project
        data: Dict[str, Any] = {"basedir": self.basedir}
        if model.pom:
            pom_path = Path(model.pom)
            if not pom_path.is_absolute():
                pom_path = self.basedir / pom_path
            data.update(pom.read_pom(pom_path))

        explicit = model.model_dump(by_alias=True, exclude_none=True, exclude={"pom", "scm", "build", "properties"})
        data.update(explicit)
        if model.scm is not None:
            scm = dict(data.get("scm") or {})
            scm.update(model.scm.model_dump(by_alias=True, exclude_none=True))
            data["scm"] = scm
        properties = dict(data.get("properties") or {})
        properties.update(model.properties)
        data["properties"] = properties
        if model.build.directory:
            data["buildDirectory"] = model.build.directory
        if model.build.final_name:
            data["finalName"] = model.build.final_name
        try:
            return ProjectInfo.model_validate(data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid project metadata:\n{e}")

    @property
    def dockerbuild(self) -> DockerbuildModel:
        return self.model.dockerbuild

    @property
    def template(self) -> str:
        return self.model.dockerbuild.template

    @property
    def image(self) -> str:
        return self.model.dockerbuild.image

    @property
    def arguments(self) -> Dict[str, str]:
        return dict(self.model.dockerbuild.arguments)

    @property
    def dockerbuild_dir(self) -> Path:
        """`<project build directory>/dockerbuild` unless configured otherwise."""
        configured = self.model.dockerbuild.build_directory
        if configured:
            path = Path(configured)
            return path if path.is_absolute() else self.basedir / path
        return self.project.build_directory / constants.DOCKERBUILD_SUBDIR

    @property
    def docker_config(self) -> Optional[Path]:
        configured = self.model.dockerbuild.docker_config
        if not configured:
            return None
        return Path(configured).expanduser()
