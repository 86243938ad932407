from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .. import constants


class Scm(BaseModel):
    """
        Class describes the <scm> block of a project
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    connection: Optional[str] = None
    developer_connection: Optional[str] = Field(None, alias='developerConnection')
    url: Optional[str] = None

    @property
    def defined(self) -> bool:
        return self.developer_connection is not None or self.connection is not None


class ProjectInfo(BaseModel):
    """
    Project metadata consumed by placeholders, directives and argument contributors.

    Mirrors the parts of a Maven project model that an image build needs:
    coordinates, descriptive fields, SCM, properties and the build output location.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    group_id: str = Field(alias='groupId')
    artifact_id: str = Field(alias='artifactId')
    version: str
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    scm: Scm = Field(default_factory=Scm)
    properties: Dict[str, str] = Field(default_factory=dict)
    basedir: Path = Field(default_factory=Path.cwd)
    build_directory: Optional[Path] = Field(None, alias='buildDirectory')
    final_name: Optional[str] = Field(None, alias='finalName')

    @model_validator(mode='after')
    def fill_build_defaults(self) -> 'ProjectInfo':
        """Apply Maven defaults: target/ below basedir and <artifactId>-<version>."""
        basedir = self.basedir.absolute()
        object.__setattr__(self, 'basedir', basedir)
        if self.build_directory is None:
            object.__setattr__(self, 'build_directory', basedir / 'target')
        elif not self.build_directory.is_absolute():
            object.__setattr__(self, 'build_directory', basedir / self.build_directory)
        if not self.final_name:
            object.__setattr__(self, 'final_name', f"{self.artifact_id}-{self.version}")
        return self

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(constants.SNAPSHOT_SUFFIX)

    def resolve_path(self, path: str) -> Path:
        """Resolve a path relative to the project base directory."""
        result = Path(path).expanduser()
        if not result.is_absolute():
            result = self.basedir / result
        return result

    def template_vars(self) -> Dict[str, object]:
        """Variables exposed to filtered files."""
        return {
            "project": {
                "groupId": self.group_id,
                "artifactId": self.artifact_id,
                "version": self.version,
                "name": self.name,
                "description": self.description,
                "url": self.url,
                "basedir": str(self.basedir),
                "scm": self.scm.model_dump(by_alias=True),
                "build": {
                    "directory": str(self.build_directory),
                    "finalName": self.final_name,
                },
            },
            "properties": dict(self.properties),
        }
