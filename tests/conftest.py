import pytest
from pathlib import Path

from dockerbuild.arguments import EvalContext
from dockerbuild.datacls import ProjectInfo


@pytest.fixture
def make_project(tmp_path: Path):
    """A factory for ProjectInfo rooted in the temporary directory."""
    def _make(**overrides) -> ProjectInfo:
        data = {
            "groupId": "com.example.app",
            "artifactId": "My-Service",
            "version": "1.2.0",
            "basedir": tmp_path,
        }
        data.update(overrides)
        return ProjectInfo.model_validate(data)
    return _make


@pytest.fixture
def project(make_project) -> ProjectInfo:
    return make_project()


@pytest.fixture
def context_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "context"
    directory.mkdir()
    return directory


@pytest.fixture
def eval_ctx(project, context_dir) -> EvalContext:
    return EvalContext(project=project, context_dir=context_dir)
