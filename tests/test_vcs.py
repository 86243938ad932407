import git
import pytest

from dockerbuild import vcs
from dockerbuild.exceptions import VcsError


@pytest.fixture
def repo(tmp_path):
    repository = git.Repo.init(tmp_path / "project")
    (tmp_path / "project" / "module").mkdir()
    return repository


class TestVcs:
    """Tests for origin and branch lookups."""

    def test_origin(self, repo):
        repo.create_remote("origin", "https://example.org/team/app.git")
        module = repo.working_tree_dir + "/module"
        assert vcs.origin(module) == "https://example.org/team/app.git"
        assert vcs.origin_or_unknown(module) == "git:https://example.org/team/app.git"

    def test_no_origin(self, repo):
        with pytest.raises(VcsError, match="no origin"):
            vcs.origin(repo.working_tree_dir)
        assert vcs.origin_or_unknown(repo.working_tree_dir) == "unknown"

    def test_not_a_repository(self, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()
        with pytest.raises(VcsError):
            vcs.origin(outside / "missing")

    def test_current_branch(self, repo):
        repo.git.symbolic_ref("HEAD", "refs/heads/feature/login")
        assert vcs.current_branch(repo.working_tree_dir) == "feature/login"

    def test_detached_head(self, repo, tmp_path):
        (tmp_path / "project" / "README").write_text("x")
        repo.index.add(["README"])
        commit = repo.index.commit("initial")
        repo.git.checkout(commit.hexsha)
        with pytest.raises(VcsError, match="detached"):
            vcs.current_branch(repo.working_tree_dir)

    def test_missing_git_binary(self, repo, monkeypatch):
        repo.create_remote("origin", "https://example.org/team/app.git")
        monkeypatch.setattr(git.cmd.Git, "GIT_PYTHON_GIT_EXECUTABLE", "/nonexistent/git")
        assert vcs.origin_or_unknown(repo.working_tree_dir) == "unknown"
        with pytest.raises(VcsError, match="git is not available"):
            vcs.current_branch(repo.working_tree_dir)
