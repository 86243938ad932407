import zipfile
import pytest
from pathlib import Path

from dockerbuild.exceptions import ArtifactNotFoundError, ContextEscapeError, TemplateNotFoundError
from dockerbuild.io import (
    ArchiveTemplateSource,
    DirectoryTemplateSource,
    ResourceTemplateSource,
    builtin_templates,
    contained_path,
    copy_into,
    open_template,
)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    root = tmp_path / "template"
    (root / "conf").mkdir(parents=True)
    (root / "META-INF" / "maven").mkdir(parents=True)
    (root / "Dockerfile").write_text("FROM alpine\nARG greeting\n")
    (root / "conf" / "app.conf").write_text("key=value\n")
    (root / "META-INF" / "MANIFEST.MF").write_text("Manifest-Version: 1.0\n")
    (root / "META-INF" / "maven" / "pom.properties").write_text("x=1\n")
    return root


@pytest.fixture
def template_jar(tmp_path: Path) -> Path:
    jar = tmp_path / "templates.jar"
    with zipfile.ZipFile(jar, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        archive.writestr("web/Dockerfile", "FROM tomcat\nARG artifactWar\n")
        archive.writestr("web/bin/start.sh", "#!/bin/sh\n")
        archive.writestr("Dockerfile", "FROM alpine\n")
    return jar


class TestTemplateSources:
    """Tests for copying templates from directories, archives and resources."""

    def test_directory_copy_excludes_meta_inf(self, template_dir, tmp_path):
        dest = tmp_path / "out"
        copied = DirectoryTemplateSource(template_dir).copy_to(dest)
        assert sorted(copied) == ["Dockerfile", "conf/app.conf"]
        assert (dest / "conf" / "app.conf").read_text() == "key=value\n"
        assert not (dest / "META-INF").exists()

    def test_directory_without_dockerfile(self, template_dir, tmp_path):
        (template_dir / "Dockerfile").unlink()
        with pytest.raises(TemplateNotFoundError, match="Dockerfile"):
            DirectoryTemplateSource(template_dir).copy_to(tmp_path / "out")

    def test_archive_subdirectory(self, template_jar, tmp_path):
        dest = tmp_path / "out"
        copied = ArchiveTemplateSource(template_jar, "web").copy_to(dest)
        assert sorted(copied) == ["Dockerfile", "bin/start.sh"]
        assert (dest / "Dockerfile").read_text() == "FROM tomcat\nARG artifactWar\n"

    def test_archive_root(self, template_jar, tmp_path):
        dest = tmp_path / "out"
        copied = ArchiveTemplateSource(template_jar).copy_to(dest)
        assert "Dockerfile" in copied
        assert "web/Dockerfile" in copied
        assert not any(c.startswith("META-INF") for c in copied)

    def test_archive_entry_outside_context_rejected(self, tmp_path):
        jar = tmp_path / "evil.jar"
        with zipfile.ZipFile(jar, "w") as archive:
            archive.writestr("Dockerfile", "FROM alpine\n")
            archive.writestr("../escaped.txt", "x")
        dest = tmp_path / "ctx" / "context"
        with pytest.raises(ContextEscapeError):
            ArchiveTemplateSource(jar).copy_to(dest)
        assert not (tmp_path / "ctx" / "escaped.txt").exists()
        assert not (tmp_path / "escaped.txt").exists()

    def test_builtin_templates(self):
        assert "vanilla-war" in builtin_templates()
        assert "vanilla-jar" in builtin_templates()

    def test_resource_template(self, tmp_path):
        dest = tmp_path / "out"
        copied = ResourceTemplateSource("vanilla-war").copy_to(dest)
        assert copied == ["Dockerfile"]
        assert "ARG artifactWar" in (dest / "Dockerfile").read_text()

    def test_unknown_resource_template(self):
        with pytest.raises(TemplateNotFoundError):
            ResourceTemplateSource("no-such-template")


class TestOpenTemplate:
    """Tests for choosing a source from the configured template string."""

    def test_relative_directory(self, template_dir, tmp_path):
        source = open_template("template", tmp_path)
        assert isinstance(source, DirectoryTemplateSource)

    def test_archive_with_subdirectory(self, template_jar, tmp_path):
        source = open_template("templates.jar!web", tmp_path)
        assert isinstance(source, ArchiveTemplateSource)
        assert source.root == "web"

    def test_builtin_name(self, tmp_path):
        assert isinstance(open_template("vanilla-jar", tmp_path), ResourceTemplateSource)

    def test_missing(self, tmp_path):
        with pytest.raises(TemplateNotFoundError, match="template not found: nothing"):
            open_template("nothing", tmp_path)

    def test_missing_archive(self, tmp_path):
        with pytest.raises(TemplateNotFoundError, match="archive not found"):
            open_template("absent.war", tmp_path)


class TestContainedWrites:
    """Writes into the build context never leave it."""

    @pytest.mark.parametrize("name", ["../escape.txt", "/etc/passwd", "a/../../b", ".", ""])
    def test_escape_rejected(self, tmp_path, name):
        with pytest.raises(ContextEscapeError):
            contained_path(tmp_path / "context", name)

    def test_nested_allowed(self, tmp_path):
        root = tmp_path / "context"
        assert contained_path(root, "a/b.txt") == (root / "a" / "b.txt").resolve()

    def test_copy_into(self, tmp_path):
        root = tmp_path / "context"
        root.mkdir()
        source = tmp_path / "file.txt"
        source.write_text("x")
        assert copy_into(root, source) == "file.txt"
        assert copy_into(root, source, "renamed.txt") == "renamed.txt"
        assert (root / "renamed.txt").read_text() == "x"

    def test_copy_into_rejects_escape(self, tmp_path):
        root = tmp_path / "context"
        root.mkdir()
        source = tmp_path / "file.txt"
        source.write_text("x")
        with pytest.raises(ContextEscapeError):
            copy_into(root, source, "../file-copy.txt")

    def test_copy_missing_source(self, tmp_path):
        with pytest.raises(ArtifactNotFoundError):
            copy_into(tmp_path, tmp_path / "absent")
