import base64
import pytest

from dockerbuild.arguments import Evaluator, EvalContext
from dockerbuild.exceptions import (
    ArtifactNotFoundError,
    EvaluationError,
    MetadataNotFoundError,
)
from dockerbuild.registry import DirectiveRegistry, directive


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


@pytest.fixture
def evaluator(eval_ctx) -> Evaluator:
    return Evaluator(eval_ctx)


class TestEvaluationGrammar:
    """Tests for literals, nesting and malformed directives."""

    @pytest.mark.parametrize("literal", ["", "hello", "a:b", "50%", " %base64:x", "Base64:x"])
    def test_literal_unchanged(self, evaluator, literal):
        assert evaluator.evaluate(literal) == literal

    def test_base64(self, evaluator):
        assert evaluator.evaluate("%base64:hello") == b64("hello")

    def test_base64_utf8(self, evaluator):
        assert evaluator.evaluate("%base64:grüße") == b64("grüße")

    def test_nested_is_inside_out(self, evaluator):
        assert evaluator.evaluate("%base64:%base64:hi") == b64(b64("hi"))

    def test_inner_value_keeps_colons(self, evaluator):
        assert evaluator.evaluate("%base64:user:pass") == b64("user:pass")

    def test_missing_colon(self, evaluator):
        with pytest.raises(EvaluationError, match="invalid value: %base64"):
            evaluator.evaluate("%base64")

    def test_unknown_directive(self, evaluator):
        with pytest.raises(EvaluationError, match="unknown directive: nope"):
            evaluator.evaluate("%nope:x")

    def test_unknown_directive_checked_before_inner(self, evaluator):
        """The inner value is not evaluated when the outer directive is unknown."""
        with pytest.raises(EvaluationError, match="unknown directive: outer"):
            evaluator.evaluate("%outer:%inner:x")

    def test_custom_registry(self, eval_ctx):
        @directive("upper")
        def upper(value, ctx):
            return value.upper()

        registry = DirectiveRegistry()
        registry.register("upper", upper)
        assert Evaluator(eval_ctx, registry).evaluate("%upper:abc") == "ABC"

    def test_default_registry_names(self):
        names = DirectiveRegistry.default().names()
        assert names == sorted(["artifact", "base64", "copy", "file", "filter", "pom", "property"])


class TestFileDirectives:
    """Tests for file, filter and copy."""

    def test_file_relative_to_basedir(self, evaluator, tmp_path):
        (tmp_path / "token.txt").write_text("secret\n", encoding="utf-8")
        assert evaluator.evaluate("%file:token.txt") == "secret\n"

    def test_base64_of_file(self, evaluator, tmp_path):
        (tmp_path / "token.txt").write_text("secret", encoding="utf-8")
        assert evaluator.evaluate("%base64:%file:token.txt") == b64("secret")

    def test_file_missing(self, evaluator):
        with pytest.raises(ArtifactNotFoundError, match="missing.txt"):
            evaluator.evaluate("%file:missing.txt")

    def test_filter_renders_project(self, evaluator, tmp_path):
        (tmp_path / "app.properties").write_text(
            "version={{ project.version }}\nowner={{ properties.owner }}\n", encoding="utf-8"
        )
        ctx = evaluator.ctx
        evaluator.ctx = EvalContext(
            project=ctx.project.model_copy(update={"properties": {"owner": "ops"}}),
            context_dir=ctx.context_dir,
        )
        assert evaluator.evaluate("%filter:app.properties") == "version=1.2.0\nowner=ops\n"

    def test_filter_undefined_variable(self, evaluator, tmp_path):
        (tmp_path / "bad.txt").write_text("{{ nothing }}", encoding="utf-8")
        with pytest.raises(EvaluationError, match="cannot filter"):
            evaluator.evaluate("%filter:bad.txt")

    def test_copy_into_context(self, evaluator, tmp_path, context_dir):
        source = tmp_path / "conf" / "server.xml"
        source.parent.mkdir()
        source.write_text("<server/>", encoding="utf-8")
        assert evaluator.evaluate("%copy:conf/server.xml") == "server.xml"
        assert (context_dir / "server.xml").read_text(encoding="utf-8") == "<server/>"

    def test_copy_missing(self, evaluator):
        with pytest.raises(ArtifactNotFoundError):
            evaluator.evaluate("%copy:nothing.xml")


class TestArtifactDirective:
    """Tests for build output lookup."""

    @pytest.fixture
    def target(self, project):
        project.build_directory.mkdir(parents=True)
        return project.build_directory

    def test_artifact_by_extension(self, evaluator, target, context_dir):
        (target / "My-Service-1.2.0.war").write_bytes(b"war")
        assert evaluator.evaluate("%artifact:war") == "My-Service-1.2.0.war"
        assert (context_dir / "My-Service-1.2.0.war").read_bytes() == b"war"

    def test_artifact_with_classifier(self, evaluator, target, context_dir):
        (target / "My-Service-1.2.0-sources.jar").write_bytes(b"src")
        assert evaluator.evaluate("%artifact:sources:jar") == "My-Service-1.2.0-sources.jar"

    def test_artifact_missing(self, evaluator, target):
        with pytest.raises(ArtifactNotFoundError, match="My-Service-1.2.0.ear"):
            evaluator.evaluate("%artifact:ear")

    @pytest.mark.parametrize("value", ["%artifact:", "%artifact::jar"])
    def test_artifact_malformed(self, evaluator, value):
        with pytest.raises(EvaluationError):
            evaluator.evaluate(value)


class TestMetadataDirectives:
    """Tests for pom and property lookups."""

    def test_pom_coordinates(self, evaluator):
        assert evaluator.evaluate("%pom:groupId") == "com.example.app"
        assert evaluator.evaluate("%pom:finalName") == "My-Service-1.2.0"

    def test_pom_scm_prefers_developer_connection(self, make_project, context_dir):
        project = make_project(scm={"connection": "scm:git:ro", "developerConnection": "scm:git:rw"})
        evaluator = Evaluator(EvalContext(project=project, context_dir=context_dir))
        assert evaluator.evaluate("%pom:scm") == "scm:git:rw"

    def test_pom_scm_missing(self, evaluator):
        with pytest.raises(MetadataNotFoundError, match="scm"):
            evaluator.evaluate("%pom:scm")

    def test_pom_unknown_key(self, evaluator):
        with pytest.raises(EvaluationError, match="unknown pom key: colour"):
            evaluator.evaluate("%pom:colour")

    def test_property(self, make_project, context_dir):
        project = make_project(properties={"java.version": "17"})
        evaluator = Evaluator(EvalContext(project=project, context_dir=context_dir))
        assert evaluator.evaluate("%property:java.version") == "17"

    def test_property_missing(self, evaluator):
        with pytest.raises(MetadataNotFoundError, match="nope"):
            evaluator.evaluate("%property:nope")
