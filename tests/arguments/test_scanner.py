import pytest

from dockerbuild.arguments import scan, scan_file
from dockerbuild.datacls import FormalArgument
from dockerbuild.exceptions import DockerfileSyntaxError, DockerbuildIOError


class TestScanDeclarations:
    """Tests for discovering ARG declarations."""

    def test_counts_and_defaults(self):
        """Every distinct ARG shows up once with its default."""
        text = (
            "FROM alpine\n"
            "ARG greeting\n"
            "ARG name=world\n"
            "RUN echo $greeting $name\n"
            "ARG empty=\n"
        )
        formals = scan(text)
        assert list(formals) == ["greeting", "name", "empty"]
        assert formals["greeting"] == FormalArgument(name="greeting")
        assert formals["greeting"].mandatory
        assert formals["name"].default == "world"
        assert formals["empty"].default == ""
        assert not formals["empty"].mandatory

    def test_keyword_is_case_insensitive(self):
        formals = scan("arg lower=1\nArg Mixed\n")
        assert list(formals) == ["lower", "Mixed"]

    def test_names_are_case_sensitive(self):
        formals = scan("ARG name=a\nARG Name=b\n")
        assert formals["name"].default == "a"
        assert formals["Name"].default == "b"

    def test_comments_and_blank_lines_are_skipped(self):
        text = "# ARG commented=1\n\n   \nARG real\n"
        assert list(scan(text)) == ["real"]

    def test_line_continuation(self):
        """Backslash continuations join into one instruction."""
        text = "ARG first=1 \\\n    second=2\nRUN true\n"
        formals = scan(text)
        assert formals["first"].default == "1"
        assert formals["second"].default == "2"

    def test_quoted_default(self):
        formals = scan('ARG message="hello world"\nARG single=\'x y\'\n')
        assert formals["message"].default == "hello world"
        assert formals["single"].default == "x y"

    def test_default_may_contain_equals(self):
        assert scan("ARG opts=-Da=b\n")["opts"].default == "-Da=b"

    def test_other_instructions_are_ignored(self):
        text = "FROM alpine\nENV ARG=1\nLABEL ARG=x\nARGUMENTS x\n"
        assert scan(text) == {}


class TestRedeclaration:
    """A redeclared ARG keeps its position; a later default wins."""

    def test_later_default_overwrites(self):
        formals = scan("ARG a=1\nARG b\nARG a=2\n")
        assert list(formals) == ["a", "b"]
        assert formals["a"].default == "2"

    def test_later_declaration_without_default_keeps_default(self):
        formals = scan("ARG a=1\nFROM alpine\nARG a\n")
        assert formals["a"].default == "1"

    def test_mandatory_then_default(self):
        formals = scan("ARG a\nARG a=x\n")
        assert formals["a"].default == "x"


class TestMalformed:
    """Malformed ARG lines are rejected with the line number."""

    @pytest.mark.parametrize("line", ["ARG", "ARG =x", "ARG 1abc", "ARG na-me=1", 'ARG a="unterminated'])
    def test_rejected(self, line):
        with pytest.raises(DockerfileSyntaxError, match="line 2"):
            scan(f"FROM alpine\n{line}\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DockerbuildIOError):
            scan_file(tmp_path / "Dockerfile")

    def test_scan_file(self, tmp_path):
        dockerfile = tmp_path / "Dockerfile"
        dockerfile.write_text("FROM alpine\nARG x=1\n")
        assert scan_file(dockerfile)["x"].default == "1"
