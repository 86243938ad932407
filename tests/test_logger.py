import logging
import pytest

from dockerbuild.utils import parse_module_levels, setup_logger
from dockerbuild.utils.logger import _normalize_module_name


class TestModuleLevels:
    """Tests for per-module log level parsing."""

    def test_parse(self):
        assert parse_module_levels("bind=debug, engine=INFO,,broken") == {"bind": "DEBUG", "engine": "INFO"}

    def test_parse_empty(self):
        assert parse_module_levels(None) == {}

    @pytest.mark.parametrize("name, expected", [
        ("bind", "dockerbuild.arguments.binding"),
        ("builder.*", "dockerbuild.builder"),
        ("arguments.scanner", "dockerbuild.arguments.scanner"),
        ("dockerbuild.vcs", "dockerbuild.vcs"),
        ("urllib3", "urllib3"),
    ])
    def test_normalize(self, name, expected):
        assert _normalize_module_name(name) == expected

    def test_env_levels_applied(self, monkeypatch):
        monkeypatch.setenv("DOCKERBUILD_LOG_LEVELS", "ph=WARNING")
        setup_logger()
        assert logging.getLogger("dockerbuild.placeholders").level == logging.WARNING
        logging.getLogger("dockerbuild.placeholders").setLevel(logging.NOTSET)
