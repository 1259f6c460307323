"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from cleat.core.observability import configure_from_env, parse_level, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.raiseExceptions = True


class TestSetupLogging:
    def test_console_level(self):
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_unknown_level_falls_back_to_warning(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_debug_format(self):
        setup_logging(level="debug")
        fmt = logging.getLogger().handlers[0].formatter._fmt
        assert "%(lineno)d" in fmt

    def test_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "cleat.log"
        setup_logging(
            level="WARNING", log_file=str(log_file), log_file_level="DEBUG", project="demo-1234",
        )
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert root.handlers[0].level == logging.WARNING

        logging.getLogger("cleat.tests").debug("resolved npm script")
        for handler in root.handlers:
            handler.flush()
        content = log_file.read_text()
        assert "[demo-1234]" in content
        assert "resolved npm script" in content

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(level="INFO")
        setup_logging(level="ERROR")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.ERROR


class TestConfigureFromEnv:
    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("CLEAT_LOG_LEVEL", "INFO")
        monkeypatch.delenv("CLEAT_LOG_FILE", raising=False)
        configure_from_env()
        assert logging.getLogger().level == logging.INFO

    def test_flag_wins(self, monkeypatch):
        monkeypatch.setenv("CLEAT_LOG_LEVEL", "INFO")
        monkeypatch.delenv("CLEAT_LOG_FILE", raising=False)
        configure_from_env("ERROR")
        assert logging.getLogger().level == logging.ERROR

    def test_env_file(self, monkeypatch, tmp_path: Path):
        log_file = tmp_path / "cleat.log"
        monkeypatch.delenv("CLEAT_LOG_LEVEL", raising=False)
        monkeypatch.setenv("CLEAT_LOG_FILE", str(log_file))
        monkeypatch.setenv("CLEAT_LOG_FILE_LEVEL", "INFO")
        configure_from_env(project="demo")
        logging.getLogger("cleat.tests").info("loaded project")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "[demo] cleat.tests" in log_file.read_text()


class TestParseLevel:
    def test_names(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("Error") == logging.ERROR
        assert parse_level(None) == logging.WARNING
        assert parse_level("") == logging.WARNING
