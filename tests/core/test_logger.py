"""Unit tests for core.logger module.

Tests the structlog-based logging configuration:
- configure_logging() installs one stdout handler on the root logger
- LOG_LEVEL and LOG_FORMAT are honored
- Noisy third-party loggers are quieted
"""

import json
import logging

import pytest
import structlog

from exercise_streaks.core import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def _clean_root_logger():
    """Save and restore root logger and structlog state around each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    structlog.reset_defaults()


@pytest.mark.unit
class TestConfigureLogging:
    def test_installs_single_handler(self):
        configure_logging()
        configure_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(
            handlers[0].formatter, structlog.stdlib.ProcessorFormatter
        )

    def test_default_level_is_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_quiets_third_party_loggers(self):
        configure_logging()
        assert logging.getLogger("aiosqlite").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_json_output_keeps_japanese_text(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging()

        get_logger("tests.logger").info("record.created", message="記録しました")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        parsed = json.loads(line)
        assert parsed["event"] == "record.created"
        assert parsed["message"] == "記録しました"
        assert parsed["level"] == "info"
        assert parsed["logger"] == "tests.logger"
        assert "記録しました" in line

    def test_bound_context_is_merged(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging()

        bind_contextvars(user_id=3)
        try:
            get_logger("tests.logger").info("record.duplicate")
        finally:
            clear_contextvars()

        parsed = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert parsed["user_id"] == 3
