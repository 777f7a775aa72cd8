# tests/core/test_logging.py
"""Tests for structured logging configuration."""

import json
import logging

import pytest

from completion_mux.core.config import LoggingSettings
from completion_mux.core.logging import configure_logging, get_logger, log_context


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_logger_returns_logger(self) -> None:
        """get_logger returns a bound logger."""
        logger = get_logger("test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "debug")
        assert hasattr(logger, "bind")

    def test_logger_outputs_structured(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Logger outputs structured JSON."""
        configure_logging(LoggingSettings(json_output=True))
        logger = get_logger("test")

        logger.info("test message", key="value")

        captured = capsys.readouterr()
        log_line = captured.out.strip().split("\n")[-1]
        data = json.loads(log_line)
        assert data["event"] == "test message"
        assert data["key"] == "value"
        assert data["level"] == "info"
        assert "_record" not in data
        assert "_from_structlog" not in data

    def test_logger_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Logger outputs human-readable in console mode."""
        configure_logging(LoggingSettings(json_output=False))
        logger = get_logger("test")

        logger.info("test message", key="value")

        captured = capsys.readouterr()
        assert "test message" in captured.out
        assert not captured.out.strip().startswith("{")

    def test_level_filters_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        """DEBUG events are dropped at INFO level."""
        configure_logging(LoggingSettings(json_output=True, level="INFO"))
        logger = get_logger("test")

        logger.debug("hidden")
        logger.info("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_asyncio_logger_clamped_to_warning(self) -> None:
        """asyncio's debug chatter stays off even in DEBUG mode."""
        configure_logging(LoggingSettings(level="DEBUG"))

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("asyncio").getEffectiveLevel() >= logging.WARNING

    def test_noisy_logger_never_less_restrictive_than_root(self) -> None:
        configure_logging(LoggingSettings(level="ERROR"))

        assert logging.getLogger("asyncio").getEffectiveLevel() == logging.ERROR

    def test_stdlib_loggers_emit_json_when_json_output_enabled(self, capsys: pytest.CaptureFixture[str]) -> None:
        """stdlib loggers go through the same processor chain."""
        configure_logging(LoggingSettings(json_output=True))

        logging.getLogger("test.stdlib.module").info("message from stdlib logger")

        log_line = capsys.readouterr().out.strip().split("\n")[-1]
        data = json.loads(log_line)
        assert data["event"] == "message from stdlib logger"

    def test_defaults_to_console_at_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging()

        assert logging.getLogger().level == logging.INFO
        get_logger("test").info("default output")
        assert "default output" in capsys.readouterr().out


class TestLogContext:
    """Fields bound with log_context reach both structlog and stdlib records."""

    def test_context_merged_into_stdlib_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(json_output=True))

        with log_context(multiplexer="batch-7"):
            logging.getLogger("completion_mux.mux.multiplexer").info("delivered")
        logging.getLogger("completion_mux.mux.multiplexer").info("after")

        inside, after = (json.loads(line) for line in capsys.readouterr().out.strip().split("\n")[-2:])
        assert inside["multiplexer"] == "batch-7"
        assert inside["logger"] == "completion_mux.mux.multiplexer"
        assert "multiplexer" not in after

    def test_context_merged_into_structlog_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(json_output=True))

        with log_context(run="nightly"):
            get_logger("test").info("started")

        data = json.loads(capsys.readouterr().out.strip().split("\n")[-1])
        assert data["run"] == "nightly"
        assert "_record" not in data
