"""Unit tests for Logging module."""

from __future__ import annotations

from io import StringIO

import pytest
from pydantic import ValidationError
from rich.console import Console

from secretsync.core.config import LoggingConfig
from secretsync.logging.config import (
    configure_logging,
    disable_logging,
    enable_logging,
    get_logger,
)
from secretsync.logging.logger import LogLevel, SecretSyncLogger


def _logger(level: LogLevel = LogLevel.INFO) -> tuple[SecretSyncLogger, StringIO]:
    output = StringIO()
    console = Console(file=output, width=200)
    return SecretSyncLogger(level=level, console=console, show_timestamps=False), output


class TestLogLevel:
    """Tests for LogLevel."""

    def test_level_ranking(self) -> None:
        """Levels should have correct rank order."""
        assert LogLevel.DEBUG.rank < LogLevel.INFO.rank
        assert LogLevel.INFO.rank < LogLevel.WARNING.rank
        assert LogLevel.WARNING.rank < LogLevel.ERROR.rank


class TestSecretSyncLogger:
    """Tests for SecretSyncLogger."""

    def test_default_creation(self) -> None:
        logger = SecretSyncLogger()

        assert logger.level == LogLevel.INFO
        assert logger.enabled is True

    def test_level_filtering(self) -> None:
        """Should filter messages below level."""
        logger, output = _logger(LogLevel.WARNING)

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")

        result = output.getvalue()
        assert "Debug message" not in result
        assert "Info message" not in result
        assert "Warning message" in result

    def test_disabled_logging(self) -> None:
        logger, output = _logger()
        logger.enabled = False

        logger.error("Should not appear")

        assert output.getvalue() == ""

    def test_context_rendered_as_key_value(self) -> None:
        logger, output = _logger()

        logger.info("Fetching template", template_id=6003)

        assert "Fetching template template_id=6003" in output.getvalue()

    def test_markup_in_values_is_escaped(self) -> None:
        logger, output = _logger()

        logger.info("Field [bold]x[/bold]", field="[red]Password[/red]")

        result = output.getvalue()
        assert "[bold]x[/bold]" in result
        assert "[red]Password[/red]" in result

    def test_operation_lifecycle(self) -> None:
        logger, output = _logger()

        logger.operation_start("create", "db-admin")
        logger.operation_end("create", "42", 3)

        result = output.getvalue()
        assert "create db-admin" in result
        assert "completed (id 42 | 3 fields)" in result

    def test_field_resolved_is_debug_only(self) -> None:
        logger, output = _logger()
        logger.field_resolved("Password", "generate")
        assert output.getvalue() == ""

        logger.level = LogLevel.DEBUG
        logger.field_resolved("Password", "generate")
        assert "Password <- generate" in output.getvalue()

    def test_anomaly_is_warning(self) -> None:
        logger, output = _logger(LogLevel.WARNING)

        logger.anomaly("Declared field missing", field="Notes")

        result = output.getvalue()
        assert "WARNING" in result
        assert "Declared field missing field=Notes" in result

    def test_lease_event(self) -> None:
        logger, output = _logger()

        logger.lease_event("opened", 2, 1)
        logger.lease_event("closed", 2)

        result = output.getvalue()
        assert "opened (2 requested, 1 retrieved)" in result
        assert "closed (2 requested)" in result


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_logger_singleton(self) -> None:
        assert get_logger() is get_logger()
        assert isinstance(get_logger(), SecretSyncLogger)

    def test_configure_logging(self) -> None:
        logger = configure_logging(level="debug", show_timestamps=False)

        assert logger.level == LogLevel.DEBUG
        assert get_logger() is logger
        configure_logging()

    def test_disable_enable_logging(self) -> None:
        configure_logging()

        disable_logging()
        assert get_logger().enabled is False

        enable_logging()
        assert get_logger().enabled is True

    def test_get_logger_follows_environment(self, monkeypatch) -> None:
        monkeypatch.setattr("secretsync.logging.config._logger", None)
        monkeypatch.setenv("TSS_LOG_LEVEL", "error")
        monkeypatch.setenv("TSS_LOG_ENABLED", "false")

        logger = get_logger()

        assert logger.level == LogLevel.ERROR
        assert logger.enabled is False

    def test_configure_from_config(self) -> None:
        output = StringIO()
        config = LoggingConfig(level="warning", show_timestamps=False, show_level=False)

        logger = configure_logging(config=config, console=Console(file=output, width=200))
        logger.info("hidden")
        logger.warning("shown")

        assert logger.level == LogLevel.WARNING
        assert output.getvalue().strip() == "shown"
        configure_logging()

    def test_overrides_win_over_config(self) -> None:
        logger = configure_logging(level=LogLevel.DEBUG, config=LoggingConfig(level="error"))

        assert logger.level == LogLevel.DEBUG
        configure_logging()

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            configure_logging(level="verbose")
