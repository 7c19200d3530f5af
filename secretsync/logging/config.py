"""Global logger configuration.

The process-wide logger is built from :class:`LoggingConfig`. Until
``configure_logging`` is called, it follows the TSS_LOG_LEVEL and
TSS_LOG_ENABLED environment variables.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console

from secretsync.core.config import LoggingConfig
from secretsync.logging.logger import LogLevel, SecretSyncLogger


_logger: SecretSyncLogger | None = None


def _build(config: LoggingConfig, console: Console | None = None) -> SecretSyncLogger:
    return SecretSyncLogger(
        level=LogLevel(config.level),
        console=console,
        show_timestamps=config.show_timestamps,
        show_level=config.show_level,
        enabled=config.enabled,
    )


def get_logger() -> SecretSyncLogger:
    """Get the global logger, creating it from the environment if needed.

    Raises:
        InvalidConfigError: If TSS_LOG_LEVEL or TSS_LOG_ENABLED is malformed.
    """
    global _logger
    if _logger is None:
        _logger = _build(LoggingConfig.from_env())
    return _logger


def configure_logging(
    level: LogLevel | str | None = None,
    enabled: bool | None = None,
    show_timestamps: bool | None = None,
    show_level: bool | None = None,
    *,
    config: LoggingConfig | None = None,
    console: Console | None = None,
) -> SecretSyncLogger:
    """Replace the global logger.

    Keyword settings override ``config``; anything left unset falls back
    to the ``LoggingConfig`` defaults.

    Args:
        level: Minimum log level (LogLevel or string).
        enabled: Whether logging is enabled.
        show_timestamps: Whether to show timestamps.
        show_level: Whether to show the log level.
        config: Base settings, e.g. ``LoggingConfig.from_env()``.
        console: Rich console to write to; stderr by default.

    Returns:
        The configured logger instance.

    Raises:
        pydantic.ValidationError: If an override is not a valid setting.

    Example:
        >>> configure_logging(level="debug", show_timestamps=False)
        >>> configure_logging(config=LoggingConfig.from_env())
    """
    global _logger

    overrides: dict[str, Any] = {
        "level": level,
        "enabled": enabled,
        "show_timestamps": show_timestamps,
        "show_level": show_level,
    }
    settings = (config or LoggingConfig()).model_dump()
    settings.update({k: v for k, v in overrides.items() if v is not None})

    _logger = _build(LoggingConfig.model_validate(settings), console)
    return _logger


def disable_logging() -> None:
    """Disable all logging."""
    get_logger().enabled = False


def enable_logging() -> None:
    """Enable logging."""
    get_logger().enabled = True
