"""SecretSync logger implementation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from rich.console import Console
from rich.markup import escape


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Get numeric rank for comparison."""
        ranks = {"debug": 0, "info": 1, "warning": 2, "error": 3}
        return ranks[self.value]


class SecretSyncLogger:
    """Structured logger for SecretSync.

    Provides Rich-formatted logging for reconciliation and lease tracking.
    Callers pass identities and value *sources*, never secret values.

    Example:
        >>> logger = SecretSyncLogger(level=LogLevel.DEBUG)
        >>> logger.info("Fetching template", template_id=6)
        >>> logger.operation_start("create", "db-admin")
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        console: Console | None = None,
        show_timestamps: bool = True,
        show_level: bool = True,
        enabled: bool = True,
    ) -> None:
        """Initialize logger.

        Args:
            level: Minimum log level to display.
            console: Rich console instance (created on stderr if None).
            show_timestamps: Whether to show timestamps.
            show_level: Whether to show log level.
            enabled: Whether logging is enabled.
        """
        self._level = level
        self._console = console or Console(stderr=True)
        self._show_timestamps = show_timestamps
        self._show_level = show_level
        self._enabled = enabled

    @property
    def level(self) -> LogLevel:
        """Current log level."""
        return self._level

    @level.setter
    def level(self, value: LogLevel) -> None:
        """Set log level."""
        self._level = value

    @property
    def enabled(self) -> bool:
        """Whether logging is enabled."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Enable or disable logging."""
        self._enabled = value

    def _should_log(self, level: LogLevel) -> bool:
        """Check if message should be logged."""
        return self._enabled and level.rank >= self._level.rank

    def _format_prefix(self, level: LogLevel) -> str:
        """Format log prefix with timestamp and level."""
        parts = []

        if self._show_timestamps:
            timestamp = datetime.now().strftime("%H:%M:%S")
            parts.append(f"[dim]{timestamp}[/]")

        if self._show_level:
            level_colors = {
                LogLevel.DEBUG: "dim",
                LogLevel.INFO: "blue",
                LogLevel.WARNING: "yellow",
                LogLevel.ERROR: "red bold",
            }
            color = level_colors.get(level, "white")
            parts.append(f"[{color}]{level.value.upper():7}[/]")

        return " ".join(parts)

    def _log(self, level: LogLevel, message: str, **context: Any) -> None:
        """Internal log method."""
        if not self._should_log(level):
            return

        prefix = self._format_prefix(level)
        message = escape(message)

        if context:
            context_str = " ".join(
                f"[dim]{k}=[/]{escape(str(v))}" for k, v in context.items()
            )
            message = f"{message} {context_str}"

        self._console.print(f"{prefix} {message}")

    def debug(self, message: str, **context: Any) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message, **context)

    # Reconciliation-specific logging methods

    def operation_start(self, operation: str, target: str | None = None) -> None:
        """Log the start of a lifecycle operation."""
        if not self._should_log(LogLevel.INFO):
            return

        target_str = f" [bold]{escape(target)}[/]" if target else ""
        self._console.print(
            f"{self._format_prefix(LogLevel.INFO)} "
            f"[bold blue]▶ {operation}[/]{target_str}"
        )

    def operation_end(
        self,
        operation: str,
        secret_id: str | None = None,
        field_count: int | None = None,
    ) -> None:
        """Log completion of a lifecycle operation."""
        if not self._should_log(LogLevel.INFO):
            return

        details = []
        if secret_id is not None:
            details.append(f"id {secret_id}")
        if field_count is not None:
            details.append(f"{field_count} fields")
        detail_str = f" ({' | '.join(details)})" if details else ""

        self._console.print(
            f"{self._format_prefix(LogLevel.INFO)} "
            f"[bold green]✓ {operation}[/] completed{detail_str}"
        )

    def field_resolved(self, field: str, source: str) -> None:
        """Log which source a field value was resolved from."""
        if not self._should_log(LogLevel.DEBUG):
            return

        self._console.print(
            f"{self._format_prefix(LogLevel.DEBUG)} "
            f"  [dim]Field:[/] {escape(field)} <- {source}"
        )

    def anomaly(self, message: str, **context: Any) -> None:
        """Log a tolerated inconsistency between desired and remote state."""
        self._log(LogLevel.WARNING, f"⚠ {message}", **context)

    def lease_event(self, event: str, requested: int, retrieved: int | None = None) -> None:
        """Log an ephemeral lease transition."""
        if not self._should_log(LogLevel.INFO):
            return

        counts = f"{requested} requested"
        if retrieved is not None:
            counts += f", {retrieved} retrieved"

        self._console.print(
            f"{self._format_prefix(LogLevel.INFO)} "
            f"[bold magenta]◆ Lease[/] {event} ({counts})"
        )
