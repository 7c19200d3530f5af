"""Logging module for SecretSync.

Provides structured logging with Rich console support.
"""

from secretsync.logging.logger import LogLevel, SecretSyncLogger
from secretsync.logging.config import (
    configure_logging,
    disable_logging,
    enable_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "SecretSyncLogger",
    "get_logger",
    "configure_logging",
    "disable_logging",
    "enable_logging",
]
