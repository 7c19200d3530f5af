"""Configuration classes for SecretSync.

This module provides configuration models for the remote store client and
the ephemeral lease manager, and the console logger.
"""

from __future__ import annotations

import os
from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator

from secretsync.errors.exceptions import InvalidConfigError, MissingCredentialError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_LEVELS = ("debug", "info", "warning", "error")


def _env_bool(name: str, field: str, default: bool) -> bool:
    raw = os.getenv(name)
    if not raw:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise InvalidConfigError(field, raw, "Must be true or false.")


class StoreConfig(BaseModel):
    """Connection settings for a Secret Server REST API.

    The bearer token is issued out of band; this library never logs in.

    Example:
        >>> config = StoreConfig(
        ...     server_url="https://vault.example.com/SecretServer",
        ...     token="...",
        ... )
    """

    server_url: str = Field(..., description="Base URL, e.g. https://host/SecretServer")
    token: str = Field(..., repr=False, description="Bearer token for the REST API")
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for store requests",
    )
    api_path: str = Field(default="api/v1", description="REST API path prefix")
    verify_tls: bool = Field(default=True, description="Verify server certificates")

    @field_validator("server_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def api_url(self) -> str:
        """Base URL of the REST API."""
        return f"{self.server_url}/{self.api_path.strip('/')}"

    @classmethod
    def from_env(
        cls,
        server_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ) -> StoreConfig:
        """Build a config from arguments, falling back to TSS_* env vars.

        Explicit arguments take precedence over the environment.

        Raises:
            MissingCredentialError: If the server URL or token is missing.
            InvalidConfigError: If TSS_TIMEOUT or TSS_VERIFY_TLS is malformed.
        """
        server_url = server_url or os.getenv("TSS_SERVER_URL")
        token = token or os.getenv("TSS_TOKEN")

        if not server_url:
            raise MissingCredentialError("server_url", "TSS_SERVER_URL")
        if not token:
            raise MissingCredentialError("token", "TSS_TOKEN")

        if timeout is None:
            raw_timeout = os.getenv("TSS_TIMEOUT")
            if raw_timeout:
                try:
                    timeout = float(raw_timeout)
                except ValueError as e:
                    raise InvalidConfigError(
                        "timeout", raw_timeout, "Must be a number of seconds."
                    ) from e

        verify_tls = _env_bool("TSS_VERIFY_TLS", "verify_tls", True)

        kwargs: dict[str, object] = {
            "server_url": server_url,
            "token": token,
            "verify_tls": verify_tls,
        }
        if timeout is not None:
            if timeout <= 0:
                raise InvalidConfigError("timeout", timeout, "Must be positive.")
            kwargs["timeout"] = timeout
        return cls(**kwargs)


class LeaseConfig(BaseModel):
    """Configuration for ephemeral leases.

    Example:
        >>> config = LeaseConfig(renew_interval_seconds=120)
    """

    renew_interval_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Seconds from open or renewal until the next renewal is due",
    )

    @property
    def renew_interval(self) -> timedelta:
        return timedelta(seconds=self.renew_interval_seconds)


class LoggingConfig(BaseModel):
    """Configuration for the console logger.

    Example:
        >>> config = LoggingConfig(level="debug", show_timestamps=False)
    """

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="info", description="Minimum level: debug, info, warning or error")
    enabled: bool = Field(default=True, description="Whether log output is written")
    show_timestamps: bool = Field(default=True, description="Prefix lines with the time")
    show_level: bool = Field(default=True, description="Prefix lines with the level")

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        # Accepts LogLevel members as well as plain strings.
        value = getattr(value, "value", value)
        if isinstance(value, str):
            value = value.strip().lower()
            if value not in _LOG_LEVELS:
                raise ValueError(f"level must be one of {', '.join(_LOG_LEVELS)}")
        return value

    @classmethod
    def from_env(cls) -> LoggingConfig:
        """Build a config from TSS_LOG_LEVEL and TSS_LOG_ENABLED.

        Raises:
            InvalidConfigError: If either variable is malformed.
        """
        kwargs: dict[str, object] = {
            "enabled": _env_bool("TSS_LOG_ENABLED", "log_enabled", True),
        }
        raw_level = os.getenv("TSS_LOG_LEVEL")
        if raw_level:
            if raw_level.strip().lower() not in _LOG_LEVELS:
                raise InvalidConfigError(
                    "log_level", raw_level, f"Must be one of {', '.join(_LOG_LEVELS)}."
                )
            kwargs["level"] = raw_level
        return cls(**kwargs)
