"""SecretSync exception hierarchy.

All exceptions inherit from SecretSyncError for easy catching.
Each exception includes a `retryable` flag to indicate if the operation can be retried.
"""

from __future__ import annotations


class SecretSyncError(Exception):
    """Base exception for all SecretSync errors."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


# Configuration Errors
class ConfigurationError(SecretSyncError):
    """Configuration-related errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class MissingCredentialError(ConfigurationError):
    """A required connection setting is missing."""

    def __init__(self, setting: str, env_var: str) -> None:
        super().__init__(
            f"Store setting '{setting}' is not configured. "
            f"Pass it explicitly or set the {env_var} environment variable."
        )
        self.setting = setting
        self.env_var = env_var


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid config for '{field}': {value}. {reason}")
        self.field = field
        self.value = value


# Reconciliation Errors
class ReconcileError(SecretSyncError):
    """Base class for errors raised before any remote mutation."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class BindingError(ReconcileError):
    """A declared field matches no field of the secret template."""

    def __init__(self, field: str, available: list[str]) -> None:
        super().__init__(
            f"Field '{field}' not found in secret template. "
            f"Available fields: {', '.join(available) or '(none)'}"
        )
        self.field = field
        self.available = available


class CoercionError(ReconcileError):
    """An identifier attribute is not a non-negative integer."""

    def __init__(self, attribute: str, value: object) -> None:
        super().__init__(
            f"Invalid {attribute}: {value!r} is not a non-negative integer"
        )
        self.attribute = attribute
        self.value = value


class GenerationError(ReconcileError):
    """The remote store failed to generate a value for a field."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Failed to generate value for field '{field}': {reason}")
        self.field = field
        self.reason = reason


class IdentityError(ReconcileError):
    """A record's id is missing or disagrees with the durable id."""

    def __init__(self, message: str, *, expected: str | None, actual: str | None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


# Transport Errors
class TransportError(SecretSyncError):
    """Base class for remote store failures."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        secret_id: int | None = None,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.operation = operation
        self.secret_id = secret_id
        self.status_code = status_code


class SecretNotFoundError(TransportError):
    """The remote store has no secret (or template) with this id."""

    def __init__(self, secret_id: int, *, operation: str = "read") -> None:
        super().__init__(
            f"Secret {secret_id} not found",
            operation=operation,
            secret_id=secret_id,
            status_code=404,
        )


class StoreAuthenticationError(TransportError):
    """The store rejected the configured credentials."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int,
        secret_id: int | None = None,
    ) -> None:
        super().__init__(
            message, operation=operation, secret_id=secret_id, status_code=status_code
        )


class StoreTimeoutError(TransportError):
    """Request to the store timed out. Can be retried."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        timeout_seconds: float,
        secret_id: int | None = None,
    ) -> None:
        super().__init__(
            message, operation=operation, secret_id=secret_id, retryable=True
        )
        self.timeout_seconds = timeout_seconds


class StoreAPIError(TransportError):
    """General store API error. Server-side failures may be retried."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        secret_id: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            secret_id=secret_id,
            status_code=status_code,
            retryable=status_code is None or status_code >= 500,
        )


# Field lookup and lease Errors
class FieldNotFoundError(SecretSyncError):
    """A fetched secret does not contain the requested field."""

    def __init__(self, secret_id: int, field: str) -> None:
        super().__init__(
            f"Field '{field}' not found in secret {secret_id}", retryable=False
        )
        self.secret_id = secret_id
        self.field = field


class LeaseError(SecretSyncError):
    """Base class for ephemeral lease errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class LeaseRequestError(LeaseError):
    """Lease was opened without ids or without a field name."""


class MissingCarryStateError(LeaseError):
    """Renewal carry state is absent, unreadable or incomplete."""
