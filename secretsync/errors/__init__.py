"""SecretSync errors."""

from secretsync.errors.exceptions import (
    BindingError,
    CoercionError,
    ConfigurationError,
    FieldNotFoundError,
    GenerationError,
    IdentityError,
    InvalidConfigError,
    LeaseError,
    LeaseRequestError,
    MissingCarryStateError,
    MissingCredentialError,
    ReconcileError,
    SecretNotFoundError,
    SecretSyncError,
    StoreAPIError,
    StoreAuthenticationError,
    StoreTimeoutError,
    TransportError,
)

__all__ = [
    "SecretSyncError",
    "ConfigurationError",
    "MissingCredentialError",
    "InvalidConfigError",
    "ReconcileError",
    "BindingError",
    "CoercionError",
    "GenerationError",
    "IdentityError",
    "TransportError",
    "SecretNotFoundError",
    "StoreAuthenticationError",
    "StoreTimeoutError",
    "StoreAPIError",
    "FieldNotFoundError",
    "LeaseError",
    "LeaseRequestError",
    "MissingCarryStateError",
]
