"""SecretSync - declarative secret reconciliation against a remote store.

SecretSync keeps declared secrets in step with a Secret Server instance
without losing generated values to drift, and exposes short-lived field
values through leases that are never persisted.

Example:
    >>> from secretsync import SecretResource, InMemorySecretStore
    >>> resource = SecretResource(InMemorySecretStore(templates=[template]))
    >>> state = await resource.create(desired)
    >>> state.field("Password").value
"""

__version__ = "0.1.0"

# Core exports
from secretsync.core.config import LeaseConfig, LoggingConfig, StoreConfig
from secretsync.core.types import (
    FetchWarning,
    FieldBatch,
    FieldValue,
    GenerationIntent,
    LeaseCarryState,
    LeaseResult,
    LeaseStatus,
    Phase,
    PolicyFlags,
    SecretField,
    SecretRecord,
    TemplateDefinition,
    TemplateField,
    ValueSource,
)
from secretsync.datasource import read_secret_field, read_secrets_field
from secretsync.lease import LeaseManager
from secretsync.resource import SecretResource

# Error exports
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

# Store exports
from secretsync.store.base import BaseSecretStore
from secretsync.store.memory import InMemorySecretStore

__all__ = [
    # Version
    "__version__",
    # Lifecycle
    "SecretResource",
    "LeaseManager",
    "read_secret_field",
    "read_secrets_field",
    # Config
    "StoreConfig",
    "LeaseConfig",
    "LoggingConfig",
    # Types
    "FetchWarning",
    "FieldBatch",
    "FieldValue",
    "GenerationIntent",
    "LeaseCarryState",
    "LeaseResult",
    "LeaseStatus",
    "Phase",
    "PolicyFlags",
    "SecretField",
    "SecretRecord",
    "TemplateDefinition",
    "TemplateField",
    "ValueSource",
    # Stores
    "BaseSecretStore",
    "InMemorySecretStore",
    "SecretServerStore",
    # Errors
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


def __getattr__(name: str):
    """Lazy import for the REST store."""
    if name == "SecretServerStore":
        from secretsync.store.server import SecretServerStore
        return SecretServerStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
