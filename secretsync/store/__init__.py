"""Remote secret store clients."""

from secretsync.store.base import BaseSecretStore
from secretsync.store.memory import InMemorySecretStore

__all__ = [
    "BaseSecretStore",
    "InMemorySecretStore",
    "SecretServerStore",
]


def __getattr__(name: str):
    """Lazy import for the REST store (requires httpx)."""
    if name == "SecretServerStore":
        from secretsync.store.server import SecretServerStore
        return SecretServerStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
