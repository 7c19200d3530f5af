"""Field lookups across one or more secrets.

The batch loop is shared by the durable data source and the ephemeral
lease: a secret that fails to fetch becomes a warning, a secret that was
fetched but lacks the field fails the whole batch.
"""

from __future__ import annotations

from secretsync.core.types import FetchWarning, FieldBatch, FieldValue
from secretsync.errors.exceptions import FieldNotFoundError, TransportError
from secretsync.logging import get_logger
from secretsync.store.base import BaseSecretStore


async def fetch_field_values(
    store: BaseSecretStore, ids: list[int], field: str
) -> FieldBatch:
    """Fetch each secret in turn and extract one field.

    Args:
        store: Store to read from.
        ids: Secret ids, fetched sequentially in this order.
        field: Field name or slug to extract.

    Returns:
        Values for every secret that could be fetched, plus one warning per
        secret that could not.

    Raises:
        FieldNotFoundError: If a fetched secret has no such field.
    """
    logger = get_logger()
    batch = FieldBatch()

    for secret_id in ids:
        try:
            record = await store.read(secret_id)
        except TransportError as e:
            logger.warning("Failed to fetch secret", secret_id=secret_id, error=str(e))
            batch.warnings.append(FetchWarning(secret_id=secret_id, message=str(e)))
            continue

        value, found = store.extract_field(record, field)
        if not found:
            logger.error("Field not found in secret", secret_id=secret_id, field=field)
            raise FieldNotFoundError(secret_id, field)
        batch.values.append(FieldValue(secret_id=secret_id, value=value))

    return batch


async def read_secret_field(store: BaseSecretStore, secret_id: int, field: str) -> str:
    """Read one field of one secret. Fetch failures propagate."""
    record = await store.read(secret_id)
    value, found = store.extract_field(record, field)
    if not found:
        raise FieldNotFoundError(secret_id, field)
    return value


async def read_secrets_field(
    store: BaseSecretStore, ids: list[int], field: str
) -> FieldBatch:
    """Read one field from several secrets, best effort.

    Example:
        >>> batch = await read_secrets_field(store, [1, 2], "password")
        >>> batch.as_dict()
        {1: '...'}
    """
    batch = await fetch_field_values(store, ids, field)
    get_logger().info(
        "Fetched field values",
        field=field,
        requested=len(ids),
        retrieved=len(batch.values),
    )
    return batch
