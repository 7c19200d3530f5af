"""Field reconciliation.

Merges the field set returned by the store with the desired declaration:
the declaration decides the order and the attachment identity, the store
decides everything else. Pure: never calls the store.
"""

from __future__ import annotations

from secretsync.core.types import GenerationIntent, SecretField
from secretsync.logging import get_logger


def order_fields(desired: list[SecretField], remote: list[SecretField]) -> list[SecretField]:
    """Return remote fields in desired order.

    Remote fields nobody declared are appended in their remote order.
    Declared fields the store did not return are dropped.
    """
    logger = get_logger()
    remote_by_key: dict[str, SecretField] = {}
    for f in remote:
        remote_by_key.setdefault(f.key, f)

    ordered: list[SecretField] = []
    emitted: set[str] = set()
    for f in desired:
        match = remote_by_key.get(f.key)
        if match is None:
            logger.anomaly("Declared field missing from store response", field=f.name)
            continue
        if f.key in emitted:
            continue
        ordered.append(match)
        emitted.add(f.key)

    for f in remote:
        if f.key not in emitted:
            logger.anomaly("Store returned undeclared field, appending", field=f.name)
            ordered.append(f)
            emitted.add(f.key)

    return ordered


def is_key_material(field: SecretField) -> bool:
    """Whether a field holds SSH key material.

    Explicit metadata wins; otherwise the name must contain "key" or
    "passphrase".
    """
    return field.looks_like_key_material()


def _carries_attachment(field: SecretField, intent: GenerationIntent | None) -> bool:
    if field.is_file:
        return True
    return intent is not None and intent.active and is_key_material(field)


def reconcile_fields(
    desired: list[SecretField],
    remote: list[SecretField],
    prior: list[SecretField] | None = None,
    intent: GenerationIntent | None = None,
) -> list[SecretField]:
    """Produce the durable field sequence after a round trip.

    Args:
        desired: Declared fields; authoritative for order and attachments.
        remote: Fields returned by the store; authoritative for content.
        prior: Fields of the previous durable record, if any.
        intent: Generation intent carried by the record.

    Returns:
        Remote fields in desired order. File-bearing fields, and key fields
        while an intent is active, keep the attachment id and filename of
        the prior record, falling back to the declaration for the filename.
    """
    prior_by_key = {f.key: f for f in prior or []}
    desired_by_key = {f.key: f for f in desired}

    result = []
    for field in order_fields(desired, remote):
        if not _carries_attachment(field, intent):
            result.append(field)
            continue

        update: dict[str, object] = {}
        known = prior_by_key.get(field.key)
        if known is None and prior is None:
            known = desired_by_key.get(field.key)

        if known is not None:
            if known.attachment_id is not None:
                update["attachment_id"] = known.attachment_id
            if known.filename:
                update["filename"] = known.filename

        if not update.get("filename", field.filename):
            declared = desired_by_key.get(field.key)
            if declared is not None and declared.filename:
                update["filename"] = declared.filename

        result.append(field.model_copy(update=update) if update else field)
    return result
