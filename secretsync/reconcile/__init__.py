"""Reconciliation between declared, remote and durable secret state."""

from secretsync.reconcile.binder import bind_field, bind_fields, bound_field
from secretsync.reconcile.merge import is_key_material, order_fields, reconcile_fields
from secretsync.reconcile.policy import (
    DECISION_TABLE,
    Presence,
    Resolution,
    ValueResolver,
    coerce_placement,
    decide,
    is_generation_eligible,
    parse_identifier,
    preserve_values,
)

__all__ = [
    "bind_field",
    "bind_fields",
    "bound_field",
    "is_key_material",
    "order_fields",
    "reconcile_fields",
    "DECISION_TABLE",
    "Presence",
    "Resolution",
    "ValueResolver",
    "coerce_placement",
    "decide",
    "is_generation_eligible",
    "parse_identifier",
    "preserve_values",
]
