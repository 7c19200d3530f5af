"""SecretSync core components."""

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
from secretsync.core.config import LeaseConfig, LoggingConfig, StoreConfig

__all__ = [
    "Phase",
    "ValueSource",
    "LeaseStatus",
    "TemplateField",
    "TemplateDefinition",
    "SecretField",
    "GenerationIntent",
    "PolicyFlags",
    "SecretRecord",
    "FieldValue",
    "FetchWarning",
    "FieldBatch",
    "LeaseCarryState",
    "LeaseResult",
    "StoreConfig",
    "LeaseConfig",
    "LoggingConfig",
]
