"""Core type definitions for SecretSync.

This module defines the records exchanged between a desired declaration,
the remote secret store and the durable record kept by the host runtime.
All types use Pydantic for validation and serialization.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Name fragments that mark a field as SSH key material when the template
# does not say so explicitly.
KEY_MATERIAL_MARKERS: tuple[str, ...] = ("key", "passphrase")


class Phase(str, Enum):
    """Lifecycle phase a field value is resolved for."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    IMPORT = "import"


class ValueSource(str, Enum):
    """Where a field's effective value comes from."""

    EXPLICIT = "explicit"
    PRESERVE = "preserve"
    GENERATE = "generate"
    CLEAR = "clear"


class LeaseStatus(str, Enum):
    """Ephemeral lease lifecycle state."""

    CLOSED = "closed"
    OPEN = "open"
    RENEWING = "renewing"


class TemplateField(BaseModel):
    """A field definition of a secret template."""

    id: int = Field(..., ge=0, description="Template field id")
    name: str = Field(..., description="Display name of the field")
    slug: str = Field("", description="Alternate case-insensitive key")
    description: str = Field("", description="Field description")
    is_password: bool = False
    is_file: bool = False
    is_notes: bool = False
    is_key_material: bool | None = Field(
        None,
        description="Whether the field holds generated SSH key material; "
        "None when the template does not say",
    )


class TemplateDefinition(BaseModel):
    """Read-only schema constraining which fields a secret may have."""

    id: int = Field(..., ge=0)
    name: str = ""
    fields: list[TemplateField] = Field(default_factory=list)

    def field_names(self) -> list[str]:
        """Describe every field for diagnostics."""
        return [f"{f.name} (slug: {f.slug}, id: {f.id})" for f in self.fields]


class SecretField(BaseModel):
    """A single field of a secret record."""

    name: str = Field(..., description="Field name")
    slug: str = ""
    field_id: int = Field(0, ge=0, description="Template field id, 0 when unknown")
    item_id: int = Field(0, ge=0, description="Server-assigned item id")
    value: str | None = Field(
        None, description="Field value; None is unset, '' is an explicit empty value"
    )
    is_file: bool = False
    is_notes: bool = False
    is_password: bool = False
    is_key_material: bool | None = None
    attachment_id: int | None = None
    filename: str | None = None
    description: str = ""

    @property
    def key(self) -> str:
        """Case-insensitive lookup key."""
        return self.name.lower()

    @property
    def has_value(self) -> bool:
        """Whether the field carries a non-empty value."""
        return bool(self.value)

    def looks_like_key_material(self) -> bool:
        """Whether the field holds SSH key material.

        Explicit metadata wins; otherwise the field name is checked for
        "key" or "passphrase".
        """
        if self.is_key_material is not None:
            return self.is_key_material
        lowered = self.name.lower()
        return any(marker in lowered for marker in KEY_MATERIAL_MARKERS)


class GenerationIntent(BaseModel):
    """Create-time request for the store to generate SSH keys and passphrases.

    Never returned by the store; the lifecycle layer carries it forward on
    the durable record.
    """

    generate_passphrase: bool = False
    generate_keys: bool = False

    @property
    def active(self) -> bool:
        return self.generate_passphrase or self.generate_keys


class PolicyFlags(BaseModel):
    """Secret policy switches. None means not declared."""

    active: bool | None = None
    checked_out: bool | None = None
    checkout_enabled: bool | None = None
    checkout_change_password: bool | None = None
    auto_change_enabled: bool | None = None
    delay_indexing: bool | None = None
    inherit_permissions: bool | None = None
    inherit_policy: bool | None = None
    proxy_enabled: bool | None = None
    requires_comment: bool | None = None
    session_recording: bool | None = None
    incognito_launcher: bool | None = None


class SecretRecord(BaseModel):
    """A secret as declared, as stored remotely, or as recorded durably.

    Example:
        >>> record = SecretRecord(
        ...     name="db-admin",
        ...     folder_id="12",
        ...     site_id="1",
        ...     template_id="6003",
        ...     fields=[SecretField(name="Password")],
        ... )
    """

    id: str | None = Field(None, description="Opaque id assigned by the remote store")
    name: str
    folder_id: int | str
    site_id: int | str
    template_id: int | str
    fields: list[SecretField] = Field(default_factory=list)
    flags: PolicyFlags = Field(default_factory=PolicyFlags)
    secret_policy_id: int | None = None
    web_script_id: int | None = None
    connect_as_id: int | None = None
    checkout_interval: int | None = None
    generation_intent: GenerationIntent | None = None

    def field(self, name: str) -> SecretField | None:
        """Find a field by case-insensitive name."""
        lowered = name.lower()
        for f in self.fields:
            if f.key == lowered:
                return f
        return None

    @property
    def has_active_intent(self) -> bool:
        return self.generation_intent is not None and self.generation_intent.active


class FieldValue(BaseModel):
    """A field value extracted from one secret."""

    secret_id: int
    value: str


class FetchWarning(BaseModel):
    """A non-fatal per-secret fetch failure."""

    secret_id: int
    message: str


class FieldBatch(BaseModel):
    """Best-effort result of extracting one field from several secrets."""

    values: list[FieldValue] = Field(default_factory=list)
    warnings: list[FetchWarning] = Field(default_factory=list)

    def as_dict(self) -> dict[int, str]:
        return {v.secret_id: v.value for v in self.values}


class LeaseCarryState(BaseModel):
    """The query that reproduces a lease. Never holds field values."""

    model_config = ConfigDict(extra="ignore")

    ids: list[int] = Field(default_factory=list)
    field: str = ""

    @property
    def complete(self) -> bool:
        return bool(self.ids) and bool(self.field)


class LeaseResult(BaseModel):
    """Output of opening or renewing a lease. Must not be persisted."""

    values: list[FieldValue] = Field(default_factory=list)
    warnings: list[FetchWarning] = Field(default_factory=list)
    carry_state: str = Field(..., description="Serialized LeaseCarryState")
    renew_at: datetime
    persistable: bool = False

    def as_dict(self) -> dict[int, str]:
        return {v.secret_id: v.value for v in self.values}
