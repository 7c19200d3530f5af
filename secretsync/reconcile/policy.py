"""Value resolution policy.

Decides, per field and per lifecycle phase, whether a field's value is the
caller's explicit value, the previously recorded value, a value generated by
the store, or the empty string. The decision is a pure table lookup keyed by
(declared presence, is-create, has-prior, generation-eligible) so that every
combination is enumerable in tests.
"""

from __future__ import annotations

from enum import Enum
from itertools import product

from pydantic import BaseModel

from secretsync.core.types import (
    GenerationIntent,
    Phase,
    SecretField,
    SecretRecord,
    TemplateDefinition,
    TemplateField,
    ValueSource,
)
from secretsync.errors.exceptions import CoercionError, GenerationError, TransportError
from secretsync.logging import get_logger
from secretsync.store.base import BaseSecretStore


class Presence(str, Enum):
    """How a declared value is present."""

    ABSENT = "absent"    # None: nothing declared
    EMPTY = "empty"      # "": explicitly cleared
    PRESENT = "present"

    @classmethod
    def of(cls, value: str | None) -> Presence:
        if value is None:
            return cls.ABSENT
        if value == "":
            return cls.EMPTY
        return cls.PRESENT


DecisionKey = tuple[Presence, bool, bool, bool]

# (is_create, has_prior, eligible) -> source, for undeclared values
_ABSENT_DECISIONS: dict[tuple[bool, bool, bool], ValueSource] = {
    (True, False, True): ValueSource.GENERATE,
    (True, False, False): ValueSource.CLEAR,
    (True, True, True): ValueSource.CLEAR,
    (True, True, False): ValueSource.CLEAR,
    (False, True, True): ValueSource.PRESERVE,
    (False, True, False): ValueSource.PRESERVE,
    (False, False, True): ValueSource.CLEAR,
    (False, False, False): ValueSource.CLEAR,
}

DECISION_TABLE: dict[DecisionKey, ValueSource] = {
    **{
        (Presence.PRESENT, *flags): ValueSource.EXPLICIT
        for flags in product((True, False), repeat=3)
    },
    **{
        (Presence.EMPTY, *flags): ValueSource.CLEAR
        for flags in product((True, False), repeat=3)
    },
    **{(Presence.ABSENT, *flags): source for flags, source in _ABSENT_DECISIONS.items()},
}


def decide(
    declared: str | None,
    phase: Phase,
    prior: str | None,
    eligible: bool,
) -> ValueSource:
    """Look up the value source for one field.

    Args:
        declared: The caller's declared value (None when undeclared).
        phase: Lifecycle phase being resolved.
        prior: Previously recorded value; "" counts as no prior.
        eligible: Whether the field may be generated.
    """
    key = (Presence.of(declared), phase is Phase.CREATE, bool(prior), eligible)
    return DECISION_TABLE[key]


def is_generation_eligible(
    template_field: TemplateField,
    desired: SecretField,
    intent: GenerationIntent | None,
) -> bool:
    """Whether an undeclared field may be generated at create time."""
    if template_field.is_password:
        return True
    if intent is None or not intent.active:
        return False
    if template_field.is_key_material is not None:
        return template_field.is_key_material
    return desired.looks_like_key_material()


class Resolution(BaseModel):
    """Resolved value for one field."""

    source: ValueSource
    value: str


class ValueResolver:
    """Resolves declared field values against prior state and the store.

    Example:
        >>> resolver = ValueResolver(store, template, Phase.CREATE)
        >>> resolution = await resolver.resolve(desired, template_field)
    """

    def __init__(
        self,
        store: BaseSecretStore,
        template: TemplateDefinition,
        phase: Phase,
        *,
        prior: list[SecretField] | None = None,
        intent: GenerationIntent | None = None,
    ) -> None:
        self._store = store
        self._template = template
        self._phase = phase
        self._prior = {f.key: f for f in prior or []}
        self._intent = intent

    def prior_value(self, name: str) -> str | None:
        field = self._prior.get(name.lower())
        return field.value if field is not None else None

    async def resolve(self, desired: SecretField, template_field: TemplateField) -> Resolution:
        """Resolve the value to submit for one bound field.

        Raises:
            GenerationError: If the store fails to generate a value.
        """
        prior = self.prior_value(template_field.name)
        if prior is None and desired.name.lower() != template_field.name.lower():
            prior = self.prior_value(desired.name)

        eligible = is_generation_eligible(template_field, desired, self._intent)
        source = decide(desired.value, self._phase, prior, eligible)
        get_logger().field_resolved(template_field.name, source.value)

        if source is ValueSource.EXPLICIT:
            return Resolution(source=source, value=desired.value or "")
        if source is ValueSource.PRESERVE:
            return Resolution(source=source, value=prior or "")
        if source is ValueSource.GENERATE:
            return Resolution(source=source, value=await self._generate(template_field))
        return Resolution(source=source, value="")

    async def _generate(self, template_field: TemplateField) -> str:
        # Key material is generated by the store from the create-time intent.
        if not template_field.is_password:
            return ""
        try:
            value = await self._store.generate_value(template_field.slug, self._template)
        except TransportError as e:
            get_logger().error(
                "Failed to generate password", field=template_field.name, error=str(e)
            )
            raise GenerationError(template_field.name, str(e)) from e
        if not value:
            raise GenerationError(template_field.name, "store returned an empty value")
        return value


def parse_identifier(value: int | str | None, attribute: str) -> int:
    """Parse a non-negative integer identifier.

    Raises:
        CoercionError: Naming the attribute, if the value does not parse.
    """
    if isinstance(value, bool):
        raise CoercionError(attribute, value)
    if isinstance(value, int):
        if value < 0:
            raise CoercionError(attribute, value)
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    raise CoercionError(attribute, value)


def coerce_placement(record: SecretRecord) -> tuple[int, int, int]:
    """Parse folder, site and template ids before any remote call."""
    return (
        parse_identifier(record.folder_id, "folder_id"),
        parse_identifier(record.site_id, "site_id"),
        parse_identifier(record.template_id, "template_id"),
    )


def preserve_values(
    merged: list[SecretField],
    prior: list[SecretField] | None,
    desired: list[SecretField] | None = None,
) -> list[SecretField]:
    """Keep prior values the store did not echo back.

    A field whose returned value is empty keeps its prior value when the
    declaration is absent and the prior value is known, or when the
    declaration is a non-empty value that was submitted as the prior.
    An explicit empty declaration is honoured. Without a declaration
    (a plain read) every field counts as undeclared.
    """
    if not prior:
        return merged

    declared = {f.key: f.value for f in desired or []}
    prior_values = {f.key: f.value for f in prior}
    result = []
    for field in merged:
        prior_value = prior_values.get(field.key)
        declared_value = declared.get(field.key)
        source = decide(declared_value, Phase.READ, prior_value, False)
        echoed_empty = not field.value and bool(prior_value)
        if echoed_empty and (source is ValueSource.PRESERVE or declared_value):
            get_logger().field_resolved(field.name, source.value)
            field = field.model_copy(update={"value": prior_value})
        result.append(field)
    return result
