"""Template binding.

Maps each declared field to exactly one template field. Rules are tried in
order and the first rule with any match wins:

1. non-zero template field id
2. case-insensitive name
3. case-insensitive slug (the declared slug, or the declared name)

Duplicate names within a template resolve to the first template field in
declaration order.
"""

from __future__ import annotations

from collections.abc import Callable

from secretsync.core.types import SecretField, TemplateDefinition, TemplateField
from secretsync.errors.exceptions import BindingError
from secretsync.logging import get_logger


def _by_id(field: SecretField) -> Callable[[TemplateField], bool] | None:
    if field.field_id <= 0:
        return None
    return lambda tf: tf.id == field.field_id


def _by_name(field: SecretField) -> Callable[[TemplateField], bool] | None:
    if not field.name:
        return None
    lowered = field.name.lower()
    return lambda tf: tf.name.lower() == lowered


def _by_slug(field: SecretField) -> Callable[[TemplateField], bool] | None:
    slug = (field.slug or field.name).lower()
    if not slug:
        return None
    return lambda tf: bool(tf.slug) and tf.slug.lower() == slug


_RULES = (_by_id, _by_name, _by_slug)


def bind_field(field: SecretField, template: TemplateDefinition) -> TemplateField:
    """Find the template field a declared field binds to.

    Raises:
        BindingError: If no rule matches.
    """
    for rule in _RULES:
        matches = rule(field)
        if matches is None:
            continue
        for tf in template.fields:
            if matches(tf):
                return tf

    get_logger().error(
        "Field not found in template",
        field=field.name,
        template_id=template.id,
    )
    raise BindingError(field.name or field.slug, template.field_names())


def bind_fields(
    fields: list[SecretField], template: TemplateDefinition
) -> list[tuple[SecretField, TemplateField]]:
    """Bind every declared field, failing on the first unknown one."""
    return [(f, bind_field(f, template)) for f in fields]


def bound_field(
    desired: SecretField, template_field: TemplateField, value: str
) -> SecretField:
    """Build the field submitted to the store.

    Canonical attributes come from the template; attachment identity is
    carried from the declaration for file-bearing fields.
    """
    field = SecretField(
        name=template_field.name,
        slug=template_field.slug,
        field_id=template_field.id,
        item_id=desired.item_id,
        value=value,
        is_file=template_field.is_file,
        is_notes=template_field.is_notes,
        is_password=template_field.is_password,
        is_key_material=template_field.is_key_material
        if template_field.is_key_material is not None
        else desired.is_key_material,
        description=template_field.description,
    )
    if template_field.is_file or desired.is_file:
        field.attachment_id = desired.attachment_id
        field.filename = desired.filename
    return field
