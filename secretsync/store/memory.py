"""In-memory secret store for development and testing."""
from __future__ import annotations

import random
import secrets

from secretsync.core.types import SecretField, SecretRecord, TemplateDefinition
from secretsync.errors.exceptions import SecretNotFoundError, StoreAPIError
from secretsync.store.base import BaseSecretStore


class InMemorySecretStore(BaseSecretStore):
    """Dict-backed store that mimics the remote service's quirks.

    No external dependencies. Data is not persisted across restarts.
    The quirks can be toggled to exercise reconciliation:

    - ``shuffle_fields`` returns fields in a random order on every read.
    - ``echo_attachments=False`` drops attachment ids and filenames on read.
    - ``mask_passwords`` returns password fields with an empty value.

    Example:
        >>> store = InMemorySecretStore(templates=[template], shuffle_fields=True)
        >>> created = await store.create(record)
    """

    def __init__(
        self,
        templates: list[TemplateDefinition] | None = None,
        *,
        shuffle_fields: bool = False,
        echo_attachments: bool = True,
        mask_passwords: bool = False,
        unreachable_ids: set[int] | None = None,
        password_length: int = 24,
        seed: int | None = None,
    ) -> None:
        self._templates: dict[int, TemplateDefinition] = {
            t.id: t for t in templates or []
        }
        self._secrets: dict[int, SecretRecord] = {}
        self._next_id = 1
        self._next_item_id = 1
        self._shuffle_fields = shuffle_fields
        self._echo_attachments = echo_attachments
        self._mask_passwords = mask_passwords
        self._unreachable = set(unreachable_ids or ())
        self._password_length = password_length
        self._random = random.Random(seed)

    @property
    def store_name(self) -> str:
        return "memory"

    def add_template(self, template: TemplateDefinition) -> None:
        self._templates[template.id] = template

    def seed(self, record: SecretRecord) -> SecretRecord:
        """Insert a secret directly, keeping its id if it has one."""
        secret_id = int(record.id) if record.id is not None else self._allocate_id()
        self._next_id = max(self._next_id, secret_id + 1)
        stored = record.model_copy(
            update={"id": str(secret_id), "generation_intent": None}, deep=True
        )
        self._secrets[secret_id] = stored
        return stored.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._secrets)

    def __contains__(self, secret_id: object) -> bool:
        return secret_id in self._secrets

    async def fetch_template(self, template_id: int) -> TemplateDefinition:
        template = self._templates.get(template_id)
        if template is None:
            raise StoreAPIError(
                f"Secret template {template_id} not found",
                operation="fetch_template",
                status_code=404,
            )
        return template.model_copy(deep=True)

    async def generate_value(self, field_slug: str, template: TemplateDefinition) -> str:
        for tf in template.fields:
            if tf.slug.lower() == field_slug.lower():
                if not tf.is_password:
                    raise StoreAPIError(
                        f"Field '{field_slug}' is not a password field",
                        operation="generate_value",
                        status_code=400,
                    )
                return secrets.token_urlsafe(self._password_length)[: self._password_length]
        raise StoreAPIError(
            f"Field '{field_slug}' not found in template {template.id}",
            operation="generate_value",
            status_code=400,
        )

    async def create(self, record: SecretRecord) -> SecretRecord:
        template_id = int(record.template_id)
        if template_id not in self._templates:
            raise StoreAPIError(
                f"Secret template {template_id} not found",
                operation="create",
                status_code=400,
            )

        secret_id = self._allocate_id()
        fields = [self._stamp_item(f) for f in record.fields]
        if record.has_active_intent:
            fields = [self._generate_key_material(f, record) for f in fields]

        stored = record.model_copy(
            update={"id": str(secret_id), "fields": fields, "generation_intent": None},
            deep=True,
        )
        self._secrets[secret_id] = stored
        return self._present(stored)

    async def read(self, secret_id: int) -> SecretRecord:
        if secret_id in self._unreachable:
            raise StoreAPIError(
                f"Secret {secret_id} is unreachable",
                operation="read",
                secret_id=secret_id,
                status_code=503,
            )
        stored = self._secrets.get(secret_id)
        if stored is None:
            raise SecretNotFoundError(secret_id)
        return self._present(stored)

    async def update(self, record: SecretRecord) -> SecretRecord:
        secret_id = int(record.id) if record.id is not None else -1
        existing = self._secrets.get(secret_id)
        if existing is None:
            raise SecretNotFoundError(secret_id, operation="update")

        item_ids = {f.key: f.item_id for f in existing.fields}
        fields = []
        for f in record.fields:
            item_id = item_ids.get(f.key)
            fields.append(
                f.model_copy(update={"item_id": item_id}) if item_id else self._stamp_item(f)
            )

        stored = record.model_copy(
            update={"id": str(secret_id), "fields": fields, "generation_intent": None},
            deep=True,
        )
        self._secrets[secret_id] = stored
        return self._present(stored)

    async def delete(self, secret_id: int) -> None:
        if secret_id not in self._secrets:
            raise SecretNotFoundError(secret_id, operation="delete")
        del self._secrets[secret_id]

    def _allocate_id(self) -> int:
        secret_id = self._next_id
        self._next_id += 1
        return secret_id

    def _stamp_item(self, field: SecretField) -> SecretField:
        item_id = self._next_item_id
        self._next_item_id += 1
        return field.model_copy(update={"item_id": item_id, "value": field.value or ""})

    def _generate_key_material(self, field: SecretField, record: SecretRecord) -> SecretField:
        intent = record.generation_intent
        if intent is None or field.value or not field.looks_like_key_material():
            return field
        if "passphrase" in field.key:
            if not intent.generate_passphrase:
                return field
            value = secrets.token_urlsafe(24)
        elif intent.generate_keys:
            value = f"ssh-ed25519 {secrets.token_hex(32)}"
        else:
            return field
        return field.model_copy(update={"value": value})

    def _present(self, stored: SecretRecord) -> SecretRecord:
        fields = []
        for f in stored.fields:
            update: dict[str, object] = {}
            if not self._echo_attachments:
                update["attachment_id"] = None
                update["filename"] = None
            if self._mask_passwords and f.is_password:
                update["value"] = ""
            fields.append(f.model_copy(update=update) if update else f.model_copy())
        if self._shuffle_fields:
            self._random.shuffle(fields)
        return stored.model_copy(update={"fields": fields}, deep=True)
