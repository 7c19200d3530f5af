"""Pytest configuration and fixtures for SecretSync tests."""

from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console

from secretsync.core.types import (
    SecretField,
    SecretRecord,
    TemplateDefinition,
    TemplateField,
)
from secretsync.errors.exceptions import SecretNotFoundError, StoreAPIError
from secretsync.logging import configure_logging
from secretsync.store.base import BaseSecretStore
from secretsync.store.memory import InMemorySecretStore


class ScriptedSecretStore(BaseSecretStore):
    """Store double that records every call and replays canned answers."""

    def __init__(
        self,
        templates: list[TemplateDefinition] | None = None,
        secrets: dict[int, SecretRecord] | None = None,
        generated: str = "generated-pw",
        failing_ids: set[int] | None = None,
    ) -> None:
        self.templates = {t.id: t for t in templates or []}
        self.secrets = dict(secrets or {})
        self.generated = generated
        self.failing_ids = set(failing_ids or ())
        self.calls: list[tuple[str, object]] = []
        self.submitted: list[SecretRecord] = []

    @property
    def store_name(self) -> str:
        return "scripted"

    async def fetch_template(self, template_id: int) -> TemplateDefinition:
        self.calls.append(("fetch_template", template_id))
        return self.templates[template_id]

    async def generate_value(self, field_slug: str, template: TemplateDefinition) -> str:
        self.calls.append(("generate_value", field_slug))
        return self.generated

    async def create(self, record: SecretRecord) -> SecretRecord:
        self.calls.append(("create", record.name))
        self.submitted.append(record)
        secret_id = max(self.secrets, default=0) + 1
        stored = record.model_copy(update={"id": str(secret_id), "generation_intent": None})
        self.secrets[secret_id] = stored
        return stored

    async def read(self, secret_id: int) -> SecretRecord:
        self.calls.append(("read", secret_id))
        if secret_id in self.failing_ids:
            raise StoreAPIError(
                "connection reset", operation="read", secret_id=secret_id, status_code=502
            )
        if secret_id not in self.secrets:
            raise SecretNotFoundError(secret_id)
        return self.secrets[secret_id].model_copy(deep=True)

    async def update(self, record: SecretRecord) -> SecretRecord:
        self.calls.append(("update", record.id))
        self.submitted.append(record)
        self.secrets[int(record.id)] = record.model_copy(update={"generation_intent": None})
        return record

    async def delete(self, secret_id: int) -> None:
        self.calls.append(("delete", secret_id))
        del self.secrets[secret_id]

    @property
    def mutated(self) -> bool:
        return any(name in ("create", "update", "delete") for name, _ in self.calls)


@pytest.fixture
def login_template() -> TemplateDefinition:
    """Template with a username, a password and a notes field."""
    return TemplateDefinition(
        id=6003,
        name="Web Password",
        fields=[
            TemplateField(id=108, name="Username", slug="username"),
            TemplateField(id=109, name="Password", slug="password", is_password=True),
            TemplateField(id=110, name="Notes", slug="notes", is_notes=True),
        ],
    )


@pytest.fixture
def ssh_template() -> TemplateDefinition:
    """Template with SSH key material and a file attachment."""
    return TemplateDefinition(
        id=6026,
        name="SSH Key",
        fields=[
            TemplateField(id=301, name="Username", slug="username"),
            TemplateField(id=302, name="Private Key", slug="private-key", is_file=True),
            TemplateField(id=303, name="Public Key", slug="public-key"),
            TemplateField(id=304, name="Private Key Passphrase", slug="passphrase"),
            TemplateField(id=305, name="Password", slug="password", is_password=True),
        ],
    )


@pytest.fixture
def desired_login() -> SecretRecord:
    """Declaration with an explicit username and no password value."""
    return SecretRecord(
        name="db-admin",
        folder_id="12",
        site_id="1",
        template_id="6003",
        fields=[
            SecretField(name="Username", value="admin"),
            SecretField(name="Password"),
        ],
    )


@pytest.fixture
def memory_store(login_template, ssh_template) -> InMemorySecretStore:
    return InMemorySecretStore(templates=[login_template, ssh_template], seed=7)


@pytest.fixture
def scripted_store(login_template, ssh_template) -> ScriptedSecretStore:
    return ScriptedSecretStore(templates=[login_template, ssh_template])


@pytest.fixture
def log_output():
    """Route the global logger to a buffer at debug level."""
    output = StringIO()
    configure_logging(
        level="debug",
        show_timestamps=False,
        console=Console(file=output, width=200),
    )
    yield output
    configure_logging()


@pytest.fixture
def make_scripted_store(login_template, ssh_template):
    """Factory for scripted stores preloaded with the sample templates."""

    def factory(**kwargs) -> ScriptedSecretStore:
        kwargs.setdefault("templates", [login_template, ssh_template])
        return ScriptedSecretStore(**kwargs)

    return factory
