"""Unit tests for InMemorySecretStore."""

from __future__ import annotations

import pytest

from secretsync.core.types import GenerationIntent, SecretField, SecretRecord
from secretsync.errors.exceptions import SecretNotFoundError, StoreAPIError
from secretsync.store.memory import InMemorySecretStore


def _record(**kwargs) -> SecretRecord:
    defaults = dict(
        name="s",
        folder_id=1,
        site_id=1,
        template_id=6003,
        fields=[
            SecretField(name="Username", slug="username", value="u"),
            SecretField(name="Password", slug="password", value="p", is_password=True),
        ],
    )
    defaults.update(kwargs)
    return SecretRecord(**defaults)


class TestInMemorySecretStore:
    """Tests for the in-memory store."""

    def test_store_name(self, memory_store) -> None:
        assert memory_store.store_name == "memory"
        assert "memory" in repr(memory_store)

    @pytest.mark.asyncio
    async def test_create_assigns_sequential_ids(self, memory_store) -> None:
        first = await memory_store.create(_record())
        second = await memory_store.create(_record())

        assert (first.id, second.id) == ("1", "2")
        assert len(memory_store) == 2
        assert all(f.item_id for f in first.fields)

    @pytest.mark.asyncio
    async def test_create_unknown_template(self, memory_store) -> None:
        with pytest.raises(StoreAPIError):
            await memory_store.create(_record(template_id=1))

    @pytest.mark.asyncio
    async def test_returns_copies(self, memory_store) -> None:
        created = await memory_store.create(_record())
        created.fields[0].value = "changed"

        stored = await memory_store.read(1)

        assert stored.field("Username").value == "u"

    @pytest.mark.asyncio
    async def test_intent_is_never_stored(self, memory_store) -> None:
        created = await memory_store.create(
            _record(generation_intent=GenerationIntent(generate_keys=True))
        )

        assert created.generation_intent is None

    @pytest.mark.asyncio
    async def test_update_keeps_item_ids(self, memory_store) -> None:
        created = await memory_store.create(_record())
        item_ids = [f.item_id for f in created.fields]

        updated = await memory_store.update(_record(id=created.id, name="renamed"))

        assert [f.item_id for f in updated.fields] == item_ids
        assert updated.name == "renamed"

    @pytest.mark.asyncio
    async def test_update_missing(self, memory_store) -> None:
        with pytest.raises(SecretNotFoundError) as exc_info:
            await memory_store.update(_record(id="9"))

        assert exc_info.value.operation == "update"

    @pytest.mark.asyncio
    async def test_unreachable_ids(self, login_template) -> None:
        store = InMemorySecretStore(templates=[login_template], unreachable_ids={1})
        await store.create(_record())

        with pytest.raises(StoreAPIError) as exc_info:
            await store.read(1)

        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_mask_and_drop_attachments(self, login_template) -> None:
        store = InMemorySecretStore(
            templates=[login_template], mask_passwords=True, echo_attachments=False
        )
        record = _record()
        record.fields[0].attachment_id = 3
        await store.create(record)

        stored = await store.read(1)

        assert stored.field("Password").value == ""
        assert stored.field("Username").attachment_id is None

    @pytest.mark.asyncio
    async def test_generate_value(self, memory_store, login_template) -> None:
        value = await memory_store.generate_value("password", login_template)

        assert len(value) == 24

        with pytest.raises(StoreAPIError):
            await memory_store.generate_value("username", login_template)

    @pytest.mark.asyncio
    async def test_fetch_template(self, memory_store) -> None:
        template = await memory_store.fetch_template(6003)
        assert template.name == "Web Password"

        with pytest.raises(StoreAPIError) as exc_info:
            await memory_store.fetch_template(1)
        assert exc_info.value.status_code == 404

    def test_extract_field_name_then_slug(self, memory_store) -> None:
        record = _record(
            fields=[
                SecretField(name="server", slug="host", value="a"),
                SecretField(name="Machine", slug="server", value="b"),
            ]
        )

        assert memory_store.extract_field(record, "SERVER") == ("a", True)
        assert memory_store.extract_field(record, "host") == ("a", True)
        assert memory_store.extract_field(record, "nope") == ("", False)
