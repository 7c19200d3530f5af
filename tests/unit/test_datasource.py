"""Unit tests for field lookups."""

from __future__ import annotations

import pytest

from secretsync.core.types import SecretField, SecretRecord
from secretsync.datasource import fetch_field_values, read_secret_field, read_secrets_field
from secretsync.errors.exceptions import FieldNotFoundError, SecretNotFoundError, StoreAPIError


@pytest.fixture
def store(make_scripted_store):
    secrets = {
        1: SecretRecord(
            id="1",
            name="one",
            folder_id=1,
            site_id=1,
            template_id=6003,
            fields=[
                SecretField(name="Machine", slug="server", value="db01"),
                SecretField(name="Password", slug="password", value="pw-one"),
            ],
        ),
        2: SecretRecord(
            id="2",
            name="two",
            folder_id=1,
            site_id=1,
            template_id=6003,
            fields=[SecretField(name="Password", slug="password")],
        ),
    }
    return make_scripted_store(secrets=secrets, failing_ids={3})


class TestReadSecretField:
    """Tests for read_secret_field."""

    @pytest.mark.asyncio
    async def test_reads_by_name(self, store) -> None:
        assert await read_secret_field(store, 1, "password") == "pw-one"

    @pytest.mark.asyncio
    async def test_falls_back_to_slug(self, store) -> None:
        assert await read_secret_field(store, 1, "SERVER") == "db01"

    @pytest.mark.asyncio
    async def test_unset_value_reads_as_empty(self, store) -> None:
        assert await read_secret_field(store, 2, "Password") == ""

    @pytest.mark.asyncio
    async def test_missing_field(self, store) -> None:
        with pytest.raises(FieldNotFoundError):
            await read_secret_field(store, 1, "Notes")

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, store) -> None:
        with pytest.raises(StoreAPIError) as exc_info:
            await read_secret_field(store, 3, "Password")

        assert exc_info.value.secret_id == 3

        with pytest.raises(SecretNotFoundError):
            await read_secret_field(store, 4, "Password")


class TestBatch:
    """Tests for batch lookups."""

    @pytest.mark.asyncio
    async def test_fetches_sequentially_in_order(self, store) -> None:
        batch = await fetch_field_values(store, [2, 1], "Password")

        assert [v.secret_id for v in batch.values] == [2, 1]
        assert store.calls == [("read", 2), ("read", 1)]

    @pytest.mark.asyncio
    async def test_failures_become_warnings(self, store, log_output) -> None:
        batch = await read_secrets_field(store, [1, 3, 4], "Password")

        assert batch.as_dict() == {1: "pw-one"}
        assert [w.secret_id for w in batch.warnings] == [3, 4]
        output = log_output.getvalue()
        assert "Failed to fetch secret" in output
        assert "retrieved=1" in output

    @pytest.mark.asyncio
    async def test_missing_field_fails_batch(self, store) -> None:
        with pytest.raises(FieldNotFoundError) as exc_info:
            await read_secrets_field(store, [3, 2, 1], "Machine")

        assert exc_info.value.secret_id == 2
