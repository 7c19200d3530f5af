"""Ephemeral lease over secret field values.

A lease exposes field values for a bounded time without ever writing them
to durable state. Between calls only the query ``{ids, field}`` is kept;
every renewal fetches live values again.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from secretsync.core.config import LeaseConfig
from secretsync.core.types import LeaseCarryState, LeaseResult, LeaseStatus
from secretsync.datasource import fetch_field_values
from secretsync.errors.exceptions import LeaseRequestError, MissingCarryStateError
from secretsync.logging import get_logger
from secretsync.store.base import BaseSecretStore

RENEW_INTERVAL = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaseManager:
    """Open, renew and close ephemeral leases.

    The manager does not own the store connection; closing a lease only
    updates bookkeeping.

    Example:
        >>> leases = LeaseManager(store)
        >>> result = await leases.open([1, 2], "password")
        >>> result = await leases.renew(result.carry_state)
        >>> await leases.close(result.carry_state)
    """

    def __init__(
        self,
        store: BaseSecretStore,
        renew_interval: timedelta | LeaseConfig = RENEW_INTERVAL,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if isinstance(renew_interval, LeaseConfig):
            renew_interval = renew_interval.renew_interval
        self._store = store
        self._renew_interval = renew_interval
        self._clock = clock or _utcnow
        self._status = LeaseStatus.CLOSED
        self._open_count = 0

    @property
    def status(self) -> LeaseStatus:
        """Lifecycle state of the most recent lease."""
        return self._status

    @property
    def open_count(self) -> int:
        """Number of leases opened and not yet closed."""
        return self._open_count

    @property
    def renew_interval(self) -> timedelta:
        return self._renew_interval

    async def open(self, ids: list[int], field: str) -> LeaseResult:
        """Open a lease on one field of several secrets.

        Args:
            ids: Secret ids to read.
            field: Field name or slug to expose.

        Returns:
            Values, per-secret fetch warnings, the carry state and the
            renewal deadline.

        Raises:
            LeaseRequestError: If ids or field is empty.
            FieldNotFoundError: If a fetched secret lacks the field.
        """
        if not ids:
            raise LeaseRequestError("Lease requires at least one secret id")
        if not field:
            raise LeaseRequestError("Lease requires a field name")

        state = LeaseCarryState(ids=list(ids), field=field)
        result = await self._fetch(state)

        self._status = LeaseStatus.OPEN
        self._open_count += 1
        get_logger().lease_event("opened", len(state.ids), len(result.values))
        return result

    async def renew(self, carry_state: str | bytes | None) -> LeaseResult:
        """Renew a lease from its carry state.

        Renewal is a fresh open: values are fetched again, never reused.

        Raises:
            MissingCarryStateError: If the carry state is absent or incomplete.
            FieldNotFoundError: If a fetched secret lacks the field.
        """
        state = self._deserialize(carry_state)

        previous = self._status
        self._status = LeaseStatus.RENEWING
        try:
            result = await self._fetch(state)
        except Exception:
            self._status = previous
            raise

        # A renewal on a closed manager reopens the lease.
        if previous is LeaseStatus.CLOSED:
            self._open_count += 1
        self._status = LeaseStatus.OPEN
        get_logger().lease_event("renewed", len(state.ids), len(result.values))
        return result

    async def close(self, carry_state: str | bytes | None = None) -> None:
        """Close a lease. Holds no remote resources, so nothing is released."""
        requested = 0
        if carry_state:
            try:
                requested = len(self._deserialize(carry_state).ids)
            except MissingCarryStateError:
                get_logger().debug("Closing lease with unreadable carry state")

        if self._open_count:
            self._open_count -= 1
        if not self._open_count:
            self._status = LeaseStatus.CLOSED
        get_logger().lease_event("closed", requested)

    async def _fetch(self, state: LeaseCarryState) -> LeaseResult:
        batch = await fetch_field_values(self._store, state.ids, state.field)
        return LeaseResult(
            values=batch.values,
            warnings=batch.warnings,
            carry_state=self._serialize(state),
            renew_at=self._clock() + self._renew_interval,
        )

    @staticmethod
    def _serialize(state: LeaseCarryState) -> str:
        return state.model_dump_json()

    @staticmethod
    def _deserialize(carry_state: str | bytes | None) -> LeaseCarryState:
        if not carry_state:
            raise MissingCarryStateError("Lease carry state is missing; open a new lease")
        try:
            state = LeaseCarryState.model_validate_json(carry_state)
        except ValidationError as e:
            raise MissingCarryStateError(f"Lease carry state is unreadable: {e}") from e
        if not state.complete:
            raise MissingCarryStateError(
                "Lease carry state is incomplete: both ids and field are required"
            )
        return state
