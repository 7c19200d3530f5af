"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from secretsync.errors.exceptions import (
    BindingError,
    CoercionError,
    ConfigurationError,
    FieldNotFoundError,
    GenerationError,
    IdentityError,
    LeaseError,
    LeaseRequestError,
    MissingCarryStateError,
    ReconcileError,
    SecretNotFoundError,
    SecretSyncError,
    StoreAPIError,
    StoreTimeoutError,
    TransportError,
)


class TestHierarchy:
    """Every error is catchable through its family and the root."""

    @pytest.mark.parametrize(
        "error,family",
        [
            (BindingError("Domain", []), ReconcileError),
            (CoercionError("folder_id", "x"), ReconcileError),
            (GenerationError("Password", "boom"), ReconcileError),
            (IdentityError("changed", expected="1", actual="2"), ReconcileError),
            (SecretNotFoundError(5), TransportError),
            (StoreAPIError("bad", operation="read"), TransportError),
            (LeaseRequestError("no ids"), LeaseError),
            (MissingCarryStateError("gone"), LeaseError),
        ],
    )
    def test_family(self, error, family) -> None:
        assert isinstance(error, family)
        assert isinstance(error, SecretSyncError)

    def test_reconcile_errors_not_retryable(self) -> None:
        assert CoercionError("site_id", "x").retryable is False
        assert not issubclass(ConfigurationError, TransportError)


class TestMessages:
    """Fatal errors name what they are about."""

    def test_binding_error_lists_available_fields(self) -> None:
        error = BindingError("Domain", ["Username (slug: username, id: 1)"])

        assert "Domain" in str(error)
        assert "Username (slug: username, id: 1)" in str(error)

    def test_binding_error_with_empty_template(self) -> None:
        assert "(none)" in str(BindingError("Domain", []))

    def test_field_not_found(self) -> None:
        error = FieldNotFoundError(12, "Password")

        assert str(error) == "Field 'Password' not found in secret 12"
        assert error.secret_id == 12

    def test_secret_not_found_carries_operation(self) -> None:
        error = SecretNotFoundError(9, operation="update")

        assert error.operation == "update"
        assert error.status_code == 404
        assert error.retryable is False

    @pytest.mark.parametrize("status,retryable", [(None, True), (400, False), (503, True)])
    def test_api_error_retryable(self, status, retryable) -> None:
        assert StoreAPIError("x", operation="read", status_code=status).retryable is retryable

    def test_timeout_retryable(self) -> None:
        error = StoreTimeoutError("slow", operation="read", timeout_seconds=3.0, secret_id=4)

        assert error.retryable is True
        assert error.secret_id == 4
