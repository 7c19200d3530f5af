"""Secret Server REST store.

This store uses httpx to talk to the Secret Server REST API. Authentication
is handled out of band: the configured bearer token is sent as-is.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from secretsync.core.config import StoreConfig
from secretsync.core.types import (
    PolicyFlags,
    SecretField,
    SecretRecord,
    TemplateDefinition,
    TemplateField,
)
from secretsync.errors.exceptions import (
    SecretNotFoundError,
    StoreAPIError,
    StoreAuthenticationError,
    StoreTimeoutError,
)
from secretsync.store.base import BaseSecretStore

T = TypeVar("T")

# PolicyFlags attribute -> REST attribute
_FLAG_KEYS: dict[str, str] = {
    "active": "active",
    "checked_out": "checkedOut",
    "checkout_enabled": "checkOutEnabled",
    "checkout_change_password": "checkOutChangePasswordEnabled",
    "auto_change_enabled": "autoChangeEnabled",
    "delay_indexing": "delayIndexing",
    "inherit_permissions": "enableInheritPermissions",
    "inherit_policy": "enableInheritSecretPolicy",
    "proxy_enabled": "proxyEnabled",
    "requires_comment": "requiresComment",
    "session_recording": "sessionRecordingEnabled",
    "incognito_launcher": "webLauncherRequiresIncognitoMode",
}

# SecretRecord attribute -> REST attribute; 0 means unset on the wire
_REFERENCE_KEYS: dict[str, str] = {
    "secret_policy_id": "secretPolicyId",
    "web_script_id": "passwordTypeWebScriptId",
    "connect_as_id": "launcherConnectAsSecretId",
    "checkout_interval": "checkOutIntervalMinutes",
}


class SecretServerStore(BaseSecretStore):
    """Secret Server REST API store.

    Example:
        >>> store = SecretServerStore(StoreConfig.from_env())
        >>> secret = await store.read(42)
    """

    def __init__(self, config: StoreConfig) -> None:
        """Initialize the store.

        Args:
            config: Server URL, bearer token and transport settings.
        """
        self._config = config
        self._api_url = config.api_url

    @property
    def store_name(self) -> str:
        return "secret-server"

    @property
    def config(self) -> StoreConfig:
        return self._config

    async def fetch_template(self, template_id: int) -> TemplateDefinition:
        target = f"template {template_id}"
        data = await self._request(
            "GET",
            f"secret-templates/{template_id}",
            operation="fetch_template",
            target=target,
        )
        return self._parse(_parse_template, data, operation="fetch_template", target=target)

    async def generate_value(self, field_slug: str, template: TemplateDefinition) -> str:
        field_id = None
        for tf in template.fields:
            if tf.slug.lower() == field_slug.lower():
                field_id = tf.id
                break
        if field_id is None:
            raise StoreAPIError(
                f"Field '{field_slug}' not found in template {template.id}",
                operation="generate_value",
            )

        data = await self._request(
            "POST",
            f"secret-templates/generate-password/{field_id}",
            operation="generate_value",
            target=f"template {template.id} field '{field_slug}'",
        )
        if not isinstance(data, str):
            raise StoreAPIError(
                f"Unexpected password generation response for field '{field_slug}'",
                operation="generate_value",
            )
        return data

    async def create(self, record: SecretRecord) -> SecretRecord:
        target = f"secret '{record.name}'"
        data = await self._request(
            "POST",
            "secrets",
            operation="create",
            target=target,
            json=_secret_payload(record),
        )
        return self._parse(_parse_secret, data, operation="create", target=target)

    async def read(self, secret_id: int) -> SecretRecord:
        data = await self._request(
            "GET", f"secrets/{secret_id}", operation="read", secret_id=secret_id
        )
        return self._parse(_parse_secret, data, operation="read", secret_id=secret_id)

    async def update(self, record: SecretRecord) -> SecretRecord:
        secret_id = int(record.id) if record.id is not None else 0
        data = await self._request(
            "PUT",
            f"secrets/{secret_id}",
            operation="update",
            secret_id=secret_id,
            json=_secret_payload(record),
        )
        return self._parse(_parse_secret, data, operation="update", secret_id=secret_id)

    async def delete(self, secret_id: int) -> None:
        await self._request(
            "DELETE", f"secrets/{secret_id}", operation="delete", secret_id=secret_id
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        secret_id: int | None = None,
        target: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and map every transport failure to a store error.

        Args:
            method: HTTP method.
            path: Path below the API root.
            operation: Store operation, recorded on the raised error.
            secret_id: Secret the request is about, if any.
            target: What the request is about, for error messages. Defaults
                to the secret id.
            json: Request body.
        """
        url = f"{self._api_url}/{path}"
        headers = {
            "Authorization": f"Bearer {self._config.token}",
            "Accept": "application/json",
        }
        if target is None and secret_id is not None:
            target = f"secret {secret_id}"
        about = f" ({target})" if target else ""

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout,
                verify=self._config.verify_tls,
                headers=headers,
            ) as client:
                response = await client.request(method, url, json=json)
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()

        except httpx.TimeoutException:
            raise StoreTimeoutError(
                f"Request to Secret Server timed out after {self._config.timeout}s{about}",
                operation=operation,
                timeout_seconds=self._config.timeout,
                secret_id=secret_id,
            )
        except httpx.ConnectError:
            raise StoreAPIError(
                f"Secret Server not reachable at {self._config.server_url}{about}",
                operation=operation,
                secret_id=secret_id,
            )
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404 and secret_id is not None:
                raise SecretNotFoundError(secret_id, operation=operation) from e
            if status in (401, 403):
                raise StoreAuthenticationError(
                    f"Secret Server rejected credentials: {status}{about}",
                    operation=operation,
                    status_code=status,
                    secret_id=secret_id,
                ) from e
            raise StoreAPIError(
                f"Secret Server API error: {status}{about} - {e.response.text}",
                operation=operation,
                secret_id=secret_id,
                status_code=status,
            ) from e
        except httpx.RequestError as e:
            raise StoreAPIError(
                f"Secret Server request failed{about}: {e}",
                operation=operation,
                secret_id=secret_id,
            ) from e
        except ValueError as e:
            raise StoreAPIError(
                f"Secret Server returned malformed JSON{about}",
                operation=operation,
                secret_id=secret_id,
            ) from e

    @staticmethod
    def _parse(
        parser: Callable[[Any], T],
        data: Any,
        *,
        operation: str,
        secret_id: int | None = None,
        target: str | None = None,
    ) -> T:
        """Parse a response body, reporting unexpected shapes as store errors."""
        try:
            return parser(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            about = target or (f"secret {secret_id}" if secret_id is not None else "response")
            raise StoreAPIError(
                f"Unexpected Secret Server response for {about}: {e!r}",
                operation=operation,
                secret_id=secret_id,
            ) from e


def _parse_template(data: dict[str, Any]) -> TemplateDefinition:
    return TemplateDefinition(
        id=data.get("id", 0),
        name=data.get("name") or "",
        fields=[
            TemplateField(
                id=f.get("secretTemplateFieldId", 0),
                name=f.get("name") or f.get("displayName") or "",
                slug=f.get("fieldSlugName") or "",
                description=f.get("description") or "",
                is_password=bool(f.get("isPassword")),
                is_file=bool(f.get("isFile")),
                is_notes=bool(f.get("isNotes")),
            )
            for f in data.get("fields") or []
        ],
    )


def _parse_secret(data: dict[str, Any]) -> SecretRecord:
    fields = [
        SecretField(
            name=item.get("fieldName") or "",
            slug=item.get("slug") or "",
            field_id=item.get("fieldId") or 0,
            item_id=item.get("itemId") or 0,
            value=item.get("itemValue") or "",
            is_file=bool(item.get("isFile")),
            is_notes=bool(item.get("isNotes")),
            is_password=bool(item.get("isPassword")),
            attachment_id=item.get("fileAttachmentId") or None,
            filename=item.get("filename") or None,
            description=item.get("fieldDescription") or "",
        )
        for item in data.get("items") or []
    ]

    references = {
        attr: data.get(key) or None for attr, key in _REFERENCE_KEYS.items()
    }

    return SecretRecord(
        id=str(data["id"]),
        name=data.get("name") or "",
        folder_id=data.get("folderId", 0),
        site_id=data.get("siteId", 0),
        template_id=data.get("secretTemplateId", 0),
        fields=fields,
        flags=PolicyFlags(
            **{attr: bool(data.get(key)) for attr, key in _FLAG_KEYS.items()}
        ),
        **references,
    )


def _secret_payload(record: SecretRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": record.name,
        "folderId": int(record.folder_id),
        "siteId": int(record.site_id),
        "secretTemplateId": int(record.template_id),
        "items": [
            {
                "itemId": f.item_id,
                "fieldId": f.field_id,
                "fieldName": f.name,
                "slug": f.slug,
                "fieldDescription": f.description,
                "itemValue": f.value or "",
                "isFile": f.is_file,
                "isNotes": f.is_notes,
                "isPassword": f.is_password,
                "fileAttachmentId": f.attachment_id or 0,
                "filename": f.filename or "",
            }
            for f in record.fields
        ],
    }
    if record.id is not None:
        payload["id"] = int(record.id)

    for attr, key in _FLAG_KEYS.items():
        value = getattr(record.flags, attr)
        if value is not None:
            payload[key] = value
    for attr, key in _REFERENCE_KEYS.items():
        value = getattr(record, attr)
        if value is not None:
            payload[key] = value

    if record.generation_intent is not None:
        payload["sshKeyArgs"] = {
            "generatePassphrase": record.generation_intent.generate_passphrase,
            "generateSshKeys": record.generation_intent.generate_keys,
        }
    return payload
