"""Base secret store interface.

All remote store clients must implement this abstract base class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from secretsync.core.types import SecretRecord, TemplateDefinition


class BaseSecretStore(ABC):
    """Abstract base class for the authoritative remote secret store.

    A single store instance is shared read-only across concurrent
    operations and must not carry per-operation mutable state.

    Example:
        >>> class MyStore(BaseSecretStore):
        ...     async def read(self, secret_id):
        ...         # Implementation here
        ...         pass
    """

    @property
    @abstractmethod
    def store_name(self) -> str:
        """Return the store name (e.g., 'memory', 'secret-server')."""
        ...

    @abstractmethod
    async def fetch_template(self, template_id: int) -> TemplateDefinition:
        """Fetch a secret template by id.

        Raises:
            TransportError: If the template cannot be fetched.
        """
        ...

    @abstractmethod
    async def generate_value(self, field_slug: str, template: TemplateDefinition) -> str:
        """Generate a value for a password-capable template field.

        Args:
            field_slug: Slug of the template field to generate for.
            template: Template the field belongs to.

        Returns:
            The generated value.
        """
        ...

    @abstractmethod
    async def create(self, record: SecretRecord) -> SecretRecord:
        """Create a secret. The store assigns the id.

        Args:
            record: Secret to create; placement ids are already integers.

        Returns:
            The created secret as the store sees it.
        """
        ...

    @abstractmethod
    async def read(self, secret_id: int) -> SecretRecord:
        """Read a secret by id.

        Raises:
            SecretNotFoundError: If no secret has this id.
            TransportError: For any other failure.
        """
        ...

    @abstractmethod
    async def update(self, record: SecretRecord) -> SecretRecord:
        """Replace an existing secret. `record.id` identifies it."""
        ...

    @abstractmethod
    async def delete(self, secret_id: int) -> None:
        """Delete a secret by id."""
        ...

    def extract_field(self, record: SecretRecord, field_name: str) -> tuple[str, bool]:
        """Extract a field value from a fetched secret.

        Matches the field name first, then the slug, case-insensitively.

        Returns:
            (value, found). An unset value is returned as "".
        """
        lowered = field_name.lower()
        for f in record.fields:
            if f.name.lower() == lowered:
                return f.value or "", True
        for f in record.fields:
            if f.slug and f.slug.lower() == lowered:
                return f.value or "", True
        return "", False

    async def aclose(self) -> None:
        """Release any connection resources held by the store."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(store={self.store_name!r})"
