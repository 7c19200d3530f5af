"""Secret lifecycle - create, read, update, delete and import.

Each operation runs bind, resolve, submit, read back and reconcile against
the remote store and returns the durable record the host runtime should
persist. Nothing partial is ever returned: any error propagates before a
record is produced.
"""

from __future__ import annotations

from secretsync.core.types import (
    GenerationIntent,
    Phase,
    SecretField,
    SecretRecord,
    TemplateDefinition,
)
from secretsync.errors.exceptions import IdentityError
from secretsync.logging import get_logger
from secretsync.reconcile.binder import bind_fields, bound_field
from secretsync.reconcile.merge import reconcile_fields
from secretsync.reconcile.policy import (
    ValueResolver,
    coerce_placement,
    parse_identifier,
    preserve_values,
)
from secretsync.store.base import BaseSecretStore


class SecretResource:
    """Lifecycle operations for a managed secret.

    The resource holds no per-operation state, so one instance can serve
    concurrent operations on different secrets.

    Example:
        >>> resource = SecretResource(InMemorySecretStore(templates=[template]))
        >>> state = await resource.create(desired)
        >>> state = await resource.update(changed, prior=state)
        >>> await resource.delete(state.id)
    """

    def __init__(self, store: BaseSecretStore) -> None:
        self._store = store

    @property
    def store(self) -> BaseSecretStore:
        """The remote store this resource talks to."""
        return self._store

    async def create(self, desired: SecretRecord) -> SecretRecord:
        """Create a secret from a declaration.

        Undeclared password fields are generated by the store; SSH key
        fields are generated from the declaration's generation intent.

        Args:
            desired: The declared secret. Must not carry an id.

        Returns:
            The durable record, carrying the generation intent forward.

        Raises:
            IdentityError: If the declaration already has an id.
            CoercionError: If a placement id does not parse.
            BindingError: If a declared field is not in the template.
            GenerationError: If the store cannot generate a value.
            TransportError: If any store call fails.
        """
        logger = get_logger()
        logger.operation_start("create", desired.name)

        if desired.id is not None:
            raise IdentityError(
                f"Secret '{desired.name}' already has id {desired.id}; "
                "import it instead of creating it",
                expected=None,
                actual=desired.id,
            )

        placement = coerce_placement(desired)
        template = await self._store.fetch_template(placement[2])
        intent = desired.generation_intent

        declared, submitted = await self._resolve_fields(
            desired, template, Phase.CREATE, prior=None, intent=intent
        )
        payload = self._payload(desired, placement, submitted, secret_id=None, intent=intent)

        created = await self._store.create(payload)
        secret_id = parse_identifier(created.id, "id")
        remote = await self._store.read(secret_id)

        fields = reconcile_fields(submitted, remote.fields, prior=None, intent=intent)
        fields = preserve_values(fields, submitted, declared)
        record = remote.model_copy(update={"fields": fields, "generation_intent": intent})

        logger.operation_end("create", record.id, len(record.fields))
        return record

    async def read(
        self, secret_id: int | str, prior: SecretRecord | None = None
    ) -> SecretRecord:
        """Refresh the durable record from the store.

        Args:
            secret_id: Id of the secret to read.
            prior: The last durable record, used for field order,
                attachment identity and values the store did not echo.

        Raises:
            CoercionError: If the id does not parse.
            SecretNotFoundError: If the secret no longer exists.
        """
        logger = get_logger()
        phase = Phase.READ if prior is not None else Phase.IMPORT
        logger.operation_start(phase.value, str(secret_id))

        remote = await self._store.read(parse_identifier(secret_id, "id"))

        if prior is None:
            record = remote
        else:
            intent = prior.generation_intent
            fields = reconcile_fields(prior.fields, remote.fields, prior.fields, intent)
            fields = preserve_values(fields, prior.fields)
            record = remote.model_copy(update={"fields": fields, "generation_intent": intent})

        logger.operation_end(phase.value, record.id, len(record.fields))
        return record

    async def import_state(self, secret_id: int | str) -> SecretRecord:
        """Adopt an existing secret. Field order is the store's order."""
        return await self.read(secret_id)

    async def update(self, desired: SecretRecord, prior: SecretRecord) -> SecretRecord:
        """Apply a changed declaration to an existing secret.

        Undeclared fields keep their prior values; fields declared as ""
        are cleared. No value is generated on update and the generation
        intent is never submitted.

        Args:
            desired: The declared secret. Its id, if set, must equal the
                prior durable id.
            prior: The last durable record.

        Raises:
            IdentityError: If the ids disagree.
            CoercionError: If the durable id or a placement id does not parse.
            BindingError: If a declared field is not in the template.
            TransportError: If any store call fails.
        """
        logger = get_logger()
        logger.operation_start("update", desired.name)

        secret_id = parse_identifier(prior.id, "id")
        if desired.id is not None and parse_identifier(desired.id, "id") != secret_id:
            raise IdentityError(
                f"Secret id changed from {prior.id} to {desired.id}",
                expected=prior.id,
                actual=desired.id,
            )

        placement = coerce_placement(desired)
        template = await self._store.fetch_template(placement[2])
        intent = desired.generation_intent or prior.generation_intent

        declared, submitted = await self._resolve_fields(
            desired, template, Phase.UPDATE, prior=prior.fields, intent=intent
        )
        payload = self._payload(desired, placement, submitted, secret_id=secret_id, intent=None)

        await self._store.update(payload)
        remote = await self._store.read(secret_id)

        fields = reconcile_fields(submitted, remote.fields, prior.fields, intent)
        fields = preserve_values(fields, submitted, declared)
        record = remote.model_copy(update={"fields": fields, "generation_intent": intent})

        logger.operation_end("update", record.id, len(record.fields))
        return record

    async def delete(self, secret_id: int | str) -> None:
        """Delete a secret.

        Raises:
            SecretNotFoundError: If the secret does not exist.
        """
        logger = get_logger()
        logger.operation_start("delete", str(secret_id))
        await self._store.delete(parse_identifier(secret_id, "id"))
        logger.operation_end("delete", str(secret_id))

    async def _resolve_fields(
        self,
        desired: SecretRecord,
        template: TemplateDefinition,
        phase: Phase,
        *,
        prior: list[SecretField] | None,
        intent: GenerationIntent | None,
    ) -> tuple[list[SecretField], list[SecretField]]:
        """Bind and resolve every declared field.

        Returns the declaration under canonical template names, and the
        fields to submit.
        """
        # Bind everything first so a bad declaration fails before any generation.
        bindings = bind_fields(desired.fields, template)
        resolver = ValueResolver(self._store, template, phase, prior=prior, intent=intent)

        declared = []
        submitted = []
        for field, template_field in bindings:
            resolution = await resolver.resolve(field, template_field)
            declared.append(field.model_copy(update={"name": template_field.name}))
            submitted.append(bound_field(field, template_field, resolution.value))
        return declared, submitted

    @staticmethod
    def _payload(
        desired: SecretRecord,
        placement: tuple[int, int, int],
        fields: list[SecretField],
        *,
        secret_id: int | None,
        intent: GenerationIntent | None,
    ) -> SecretRecord:
        folder_id, site_id, template_id = placement
        return desired.model_copy(
            update={
                "id": str(secret_id) if secret_id is not None else None,
                "folder_id": folder_id,
                "site_id": site_id,
                "template_id": template_id,
                "fields": fields,
                "generation_intent": intent,
            },
            deep=True,
        )
