"""Generic business service shared by every entity.

``CrudService`` validates DTOs, maps them to rows and back, and turns
repository results into domain errors:

- invalid input raises ``ValidationError``
- a missing row raises ``NotFoundError`` (except for ``delete``, which
  reports it as ``False``)
- anything else raised below the service is logged and wrapped into
  ``ExternalServiceError``

Every public operation runs inside a span named ``<Entity>.<operation>``.
"""

from collections.abc import Callable, Generator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Generic, Protocol, TypeAlias, TypeVar

from loguru import logger

from src.core.constants import DATABASE_SERVICE
from src.core.exceptions import (
    ExternalServiceError,
    NotFoundError,
    RentasError,
    ValidationError,
)
from src.core.observability import trace_operation
from src.domain.dtos import EntityDto
from src.domain.resources import EntityResource
from src.infrastructure.database.base import BaseModel
from src.infrastructure.database.repository import WriteOutcome

M = TypeVar("M", bound=BaseModel)
D = TypeVar("D", bound=EntityDto)


class EntityRepository(Protocol[M]):
    """Persistence operations the service relies on.

    ``last_error`` holds the exception behind the most recent
    ``WriteOutcome.STORAGE_ERROR``.
    """

    last_error: Exception | None

    async def list_all(self) -> Sequence[M]: ...

    async def get_by_id(self, entity_id: int) -> M | None: ...

    async def exists(self, entity_id: int) -> bool: ...

    async def create(self, obj: M) -> M: ...

    async def update(
        self, entity_id: int, values: Mapping[str, object]
    ) -> WriteOutcome: ...

    async def soft_delete(self, entity_id: int) -> WriteOutcome: ...

    async def delete(self, entity_id: int) -> WriteOutcome: ...


RepositoryLookup: TypeAlias = Callable[[str], EntityRepository[Any]]


class CrudService(Generic[M, D]):
    """CRUD business rules for one entity.

    Args:
        resource: Description of the entity handled by this service.
        repository: Repository for the entity's table.
        soft_delete_noop: When True, soft delete only checks that the row
            exists and reports success without writing anything.
        reference_lookup: When given, create and update check that every id
            the DTO references exists, using the repository returned for the
            referenced entity name.
    """

    def __init__(
        self,
        resource: EntityResource[M, D],
        repository: EntityRepository[M],
        *,
        soft_delete_noop: bool = False,
        reference_lookup: RepositoryLookup | None = None,
    ) -> None:
        self.resource = resource
        self.repository = repository
        self.soft_delete_noop = soft_delete_noop
        self.reference_lookup = reference_lookup

    @property
    def entity(self) -> str:
        return self.resource.name

    async def list_all(self) -> list[D]:
        """Return every row, soft-deleted ones included."""
        with self._operation("list_all", f"Error retrieving the {self.entity} list"):
            rows = await self.repository.list_all()
            return [self.resource.to_dto(row) for row in rows]

    async def get_by_id(self, entity_id: int) -> D:
        """Return one row.

        Raises:
            ValidationError: If ``entity_id`` is not positive.
            NotFoundError: If the row does not exist.
        """
        with self._operation(
            "get_by_id",
            f"Error retrieving {self.entity} with ID {entity_id}",
            entity_id=entity_id,
        ):
            self._validate_id(entity_id)
            row = await self._get_existing(entity_id)
            return self.resource.to_dto(row)

    async def create(self, dto: D | None) -> D:
        """Validate and persist a new row, returning it with its generated ID."""
        with self._operation("create", f"Error creating {self.entity}"):
            valid = self._validate(dto)
            await self._verify_references(valid)
            created = await self.repository.create(self.resource.to_entity(valid))
            return self.resource.to_dto(created)

    async def update(self, dto: D | None) -> bool:
        """Overwrite every mutable field of an existing row.

        Raises:
            ValidationError: If the DTO is invalid or its ID is not positive.
            NotFoundError: If the row does not exist.
            ExternalServiceError: If the storage layer rejected the write.
        """
        entity_id = dto.id if dto is not None else 0
        with self._operation(
            "update",
            f"Error updating {self.entity} with ID {entity_id}",
            entity_id=entity_id,
        ):
            valid = self._validate(dto)
            self._validate_id(valid.id)
            await self._get_existing(valid.id)
            await self._verify_references(valid)
            outcome = await self.repository.update(
                valid.id, self.resource.to_values(valid)
            )
            return self._check_outcome(outcome, valid.id, "update")

    async def soft_delete(self, entity_id: int) -> bool:
        """Flag an existing row as deleted; it stays readable afterwards."""
        with self._operation(
            "soft_delete",
            f"Error soft deleting {self.entity} with ID {entity_id}",
            entity_id=entity_id,
        ):
            self._validate_id(entity_id)
            await self._get_existing(entity_id)

            if self.soft_delete_noop:
                logger.info(
                    "Soft delete of {} {} left the row untouched",
                    self.entity,
                    entity_id,
                    entity=self.entity,
                    entity_id=entity_id,
                )
                return True

            outcome = await self.repository.soft_delete(entity_id)
            return self._check_outcome(outcome, entity_id, "soft delete")

    async def delete(self, entity_id: int) -> bool:
        """Permanently remove a row.

        Returns:
            bool: True once removed, False if there was no such row. A
            non-positive ID can never match a row and also yields False.
        """
        with self._operation(
            "delete",
            f"Error deleting {self.entity} with ID {entity_id}",
            entity_id=entity_id,
        ):
            if entity_id <= 0 or await self.repository.get_by_id(entity_id) is None:
                logger.info(
                    "No {} with ID {} to delete",
                    self.entity,
                    entity_id,
                    entity=self.entity,
                    entity_id=entity_id,
                )
                return False

            outcome = await self.repository.delete(entity_id)
            if outcome is WriteOutcome.NOT_FOUND:
                return False
            return self._check_outcome(outcome, entity_id, "delete")

    @contextmanager
    def _operation(
        self, operation: str, failure_message: str, **attributes: int
    ) -> Generator[None]:
        with trace_operation(
            f"{self.entity}.{operation}", entity=self.entity, **attributes
        ):
            try:
                yield
            except RentasError:
                raise
            except Exception as e:
                logger.opt(exception=e).error(
                    "{} failed: {}",
                    failure_message,
                    type(e).__name__,
                    entity=self.entity,
                    operation=operation,
                    **attributes,
                )
                raise ExternalServiceError(
                    DATABASE_SERVICE, failure_message, cause=e
                ) from e

    async def _get_existing(self, entity_id: int) -> M:
        row = await self.repository.get_by_id(entity_id)
        if row is None:
            logger.info(
                "No {} found with ID {}",
                self.entity,
                entity_id,
                entity=self.entity,
                entity_id=entity_id,
            )
            raise NotFoundError(self.entity, entity_id)
        return row

    def _validate_id(self, entity_id: int) -> None:
        if entity_id <= 0:
            logger.warning(
                "Rejected {} ID {}: must be greater than zero", self.entity, entity_id
            )
            alias = self.resource.field_alias("id")
            msg = f"{alias} must be greater than zero"
            raise ValidationError(msg, field=alias)

    def _validate(self, dto: D | None) -> D:
        """Check the rules declared on the resource."""
        if dto is None:
            msg = f"The {self.entity} payload cannot be null"
            raise ValidationError(msg)

        if (attr := self.resource.required_text) is not None:
            value = getattr(dto, attr)
            if value is None or not value.strip():
                alias = self.resource.field_alias(attr)
                logger.warning("Rejected {} with blank {}", self.entity, alias)
                msg = f"{alias} is required"
                raise ValidationError(msg, field=alias)

        attr = self.resource.required_reference
        if attr is not None and getattr(dto, attr) <= 0:
            alias = self.resource.field_alias(attr)
            logger.warning("Rejected {} with invalid {}", self.entity, alias)
            msg = f"{alias} must be greater than zero"
            raise ValidationError(msg, field=alias)

        return dto

    async def _verify_references(self, dto: D) -> None:
        if self.reference_lookup is None:
            return

        for attr, target in self.resource.references.items():
            referenced_id = getattr(dto, attr)
            if not await self.reference_lookup(target).exists(referenced_id):
                alias = self.resource.field_alias(attr)
                msg = f"{target} with ID {referenced_id} does not exist"
                raise ValidationError(msg, field=alias)

    def _check_outcome(
        self, outcome: WriteOutcome, entity_id: int, action: str
    ) -> bool:
        if outcome is WriteOutcome.NOT_FOUND:
            raise NotFoundError(self.entity, entity_id)
        if outcome is WriteOutcome.STORAGE_ERROR:
            msg = f"Could not {action} {self.entity} with ID {entity_id}"
            raise ExternalServiceError(
                DATABASE_SERVICE, msg, cause=self.repository.last_error
            )
        return True
