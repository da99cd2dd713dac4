"""Generic async repository over one entity table.

Reads and inserts let storage faults propagate to the caller. Writes that
target a single row by ID (update, soft delete, delete) report a
``WriteOutcome`` instead, so a missing row and a failed statement can be
told apart without exceptions. The error behind the last storage failure is
kept on ``last_error``.

Reads use ``populate_existing`` so rows already in the session identity map
are refreshed after a bulk write.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger
from sqlalchemy import ColumnElement, delete, exists, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.dml import Delete, Update

from src.infrastructure.database.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class WriteOutcome(Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


class BaseRepository(Generic[T]):
    """CRUD access to the table mapped by ``model_class``.

    Args:
        session: Session of the current unit of work.
        model_class: Mapped model of the table.

    Example:
        roles = await BaseRepository(session, Rol).list_all()
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class
        self.entity = model_class.__name__
        self.last_error: SQLAlchemyError | None = None

    def _by_id(self, entity_id: int) -> ColumnElement[bool]:
        return self.model_class.id == entity_id

    async def list_all(self) -> Sequence[T]:
        """Every row ordered by ID, soft-deleted ones included."""
        rows = await self.session.scalars(
            select(self.model_class)
            .order_by(self.model_class.id)
            .execution_options(populate_existing=True)
        )
        found = rows.all()
        logger.debug("Fetched {} {} rows", len(found), self.entity)
        return found

    async def get_by_id(self, entity_id: int) -> T | None:
        row = await self.session.scalar(
            select(self.model_class)
            .where(self._by_id(entity_id))
            .execution_options(populate_existing=True)
        )
        if row is None:
            logger.debug("No {} row with ID {}", self.entity, entity_id)
        return row

    async def exists(self, entity_id: int) -> bool:
        query = select(exists().where(self._by_id(entity_id)))
        return bool(await self.session.scalar(query))

    async def create(self, obj: T) -> T:
        """Insert ``obj`` and return it with its generated ID loaded."""
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        logger.info("Created {} with ID {}", self.entity, obj.id)
        return obj

    async def update(
        self, entity_id: int, values: Mapping[str, object]
    ) -> WriteOutcome:
        """Overwrite the given columns of one row."""
        logger.debug("Updating {} {} columns {}", self.entity, entity_id, list(values))
        stmt = (
            update(self.model_class)
            .where(self._by_id(entity_id))
            .values(dict(values))
            .execution_options(synchronize_session=False)
        )
        return await self._write("update", entity_id, stmt)

    async def soft_delete(self, entity_id: int) -> WriteOutcome:
        """Set ``is_deleted`` on one row; the row stays in the table."""
        stmt = (
            update(self.model_class)
            .where(self._by_id(entity_id))
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        return await self._write("soft delete", entity_id, stmt)

    async def delete(self, entity_id: int) -> WriteOutcome:
        stmt = delete(self.model_class).where(self._by_id(entity_id))
        return await self._write("delete", entity_id, stmt)

    async def _write(
        self, action: str, entity_id: int, stmt: Update | Delete
    ) -> WriteOutcome:
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(
                "Failed to {} {} with ID {}: {}",
                action,
                self.entity,
                entity_id,
                type(e).__name__,
                entity=self.entity,
                entity_id=entity_id,
            )
            await self.session.rollback()
            self.last_error = e
            return WriteOutcome.STORAGE_ERROR

        if result.rowcount == 0:
            logger.debug(
                "Nothing to {}: no {} with ID {}", action, self.entity, entity_id
            )
            return WriteOutcome.NOT_FOUND

        logger.info("Applied {} to {} with ID {}", action, self.entity, entity_id)
        return WriteOutcome.APPLIED
