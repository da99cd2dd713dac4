"""In-memory stand-ins for the database repositories."""

from collections.abc import Mapping, Sequence

from sqlalchemy.exc import OperationalError

from src.domain.resources import get_resource
from src.infrastructure.database.base import BaseModel
from src.infrastructure.database.repository import WriteOutcome


class InMemoryRepository:
    """Dict-backed stand-in for ``BaseRepository``.

    ``fail_writes`` makes update, soft delete and delete report a storage
    error, as the real repository does when the database rejects a write,
    and leave the rejection on ``last_error``. Updates store a new row
    object, so rows handed out earlier keep their old values.
    """

    def __init__(self, model_class: type[BaseModel]) -> None:
        self.model_class = model_class
        self.rows: dict[int, BaseModel] = {}
        self.fail_writes = False
        self.last_error: Exception | None = None
        self._next_id = 1

    async def list_all(self) -> Sequence[BaseModel]:
        return [self.rows[key] for key in sorted(self.rows)]

    async def get_by_id(self, entity_id: int) -> BaseModel | None:
        return self.rows.get(entity_id)

    async def exists(self, entity_id: int) -> bool:
        return entity_id in self.rows

    async def create(self, obj: BaseModel) -> BaseModel:
        obj.id = self._next_id
        self._next_id += 1
        self.rows[obj.id] = obj
        return obj

    async def update(
        self, entity_id: int, values: Mapping[str, object]
    ) -> WriteOutcome:
        if self.fail_writes:
            return self._reject()
        row = self.rows.get(entity_id)
        if row is None:
            return WriteOutcome.NOT_FOUND
        columns = self.model_class.__table__.columns
        stored = {column.key: getattr(row, column.key) for column in columns}
        self.rows[entity_id] = self.model_class(**(stored | dict(values)))
        return WriteOutcome.APPLIED

    async def soft_delete(self, entity_id: int) -> WriteOutcome:
        return await self.update(entity_id, {"is_deleted": True})

    async def delete(self, entity_id: int) -> WriteOutcome:
        if self.fail_writes:
            return self._reject()
        if self.rows.pop(entity_id, None) is None:
            return WriteOutcome.NOT_FOUND
        return WriteOutcome.APPLIED

    def _reject(self) -> WriteOutcome:
        self.last_error = OperationalError("UPDATE", {}, Exception("disk I/O error"))
        return WriteOutcome.STORAGE_ERROR


class InMemoryRepositories:
    """Registry handing out one ``InMemoryRepository`` per entity name."""

    def __init__(self) -> None:
        self.repositories: dict[str, InMemoryRepository] = {}

    def for_resource(self, name: str) -> InMemoryRepository:
        if name not in self.repositories:
            self.repositories[name] = InMemoryRepository(get_resource(name).model)
        return self.repositories[name]
