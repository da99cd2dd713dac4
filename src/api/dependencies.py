"""Dependency wiring from the request session to the entity services.

``get_repositories`` builds one ``Repositories`` registry per request, bound
to the request's database session. ``service_dependency`` returns, for a
given resource, a dependency that builds its ``CrudService`` with the
per-entity switches from ``EntityConfig``.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domain.resources import EntityResource, get_resource
from src.infrastructure.database.dependencies import DatabaseSession
from src.infrastructure.database.repository import BaseRepository
from src.services.crud import CrudService, EntityRepository, RepositoryLookup


class Repositories:
    """One repository per entity, all sharing the same session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._repositories: dict[str, BaseRepository[Any]] = {}

    def for_resource(self, name: str) -> EntityRepository[Any]:
        """Return the repository of the entity called ``name``."""
        if name not in self._repositories:
            model = get_resource(name).model
            self._repositories[name] = BaseRepository(self.session, model)
        return self._repositories[name]


async def get_repositories(session: DatabaseSession) -> Repositories:
    """Provide the repository registry for the current request."""
    return Repositories(session)


def build_service(
    resource: EntityResource[Any, Any],
    lookup: RepositoryLookup,
    settings: Settings,
) -> CrudService[Any, Any]:
    """Create the service of ``resource`` configured from ``settings``."""
    entity_config = settings.entity_config
    return CrudService(
        resource,
        lookup(resource.name),
        soft_delete_noop=resource.name in entity_config.soft_delete_noop,
        reference_lookup=lookup if entity_config.verify_references else None,
    )


def service_dependency(
    resource: EntityResource[Any, Any],
) -> Callable[..., Awaitable[CrudService[Any, Any]]]:
    """FastAPI dependency that provides the service of ``resource``."""

    async def provide_service(
        repositories: Annotated[Repositories, Depends(get_repositories)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> CrudService[Any, Any]:
        return build_service(resource, repositories.for_resource, settings)

    return provide_service
