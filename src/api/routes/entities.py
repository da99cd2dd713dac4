"""Router factory producing the CRUD endpoints of one entity.

Endpoints mounted under ``/api/<Entity>``:

- ``GET ""``: every row, soft-deleted ones included
- ``GET "/{entity_id}"``: one row
- ``POST ""``: create, 201 with a ``Location`` header
- ``PUT ""``: full update; responds with the row as stored afterwards
- ``PATCH "/{entity_id}"``: soft delete, responds with a JSON boolean
- ``DELETE "/{entity_id}"``: permanent removal, 404 if there was no such row

Failures surface as domain exceptions and are mapped to status codes by the
handlers in ``src.api.middleware.error_handler``.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response, status

from src.api.constants import API_PREFIX, LOCATION_HEADER
from src.api.dependencies import service_dependency
from src.api.schemas.errors import ErrorResponse, MessageResponse
from src.core.exceptions import NotFoundError
from src.domain.resources import EntityResource
from src.services.crud import CrudService

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def create_entity_router(resource: EntityResource[Any, Any]) -> APIRouter:
    """Build the router for one entity.

    Args:
        resource: The entity the endpoints operate on.

    Returns:
        APIRouter: Router with the six CRUD endpoints.
    """
    dto = resource.dto
    prefix = f"{API_PREFIX}/{resource.name}"
    router = APIRouter(prefix=prefix, tags=[resource.name], responses=ERROR_RESPONSES)
    provide_service = service_dependency(resource)
    Service = Annotated[CrudService[Any, Any], Depends(provide_service)]  # noqa: N806

    @router.get("", response_model=list[dto])  # type: ignore[valid-type]
    async def list_entities(service: Service) -> list[Any]:
        return await service.list_all()

    @router.get("/{entity_id}", response_model=dto)
    async def get_entity(entity_id: int, service: Service) -> Any:  # noqa: ANN401
        return await service.get_by_id(entity_id)

    @router.post("", response_model=dto, status_code=status.HTTP_201_CREATED)
    async def create_entity(
        payload: dto,  # type: ignore[valid-type]
        response: Response,
        service: Service,
    ) -> Any:  # noqa: ANN401
        created = await service.create(payload)
        response.headers[LOCATION_HEADER] = f"{prefix}/{created.id}"
        return created

    @router.put("", response_model=dto)
    async def update_entity(
        service: Service,
        payload: Annotated[dto | None, Body()] = None,  # type: ignore[valid-type]
    ) -> Any:  # noqa: ANN401
        await service.update(payload)
        return await service.get_by_id(payload.id)  # type: ignore[union-attr]

    @router.patch("/{entity_id}", response_model=bool)
    async def soft_delete_entity(entity_id: int, service: Service) -> bool:
        return await service.soft_delete(entity_id)

    @router.delete("/{entity_id}", response_model=MessageResponse)
    async def delete_entity(entity_id: int, service: Service) -> MessageResponse:
        if not await service.delete(entity_id):
            raise NotFoundError(resource.name, entity_id)
        return MessageResponse(
            message=f"{resource.name} with ID {entity_id} deleted successfully"
        )

    return router
