"""HTTP routes: one CRUD router per registered entity."""

from fastapi import APIRouter

from src.api.routes.entities import create_entity_router
from src.domain.resources import RESOURCES


def entity_routers() -> list[APIRouter]:
    """Build the router of every registered entity."""
    return [create_entity_router(resource) for resource in RESOURCES]


__all__ = ["create_entity_router", "entity_routers"]
