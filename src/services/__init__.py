"""Business layer: validation, mapping and error translation."""

from src.services.crud import CrudService, EntityRepository, RepositoryLookup

__all__ = ["CrudService", "EntityRepository", "RepositoryLookup"]
