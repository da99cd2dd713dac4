"""Domain layer: ORM models, DTOs and the entity resource registry."""
