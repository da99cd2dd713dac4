"""Infrastructure layer: persistence for the administration entities.

Key responsibilities:
- **Database access**: Async PostgreSQL with SQLAlchemy 2.0+
- **Repository pattern**: Generic CRUD operations for all entities
- **Connection management**: Pooling, health checks, and lifecycle
"""
