"""Rentas - administrative backend for municipal tax management.

Architecture Overview:
- **API Layer**: FastAPI routers, middleware and exception handlers
- **Service Layer**: Validation, mapping and error translation per entity
- **Domain Layer**: ORM models, DTOs and the entity resource registry
- **Core Layer**: Configuration, logging, tracing and the exception hierarchy
- **Infrastructure Layer**: Async SQLAlchemy engine, sessions and repository
"""
