"""Database infrastructure with async PostgreSQL and repository pattern.

Core components:
- **base**: Declarative base and the columns shared by every table
- **session**: Async engine and session management
- **repository**: Generic repository with CRUD and soft-delete operations
- **dependencies**: FastAPI dependency injection helpers
"""

from src.infrastructure.database.base import Base, BaseModel
from src.infrastructure.database.dependencies import DatabaseSession, get_db
from src.infrastructure.database.repository import BaseRepository, WriteOutcome
from src.infrastructure.database.session import (
    ConnectionCheck,
    check_database_connection,
    close_database,
    create_database_engine,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "ConnectionCheck",
    "DatabaseSession",
    "WriteOutcome",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "get_async_session",
    "get_db",
    "get_engine",
    "get_session_factory",
]
