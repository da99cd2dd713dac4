"""Shared fixtures for unit tests."""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.core.config import LogConfig, Settings, get_settings
from src.core.context import RequestContext
from src.core.error_context import _sensitive_key_pattern
from src.infrastructure.database.base import Base
from tests.unit.fakes import InMemoryRepositories

CONFIG_ENV_PREFIXES = (
    "APP_",
    "API_",
    "ENVIRONMENT",
    "DEBUG",
    "KUBERNETES_SERVICE_HOST",
    "LOG_CONFIG__",
    "OBSERVABILITY_CONFIG__",
    "DATABASE_CONFIG__",
    "ENTITY_CONFIG__",
)

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def memory_repositories() -> InMemoryRepositories:
    """Provide an empty in-memory repository registry."""
    return InMemoryRepositories()


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings as read from a test environment, tracing off."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("OBSERVABILITY_CONFIG__ENABLE_TRACING", "false")
    return Settings()


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings caches before and after each test."""
    get_settings.cache_clear()
    _sensitive_key_pattern.cache_clear()
    yield
    get_settings.cache_clear()
    _sensitive_key_pattern.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide configuration variables of the host; monkeypatch restores them."""
    for key in list(os.environ):
        if key.startswith(CONFIG_ENV_PREFIXES):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Clear the request context before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def mock_get_settings(mocker: MockerFixture) -> MockType:
    """Patch the settings seen by error_context with extra sensitive fields."""
    settings = Settings(
        log_config=LogConfig(sensitive_fields=["identification", "my_password"])
    )
    _sensitive_key_pattern.cache_clear()
    return mocker.patch("src.core.error_context.get_settings", return_value=settings)


@pytest.fixture
def sample_user_payload() -> dict[str, Any]:
    """A User payload as it appears on the wire."""
    return {
        "Name": "Ana",
        "LastName": "Lopez",
        "Email": "ana@example.com",
        "Password": "s3cret",
        "Identification": "1001",
        "Phone": "3001234567",
        "Address": "Calle 1",
    }


@pytest.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory SQLite database holding every table."""
    engine = create_async_engine(
        SQLITE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def sqlite_sessionmaker(
    sqlite_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return async_sessionmaker(
        sqlite_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest.fixture
async def sqlite_session(
    sqlite_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """One session on the SQLite database, rolled back afterwards."""
    async with sqlite_sessionmaker() as session:
        yield session
        await session.rollback()
