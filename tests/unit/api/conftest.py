"""Fixtures for API unit tests.

The application is built with ``create_app`` and its repositories replaced by
the in-memory registry, so requests run end to end without a database.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture

from src.api.dependencies import get_repositories
from src.api.main import create_app
from src.core.config import Settings, get_settings

from tests.unit.fakes import InMemoryRepositories


@pytest.fixture
def api_settings(mock_settings: Settings) -> Settings:
    """Settings used by the test application; tests may tweak them."""
    return mock_settings


@pytest.fixture
def test_app(
    api_settings: Settings,
    memory_repositories: InMemoryRepositories,
    mocker: MockerFixture,
) -> FastAPI:
    """Application wired to in-memory repositories."""
    mocker.patch("src.api.main.instrument_app")
    application = create_app(api_settings)
    application.dependency_overrides[get_repositories] = lambda: memory_repositories
    application.dependency_overrides[get_settings] = lambda: api_settings
    return application


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the test application."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
