"""Fixtures for database infrastructure unit tests."""

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models import Rol
from src.infrastructure.database.repository import BaseRepository


@pytest.fixture
def mock_session(mocker: MockerFixture) -> AsyncSession:
    """Create a properly mocked async session."""
    mock: AsyncSession = mocker.AsyncMock(spec=AsyncSession)
    return mock


@pytest.fixture
def rol_repository(mock_session: AsyncSession) -> BaseRepository[Rol]:
    """Repository for the rols table bound to the mocked session."""
    return BaseRepository(mock_session, Rol)
