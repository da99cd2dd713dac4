"""Unit tests for the global exception handlers."""

from collections.abc import AsyncGenerator

import pytest
import pytest_check
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture

from src.api.middleware.error_handler import (
    GENERIC_ERROR_MESSAGE,
    register_exception_handlers,
    rentas_error_handler,
    status_code_for,
)
from src.core.exceptions import (
    ErrorCode,
    ExternalServiceError,
    NotFoundError,
    RentasError,
    ValidationError,
)


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/validation")
    async def raise_validation() -> None:
        raise ValidationError("RolName is required", field="RolName")

    @app.get("/not-found")
    async def raise_not_found() -> None:
        raise NotFoundError("Form", 4)

    @app.get("/storage")
    async def raise_storage() -> None:
        raise ExternalServiceError("database", "Could not delete Form with ID 4")

    @app.get("/http")
    async def raise_http() -> None:
        raise HTTPException(status_code=405, detail="Nope", headers={"Allow": "GET"})

    @app.get("/crash")
    async def raise_unexpected() -> None:
        raise ZeroDivisionError("division by zero")

    @app.get("/typed/{item_id}")
    async def typed(item_id: int) -> int:
        return item_id

    return app


@pytest.fixture
async def handler_client() -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=build_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.unit
class TestStatusMapping:
    """Exception types map to status codes."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (ValidationError("bad"), 400),
            (NotFoundError("Role", 1), 404),
            (ExternalServiceError("database", "down"), 500),
            (RentasError(ErrorCode.INTERNAL_ERROR, "boom"), 500),
        ],
    )
    def test_status_code_for(self, error: RentasError, expected: int) -> None:
        assert status_code_for(error) == expected

    @pytest.mark.asyncio
    async def test_rejects_other_exceptions(self, mocker: MockerFixture) -> None:
        with pytest.raises(TypeError, match="Expected RentasError"):
            await rentas_error_handler(mocker.Mock(), ValueError("x"))


@pytest.mark.unit
@pytest.mark.asyncio
class TestHandlers:
    """Every failure is answered with a message body."""

    async def test_validation_error(self, handler_client: AsyncClient) -> None:
        response = await handler_client.get("/validation")

        assert response.status_code == 400
        assert response.json() == {"message": "RolName is required"}

    async def test_not_found(self, handler_client: AsyncClient) -> None:
        response = await handler_client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {"message": "Form with ID 4 was not found"}

    async def test_storage_error(
        self, handler_client: AsyncClient, mocker: MockerFixture
    ) -> None:
        mock_logger = mocker.patch("src.api.middleware.error_handler.logger")

        response = await handler_client.get("/storage")

        assert response.status_code == 500
        assert response.json() == {"message": "Could not delete Form with ID 4"}
        mock_logger.error.assert_called_once()
        mock_logger.warning.assert_not_called()

    async def test_request_validation(self, handler_client: AsyncClient) -> None:
        response = await handler_client.get("/typed/abc")

        assert response.status_code == 400
        assert response.json()["message"].startswith(
            "Request validation failed: item_id: "
        )

    async def test_http_exception_keeps_status(
        self, handler_client: AsyncClient
    ) -> None:
        response = await handler_client.get("/http")

        with pytest_check.check:
            assert response.status_code == 405
        with pytest_check.check:
            assert response.json() == {"message": "Nope"}
        with pytest_check.check:
            assert response.headers["allow"] == "GET"

    async def test_unknown_route(self, handler_client: AsyncClient) -> None:
        response = await handler_client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}

    async def test_unexpected_error_in_development(
        self, handler_client: AsyncClient
    ) -> None:
        response = await handler_client.get("/crash")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Internal server error: ZeroDivisionError: division by zero"
        }

    async def test_unexpected_error_hidden_in_production(
        self, handler_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")

        response = await handler_client.get("/crash")

        assert response.status_code == 500
        assert response.json() == {"message": GENERIC_ERROR_MESSAGE}
