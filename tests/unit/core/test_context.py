"""Unit tests for src/core/context.py."""

import asyncio
import uuid

import pytest

from src.core.context import (
    RequestContext,
    generate_correlation_id,
    generate_request_id,
)


@pytest.mark.unit
class TestRequestContext:
    """The correlation ID is stored per context."""

    def test_set_get_clear(self) -> None:
        RequestContext.set_correlation_id("corr-1")
        assert RequestContext.get_correlation_id() == "corr-1"

        RequestContext.clear()
        assert RequestContext.get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_isolation_between_tasks(self) -> None:
        async def worker(correlation_id: str) -> str | None:
            RequestContext.set_correlation_id(correlation_id)
            await asyncio.sleep(0)
            return RequestContext.get_correlation_id()

        results = await asyncio.gather(worker("a"), worker("b"), worker("c"))

        assert results == ["a", "b", "c"]
        assert RequestContext.get_correlation_id() is None


@pytest.mark.unit
class TestIdGeneration:
    """Generated IDs are UUID4 based and unique."""

    def test_correlation_id_is_uuid4(self) -> None:
        assert uuid.UUID(generate_correlation_id()).version == 4

    def test_request_id_format(self) -> None:
        request_id = generate_request_id()

        assert request_id.startswith("req-")
        assert uuid.UUID(request_id.removeprefix("req-")).version == 4

    def test_unique(self) -> None:
        assert len({generate_request_id() for _ in range(50)}) == 50
