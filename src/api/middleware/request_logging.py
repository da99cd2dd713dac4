"""Access logging for the API.

Each request logs "Request started" and then either "Request completed"
with the status code or "Request failed" with the exception type. Both
carry the duration, and every record emitted while the request runs is
bound to its request ID, method, path and client. Requests slower than
``LogConfig.slow_request_threshold_ms`` add a warning. Paths listed in
``LogConfig.excluded_paths`` pass through unlogged.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.constants import MAX_USER_AGENT_LENGTH, REQUEST_ID_HEADER
from src.core.config import LogConfig
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.context import generate_request_id


def _request_fields(request: Request, request_id: str) -> dict[str, str]:
    user_agent = request.headers.get("user-agent", "")[:MAX_USER_AGENT_LENGTH]
    return {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_host": request.client.host if request.client else "unknown",
        "user_agent": user_agent or "unknown",
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, log_config: LogConfig) -> None:
        super().__init__(app)
        self.slow_threshold_ms = log_config.slow_request_threshold_ms
        self.excluded_paths = frozenset(log_config.excluded_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        with logger.contextualize(**_request_fields(request, request_id)):
            logger.info(
                "Request started", query_params=dict(request.query_params) or None
            )
            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "Request failed",
                    duration_ms=self._elapsed_ms(started),
                    error_type=type(exc).__name__,
                )
                raise

            duration_ms = self._elapsed_ms(started)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            if duration_ms > self.slow_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    duration_ms=duration_ms,
                    threshold_ms=self.slow_threshold_ms,
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * MILLISECONDS_PER_SECOND, 2)
