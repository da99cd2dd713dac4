"""Engine, session factory and unit-of-work helpers for the Rentas database.

One asyncpg-backed engine serves the whole process. It is created on first
use together with its session factory and disposed of at shutdown. Each
request works in its own ``AsyncSession`` obtained from
``get_async_session``, which commits when the block completes and rolls
back when it raises.

With ``LOG_CONFIG__ENABLE_SQL_LOGGING`` set, statements slower than
``LOG_CONFIG__SLOW_QUERY_THRESHOLD_MS`` are logged with their sanitized
parameters.
"""

import threading
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import NamedTuple
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.engine.interfaces import DBAPICursor, ExecutionContext
from sqlalchemy.exc import ArgumentError, InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import DatabaseConfig, LogConfig, get_settings
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.context import RequestContext
from src.core.error_context import sanitize_sql_params
from src.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    MAX_LOGGED_STATEMENT_LENGTH,
    POOL_RECYCLE_SECONDS,
)


class ConnectionCheck(NamedTuple):
    """Outcome of the ``SELECT 1`` probe."""

    healthy: bool
    error: str | None = None


class SlowQueryLogger:
    """Cursor event listeners that time statements and log slow ones."""

    def __init__(self, threshold_ms: int) -> None:
        self.threshold_ms = threshold_ms
        self._started: WeakKeyDictionary[ExecutionContext, float] = (
            WeakKeyDictionary()
        )

    def attach(self, engine: AsyncEngine) -> None:
        event.listen(engine.sync_engine, "before_cursor_execute", self.before)
        event.listen(engine.sync_engine, "after_cursor_execute", self.after)

    def before(
        self,
        _conn: Connection,
        _cursor: DBAPICursor,
        _statement: str,
        _parameters: object,
        context: ExecutionContext,
        _executemany: bool,
    ) -> None:
        self._started[context] = time.perf_counter()

    def after(
        self,
        _conn: Connection,
        cursor: DBAPICursor,
        statement: str,
        parameters: object,
        context: ExecutionContext,
        _executemany: bool,
    ) -> None:
        started = self._started.pop(context, None)
        if started is None:
            return

        duration_ms = (time.perf_counter() - started) * MILLISECONDS_PER_SECOND
        if duration_ms < self.threshold_ms:
            return

        query = " ".join(statement.split())[:MAX_LOGGED_STATEMENT_LENGTH]
        rowcount = getattr(cursor, "rowcount", None)
        logger.warning(
            "Slow query ({:.2f}ms): {}",
            duration_ms,
            query[:100],
            query=query,
            duration_ms=round(duration_ms, 2),
            threshold_ms=self.threshold_ms,
            rows_affected=-1 if rowcount is None else rowcount,
            parameters=sanitize_sql_params(parameters),
            correlation_id=RequestContext.get_correlation_id(),
        )


def create_database_engine(
    database_url: str | None = None,
    *,
    db_config: DatabaseConfig | None = None,
    log_config: LogConfig | None = None,
) -> AsyncEngine:
    """Create the async engine, attaching slow query logging when enabled.

    Args:
        database_url: Overrides ``db_config.database_url``.
        db_config: Pool settings; the configured ones by default.
        log_config: Logging settings; the configured ones by default.
    """
    settings = get_settings()
    db_config = db_config or settings.database_config
    log_config = log_config or settings.log_config

    engine = create_async_engine(
        database_url or db_config.database_url,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=db_config.pool_pre_ping,
        pool_recycle=POOL_RECYCLE_SECONDS,
        echo=db_config.echo,
        connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
    )

    if log_config.enable_sql_logging:
        try:
            SlowQueryLogger(log_config.slow_query_threshold_ms).attach(engine)
        except (InvalidRequestError, ArgumentError) as e:
            logger.warning("Slow query logging disabled: {}: {}", type(e).__name__, e)

    logger.info(
        "Database engine ready (pool_size={}, max_overflow={}, sql_logging={})",
        db_config.pool_size,
        db_config.max_overflow,
        log_config.enable_sql_logging,
    )
    return engine


class _DatabaseManager:
    """Lazily builds the shared engine and its session factory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def _ensure(self) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
        with self._lock:
            if self._engine is None or self._session_factory is None:
                self._engine = create_database_engine()
                self._session_factory = async_sessionmaker(
                    self._engine, class_=AsyncSession, expire_on_commit=False
                )
            return self._engine, self._session_factory

    def get_engine(self) -> AsyncEngine:
        return self._ensure()[0]

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._ensure()[1]

    async def close(self) -> None:
        with self._lock:
            engine, self._engine, self._session_factory = self._engine, None, None
        if engine is not None:
            await engine.dispose()
            logger.info("Database engine disposed")


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Run one unit of work.

    Example:
        async with get_async_session() as session:
            roles = await BaseRepository(session, Rol).list_all()
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.debug("Unit of work rolled back")
            raise
        await session.commit()
        logger.debug("Unit of work committed")


async def close_database() -> None:
    """Dispose of the shared engine; the next use creates a new one."""
    await _db_manager.close()


async def check_database_connection() -> ConnectionCheck:
    """Probe the database with ``SELECT 1``."""
    try:
        async with get_engine().connect() as conn:
            await conn.scalar(text("SELECT 1"))
    except SQLAlchemyError as e:
        return ConnectionCheck(healthy=False, error=str(e))
    return ConnectionCheck(healthy=True)
