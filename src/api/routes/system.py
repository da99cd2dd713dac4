"""Operational endpoints used by load balancers and deploy checks."""

from typing import Annotated, Any, cast

from fastapi import APIRouter, Depends
from loguru import logger

from src.api.schemas.system import AppInfo, HealthStatus
from src.core.config import Settings, get_settings
from src.infrastructure.database.session import check_database_connection, get_engine

router = APIRouter(tags=["system"])


def _log_pool_usage() -> None:
    pool = cast("Any", get_engine().pool)
    logger.bind(
        metric_type="db.pool.health",
        checked_out=pool.checkedout(),
        size=pool.size(),
        overflow=pool.overflow(),
    ).debug("Database pool health check")


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    """Report liveness; an unreachable database degrades but does not fail."""
    check = await check_database_connection()
    if check.healthy:
        _log_pool_usage()
        return HealthStatus(status="healthy", database=True)

    logger.warning("Database health check failed: {}", check.error)
    return HealthStatus(status="degraded", database=False)


@router.get("/info", response_model=AppInfo)
async def info(settings: Annotated[Settings, Depends(get_settings)]) -> AppInfo:
    return AppInfo(
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        debug=settings.debug,
    )
