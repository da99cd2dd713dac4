"""Response bodies of the operational endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Liveness report; ``degraded`` means the process runs but the DB is down."""

    status: Literal["healthy", "degraded"]
    database: bool = Field(..., description="Whether ``SELECT 1`` succeeded")


class AppInfo(BaseModel):
    app_name: str
    version: str
    environment: str
    debug: bool
