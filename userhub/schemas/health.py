"""Schemas for the liveness endpoints."""

from typing import Literal

from pydantic import Field

from userhub.schemas.common import CamelModel

DatabaseStatus = Literal["connected", "disconnected"]


class HealthResponse(CamelModel):
    """Process status plus database reachability. status is degraded when the database is down."""

    status: Literal["ok", "degraded"]
    environment: str
    version: str
    database: DatabaseStatus
    uptime_seconds: int = Field(ge=0, description="Seconds since the process started")
