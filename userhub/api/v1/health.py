"""Liveness endpoints: plain server status and a health check with database connectivity."""

import time
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from userhub.api.deps import SettingsDep, rate_limit
from userhub.core.config import APP_VERSION
from userhub.core.database import check_db_connected, get_db
from userhub.schemas.common import MessageResponse
from userhub.schemas.health import HealthResponse

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get(
    "/status",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("server.status", limit=5, window_sec=60))],
)
def get_status() -> MessageResponse:
    """Server live status."""
    return MessageResponse(message="Server is working")


@router.get("/health/", response_model=HealthResponse)
def get_health(settings: SettingsDep, db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Used by load balancers and monitoring; always 200, with status degraded when the database is unreachable."""
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        version=APP_VERSION,
        database="connected" if connected else "disconnected",
        uptime_seconds=int(time.monotonic() - _STARTED_AT),
    )
