"""
PetSitter Connect Backend — Health Check Route
===============================================

What:  GET /health for load balancers, container health checks and monitoring.
How:   Runs SELECT 1 through the store; the service is only "healthy" when the
       database answers.

    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from petsitter import __version__
from petsitter.schemas.common import HealthResponse
from petsitter.store import PetSitterStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: PetSitterStore = Depends(get_store),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    if not await store.ping():
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
