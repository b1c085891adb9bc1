"""
User API — Health Check Routes
================================

What:  Liveness and readiness probes for Docker and Kubernetes.

    GET /health        Liveness. Fixed {"status": "OK"}; never touches the
                       database, so a database outage does not get healthy
                       pods restarted.
    GET /health/ready  Readiness. Runs SELECT 1 through the pool and answers
                       503 while the database is unreachable, taking the pod
                       out of the Service endpoints.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from userapi.dependencies import DatabaseDep
from userapi.schemas.user import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="OK")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
    summary="Readiness probe",
    description="Verifies that a pooled database connection can execute a query.",
)
async def readiness_check(database: DatabaseDep):
    if await database.ping():
        return ReadinessResponse(status="OK", database="connected")

    logger.warning("Readiness check failed: database unreachable")
    return JSONResponse(
        status_code=503,
        content=ReadinessResponse(status="UNAVAILABLE", database="disconnected").model_dump(),
    )
