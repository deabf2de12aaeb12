"""
Health check endpoint.

Provides system health status for monitoring and load balancers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from empresas import __version__
from empresas.api.dependencies import get_database
from empresas.api.schemas import HealthResponse
from empresas.infrastructure.database import Database

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    database: Annotated[Database, Depends(get_database)],
) -> HealthResponse:
    """
    Check system health.

    Returns status of core components for monitoring dashboards
    and load balancer health checks.
    """
    connected = await database.ping()

    return HealthResponse(
        status="healthy" if connected else "degraded",
        version=__version__,
        database="connected" if connected else "unavailable",
    )
