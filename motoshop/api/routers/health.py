"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: motoshop.boundary
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from motoshop.api.deps.dependencies import get_gateway
from motoshop.boundary.gateway import DataGateway
from motoshop.core.exceptions import RemoteFailure


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(gateway: DataGateway = Depends(get_gateway)) -> HealthResponse:
    """Database health check."""
    try:
        await gateway.select("shops", limit=1)
    except RemoteFailure as e:
        return HealthResponse(status="unhealthy", message=e.message)
    return HealthResponse(status="healthy", message="Database connection OK")
