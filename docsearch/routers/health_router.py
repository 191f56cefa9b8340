"""
Health check router.

Provides liveness and readiness probes. Neither requires authentication.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..dependencies import get_document_service
from ..services.document_service import DocumentService

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str = __version__
    timestamp: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    checks: dict
    timestamp: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check(request: Request):
    """
    Basic health check.

    Always returns 200 OK if the service is running.
    Used by load balancers and orchestrators for liveness probes.
    """
    return HealthResponse(
        status="healthy",
        service=request.app.state.settings.SERVICE_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Document store unavailable"}},
    summary="Readiness check",
)
async def readiness_check(service: DocumentService = Depends(get_document_service)):
    """
    Readiness check.

    Returns 200 when the document store answers, 503 otherwise.
    Used by Kubernetes readiness probes.
    """
    store = await service.repository.health_check()
    ready = store.get("status") == "healthy"

    response = ReadinessResponse(
        ready=ready,
        checks={"document_store": store},
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    if not ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )
    return response
