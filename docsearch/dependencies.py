"""
FastAPI dependency for the document service.

The lifespan in ``app.create_app`` builds one ``DocumentService`` per
application (repository plus reader) and registers it here. The document
and readiness routers resolve it through ``Depends(get_document_service)``,
so tests can swap backends by passing a repository to ``create_app``.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .services.document_service import DocumentService

_document_service: Optional["DocumentService"] = None


def set_document_service(service: Optional["DocumentService"]) -> None:
    """Register the service on startup, or clear it with None on shutdown."""
    global _document_service
    _document_service = service


async def get_document_service() -> "DocumentService":
    """
    Resolve the running document service.

    Raises:
        RuntimeError: If a request arrives outside the app lifespan
    """
    if _document_service is None:
        raise RuntimeError("Document service not initialized")
    return _document_service
