"""
Main FastAPI application.

This file wires together all layers:
- Domain: Documents, answers and domain errors
- Repositories: Memory, OpenSearch and Cosmos DB document stores
- Services: Retrieval and reading orchestration
- Routers: HTTP endpoints
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .dependencies import set_document_service
from .domain.exceptions import (
    DocumentNotFoundException,
    DocumentServiceException,
    DocumentStoreException,
    ReaderUnavailableException,
    ValidationException,
)
from .logging_config import bind_request_id, clear_request_context, configure_logging
from .metrics import metrics_endpoint, track_request_metrics
from .metrics_middleware import PrometheusMiddleware
from .repositories import IDocumentRepository, create_repository
from .routers import document_router, health_router
from .services.document_service import DocumentService
from .services.reader import IAnswerReader, TransformersReader

logger = structlog.get_logger(__name__)

# Static body for lookups that find nothing
NOT_FOUND_BODY = {
    "success": False,
    "error": "not_found",
    "message": "Document not found",
}


def create_document_service(
    settings: Settings,
    repository: Optional[IDocumentRepository] = None,
    reader: Optional[IAnswerReader] = None,
) -> DocumentService:
    """
    Create and configure the document service with all dependencies.

    Args:
        settings: Service settings
        repository: Pre-built repository, created from settings if None
        reader: Pre-built reader, created from settings if None

    Returns:
        Configured DocumentService instance
    """
    if repository is None:
        repository = create_repository(settings)
    if reader is None:
        reader = TransformersReader(settings.READER_MODEL, use_gpu=settings.READER_USE_GPU)

    return DocumentService(
        repository=repository,
        reader=reader,
        retriever_top_k=settings.RETRIEVER_TOP_K,
        reader_top_k=settings.READER_TOP_K,
    )


def _error_response(status_code: int, error: str, exc: DocumentServiceException) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "message": exc.message,
            "details": exc.details,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses."""

    @app.exception_handler(DocumentNotFoundException)
    async def not_found_handler(request: Request, exc: DocumentNotFoundException):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={**NOT_FOUND_BODY, "details": {"document_id": exc.document_id}},
        )

    @app.exception_handler(ValidationException)
    async def validation_handler(request: Request, exc: ValidationException):
        return _error_response(status.HTTP_400_BAD_REQUEST, "validation_error", exc)

    @app.exception_handler(DocumentStoreException)
    async def store_handler(request: Request, exc: DocumentStoreException):
        logger.error("Document store failure", path=request.url.path, error=exc.message)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "document_store_error", exc)

    @app.exception_handler(ReaderUnavailableException)
    async def reader_handler(request: Request, exc: ReaderUnavailableException):
        logger.error("Reader failure", path=request.url.path, error=exc.message)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "reader_unavailable", exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        # Runs outside the request-id middleware, whose context is already cleared
        request_id = getattr(request.state, "request_id", None) or request.headers.get(
            "X-Request-ID"
        )
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            request_id=request_id,
            exc_info=exc,
        )
        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "request_id": request_id,
            },
        )
        if request_id:
            response.headers["X-Request-ID"] = request_id
        return response


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[IDocumentRepository] = None,
    reader: Optional[IAnswerReader] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings, the global settings if None
        repository: Optional repository override (tests, embedding)
        reader: Optional reader override (tests, embedding)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(
            "Starting document service",
            version=__version__,
            document_store=settings.DOCUMENT_STORE,
        )

        service = create_document_service(settings, repository=repository, reader=reader)
        set_document_service(service)
        app.state.document_service = service

        logger.info("Document service started", backend=service.backend)

        yield

        logger.info("Shutting down document service")
        set_document_service(None)
        await service.repository.close()
        logger.info("Document service stopped")

    app = FastAPI(
        title="Document Search Service",
        description="Document storage, BM25 keyword search and extractive question answering",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID for distributed tracing."""
        request_id = bind_request_id(request.headers.get("X-Request-ID"))
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    app.include_router(health_router.router)
    app.include_router(document_router.router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return await metrics_endpoint()

    return app


def build_app() -> FastAPI:
    """Uvicorn factory: configure logging from settings and build the app."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)
    return create_app(settings)
