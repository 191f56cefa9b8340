"""
API routers for document service endpoints.
"""

from . import document_router, health_router

__all__ = ["document_router", "health_router"]
