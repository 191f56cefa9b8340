"""
Repository layer - Document persistence and retrieval.

This layer provides the document store abstraction and its backends,
hiding SDK details from the service layer.
"""

from ..config import Settings
from .document_repository import IDocumentRepository
from .memory_repository import InMemoryDocumentRepository


def create_repository(settings: Settings) -> IDocumentRepository:
    """
    Create the document repository selected by DOCUMENT_STORE.

    SDK-backed repositories are imported lazily so the memory backend
    does not need a reachable cluster or account.

    Args:
        settings: Service settings

    Returns:
        Configured repository instance
    """
    if settings.DOCUMENT_STORE == "opensearch":
        from .opensearch_repository import OpenSearchDocumentRepository, build_client

        return OpenSearchDocumentRepository(
            build_client(settings), index=settings.OPENSEARCH_INDEX
        )

    if settings.DOCUMENT_STORE == "cosmos":
        from .cosmos_repository import CosmosDocumentRepository

        return CosmosDocumentRepository.from_connection_string(
            settings.COSMOSDB_CONNECTIONSTRING,
            database_name=settings.COSMOSDB_DATABASE,
            container_name=settings.COSMOSDB_CONTAINER,
        )

    return InMemoryDocumentRepository()


__all__ = [
    "IDocumentRepository",
    "InMemoryDocumentRepository",
    "create_repository",
]
