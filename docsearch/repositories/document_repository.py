"""
Document repository interface (Abstract Base Class).

Defines the contract for document persistence and keyword retrieval
independent of the underlying storage mechanism.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..domain.entities import Document


class IDocumentRepository(ABC):
    """
    Abstract repository interface for document operations.

    Implementations own persistence, identity and ranking. Writing a
    document whose id already exists replaces the stored copy.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def write_documents(self, documents: List[Document]) -> List[Document]:
        """
        Persist documents, overwriting existing ids.

        Args:
            documents: Documents to store

        Returns:
            The stored documents
        """
        pass

    @abstractmethod
    async def get_document(self, document_id: str) -> Optional[Document]:
        """
        Find a document by identifier.

        Args:
            document_id: Document identifier

        Returns:
            Document if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_documents(self, limit: int, offset: int = 0) -> List[Document]:
        """
        Page through stored documents.

        Args:
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            At most ``limit`` documents
        """
        pass

    @abstractmethod
    async def count_documents(self) -> int:
        """Return the number of stored documents."""
        pass

    @abstractmethod
    async def delete_document(self, document_id: str) -> bool:
        """
        Delete a document.

        Args:
            document_id: Document identifier

        Returns:
            True if a document was deleted, False if it did not exist
        """
        pass

    @abstractmethod
    async def search(self, query: str, top_k: int) -> List[Document]:
        """
        Rank documents against a keyword query with BM25.

        Args:
            query: Free-text query
            top_k: Maximum number of documents to return

        Returns:
            Matching documents with ``score`` set, best first
        """
        pass

    @abstractmethod
    async def health_check(self) -> dict:
        """
        Check connectivity with the backing store.

        Returns:
            Dictionary with at least a ``status`` key (healthy/unhealthy)
        """
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None
