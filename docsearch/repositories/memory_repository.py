"""
In-memory document repository.

Keeps documents in a process-local dict in insertion order and ranks
them with BM25. Used for local development and tests.
"""

import asyncio
from typing import Dict, List, Optional

import structlog

from ..domain.entities import Document
from ..search.bm25 import rank_documents
from .document_repository import IDocumentRepository

logger = structlog.get_logger(__name__)


class InMemoryDocumentRepository(IDocumentRepository):
    """Document repository backed by a dict."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._documents: Dict[str, Document] = {}
        self._lock = asyncio.Lock()

    async def write_documents(self, documents: List[Document]) -> List[Document]:
        async with self._lock:
            for document in documents:
                # Re-insert so an overwritten document moves to the end
                self._documents.pop(document.id, None)
                self._documents[document.id] = document

        logger.debug("Documents written", backend=self.backend_name, count=len(documents))
        return list(documents)

    async def get_document(self, document_id: str) -> Optional[Document]:
        return self._documents.get(document_id)

    async def get_documents(self, limit: int, offset: int = 0) -> List[Document]:
        documents = list(self._documents.values())
        return documents[offset : offset + limit]

    async def count_documents(self) -> int:
        return len(self._documents)

    async def delete_document(self, document_id: str) -> bool:
        async with self._lock:
            return self._documents.pop(document_id, None) is not None

    async def search(self, query: str, top_k: int) -> List[Document]:
        return rank_documents(query, list(self._documents.values()), top_k)

    async def health_check(self) -> dict:
        return {
            "status": "healthy",
            "backend": self.backend_name,
            "documents": len(self._documents),
        }
