"""
Business logic service layer.

Orchestrates document storage, keyword retrieval and extractive question
answering on top of a document repository and a reader.
"""

import time
from typing import List, Optional, Tuple

import structlog

from ..domain.entities import AskResult, Document, SearchResult
from ..domain.exceptions import (
    DocumentNotFoundException,
    DocumentStoreException,
    ValidationException,
)
from ..metrics import (
    ask_requests_total,
    document_lookups_total,
    documents_written_total,
    search_queries_total,
    search_results_per_query,
    store_errors_total,
)
from ..repositories.document_repository import IDocumentRepository
from .reader import IAnswerReader

logger = structlog.get_logger(__name__)


class DocumentService:
    """
    Document search service.

    ``ask`` runs a two step pipeline:
    1. BM25 keyword retrieval of ``top_k_retriever`` documents
    2. Extractive reading of those documents into ``top_k_reader`` answers
    """

    def __init__(
        self,
        repository: IDocumentRepository,
        reader: IAnswerReader,
        retriever_top_k: int = 10,
        reader_top_k: int = 5,
    ):
        """
        Initialize document service.

        Args:
            repository: Document store backend
            reader: Extractive question answering reader
            retriever_top_k: Default number of documents retrieved
            reader_top_k: Default number of answers returned
        """
        self.repository = repository
        self.reader = reader
        self.retriever_top_k = retriever_top_k
        self.reader_top_k = reader_top_k

    @property
    def backend(self) -> str:
        return self.repository.backend_name

    async def create_documents(self, documents: List[Document]) -> List[Document]:
        """
        Store new documents.

        Raises:
            ValidationException: If no documents are given
        """
        if not documents:
            raise ValidationException("documents", documents, "At least one document is required")

        try:
            stored = await self.repository.write_documents(documents)
        except DocumentStoreException:
            store_errors_total.labels(backend=self.backend, operation="write").inc()
            raise

        documents_written_total.labels(backend=self.backend).inc(len(stored))
        logger.info("Documents created", count=len(stored), backend=self.backend)
        return stored

    async def get_document(self, document_id: str) -> Document:
        """
        Fetch a document by identifier.

        Raises:
            DocumentNotFoundException: If the document does not exist
        """
        document = await self.repository.get_document(document_id)

        if document is None:
            document_lookups_total.labels(backend=self.backend, result="missing").inc()
            logger.info("Document not found", document_id=document_id)
            raise DocumentNotFoundException(document_id)

        document_lookups_total.labels(backend=self.backend, result="found").inc()
        return document

    async def list_documents(self, limit: int, offset: int = 0) -> Tuple[List[Document], int]:
        """
        Page through stored documents.

        Returns:
            Tuple of (documents, total number of stored documents)
        """
        if limit < 1:
            raise ValidationException("limit", limit, "Limit must be at least 1")
        if offset < 0:
            raise ValidationException("offset", offset, "Offset cannot be negative")

        documents = await self.repository.get_documents(limit=limit, offset=offset)
        total = await self.repository.count_documents()
        return documents, total

    async def delete_document(self, document_id: str) -> None:
        """
        Delete a document.

        Raises:
            DocumentNotFoundException: If the document does not exist
        """
        deleted = await self.repository.delete_document(document_id)
        if not deleted:
            raise DocumentNotFoundException(document_id)
        logger.info("Document deleted", document_id=document_id)

    async def search(self, query: str, top_k: Optional[int] = None) -> SearchResult:
        """
        Rank documents against a keyword query.

        Raises:
            ValidationException: If the query is blank
        """
        query = query.strip()
        if not query:
            raise ValidationException("query", query, "Query cannot be empty")

        top_k = top_k or self.retriever_top_k
        start_time = time.time()

        try:
            documents = await self.repository.search(query, top_k)
        except DocumentStoreException:
            store_errors_total.labels(backend=self.backend, operation="search").inc()
            raise

        search_queries_total.labels(backend=self.backend).inc()
        search_results_per_query.observe(len(documents))
        logger.info(
            "Search completed",
            query=query,
            results=len(documents),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return SearchResult(query=query, documents=documents)

    async def ask(
        self,
        question: str,
        top_k_retriever: Optional[int] = None,
        top_k_reader: Optional[int] = None,
    ) -> AskResult:
        """
        Answer a natural-language question from stored documents.

        Raises:
            ValidationException: If the question is blank
            ReaderUnavailableException: If the reader model cannot run
        """
        question = question.strip()
        if not question:
            raise ValidationException("question", question, "Question cannot be empty")

        top_k_reader = top_k_reader or self.reader_top_k

        try:
            retrieved = await self.search(question, top_k_retriever)
            answers = await self.reader.predict(question, retrieved.documents, top_k_reader)
        except Exception:
            ask_requests_total.labels(status="error").inc()
            raise

        ask_requests_total.labels(status="success").inc()
        logger.info(
            "Question answered",
            question=question,
            documents=len(retrieved.documents),
            answers=len(answers),
        )
        return AskResult(query=question, answers=answers, documents=retrieved.documents)
