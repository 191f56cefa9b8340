"""
Document API router.

Thin HTTP layer over the document service: create, read, list, delete,
keyword search and extractive question answering. Every route requires
basic authentication when it is configured.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.auth import require_basic_auth
from ..dependencies import get_document_service
from ..domain.entities import Document
from ..preprocessing import documents_from_text
from ..services.document_service import DocumentService

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    dependencies=[Depends(require_basic_auth)],
)


# Request/Response Models
class DocumentIn(BaseModel):
    """Document submitted for storage."""

    id: Optional[str] = Field(
        default=None, min_length=1, max_length=256, description="Identifier, generated if omitted"
    )
    content: str = Field(..., min_length=1, description="Document text")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content cannot be blank")
        return value


class CreateDocumentsRequest(BaseModel):
    """Batch of documents to store, optionally split into passages."""

    documents: List[DocumentIn] = Field(..., min_length=1, max_length=1000)
    split_length: Optional[int] = Field(
        default=None, ge=1, le=10000, description="Split each document into N-word passages"
    )
    split_overlap: int = Field(default=0, ge=0, description="Words shared between passages")

    @model_validator(mode="after")
    def validate_split(self) -> "CreateDocumentsRequest":
        if self.split_length is not None and self.split_overlap >= self.split_length:
            raise ValueError("split_overlap must be smaller than split_length")
        return self


class DocumentOut(BaseModel):
    """Stored document."""

    id: str
    content: str
    meta: Dict[str, Any] = {}
    score: Optional[float] = None


class CreateDocumentsResponse(BaseModel):
    success: bool = True
    count: int
    documents: List[DocumentOut]


class DocumentListResponse(BaseModel):
    total: int
    limit: int
    offset: int
    documents: List[DocumentOut]


class SearchResponse(BaseModel):
    query: str
    documents: List[DocumentOut]


class AskRequest(BaseModel):
    """Question answering request."""

    question: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        json_schema_extra={"example": "Who is the father of Arya Stark?"},
    )
    top_k_retriever: Optional[int] = Field(default=None, ge=1, le=100)
    top_k_reader: Optional[int] = Field(default=None, ge=1, le=50)


class Span(BaseModel):
    start: int
    end: int


class AnswerOut(BaseModel):
    answer: str
    score: float
    context: str
    document_id: str
    offsets_in_document: List[Span]
    offsets_in_context: List[Span]
    meta: Dict[str, Any] = {}


class AskResponse(BaseModel):
    query: str
    answers: List[AnswerOut]
    documents: List[DocumentOut]


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = False
    error: str
    message: str
    details: dict = {}


def _to_documents(payload: CreateDocumentsRequest) -> List[Document]:
    documents: List[Document] = []
    for item in payload.documents:
        documents.extend(
            documents_from_text(
                item.content,
                meta=item.meta,
                split_length=payload.split_length,
                split_overlap=payload.split_overlap,
                document_id=item.id,
            )
        )
    return documents


@router.post(
    "",
    response_model=CreateDocumentsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Store documents",
)
async def create_documents(
    payload: CreateDocumentsRequest,
    service: DocumentService = Depends(get_document_service),
):
    """Store documents, overwriting any existing documents with the same id."""
    stored = await service.create_documents(_to_documents(payload))
    return {
        "success": True,
        "count": len(stored),
        "documents": [doc.to_dict() for doc in stored],
    }


@router.get(
    "/",
    response_model=DocumentListResponse,
    summary="List documents",
)
async def list_documents(
    request: Request,
    limit: Optional[int] = Query(default=None, ge=1, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Documents to skip"),
    service: DocumentService = Depends(get_document_service),
):
    """List stored documents page by page."""
    settings = request.app.state.settings
    limit = min(limit or settings.LIST_DEFAULT_LIMIT, settings.LIST_MAX_LIMIT)

    documents, total = await service.list_documents(limit=limit, offset=offset)
    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "documents": [doc.to_dict() for doc in documents],
    }


@router.get(
    "/search/{query}",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Keyword search",
)
async def search_documents(
    query: str,
    top_k: Optional[int] = Query(default=None, ge=1, le=100),
    service: DocumentService = Depends(get_document_service),
):
    """Rank documents against a keyword query with BM25."""
    result = await service.search(query, top_k=top_k)
    return result.to_dict()


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Answer a question",
)
async def ask_question(
    payload: AskRequest,
    service: DocumentService = Depends(get_document_service),
):
    """Retrieve documents for a question and extract answer spans from them."""
    result = await service.ask(
        payload.question,
        top_k_retriever=payload.top_k_retriever,
        top_k_reader=payload.top_k_reader,
    )
    return result.to_dict()


@router.get(
    "/{document_id}",
    response_model=DocumentOut,
    responses={404: {"description": "Document not found", "model": ErrorResponse}},
    summary="Get document by id",
)
async def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
):
    document = await service.get_document(document_id)
    return document.to_dict()


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Document not found", "model": ErrorResponse}},
    summary="Delete document",
)
async def delete_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
):
    await service.delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
