"""
Domain entities for documents and answers.

Core objects exchanged between the HTTP layer, the repositories and the
reader. Framework-agnostic: no FastAPI, OpenSearch or Cosmos types here.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_CONTEXT_WINDOW = 150


def generate_document_id() -> str:
    """Generate a new document identifier."""
    return uuid.uuid4().hex


@dataclass
class Document:
    """
    A text record with free-form metadata.

    The identifier is generated when not supplied. ``score`` is only set on
    documents returned from a ranked search.
    """

    content: str
    id: str = field(default_factory=generate_document_id)
    meta: Dict[str, Any] = field(default_factory=dict)
    score: Optional[float] = None

    def __post_init__(self):
        """Validate content and normalize identifier on creation."""
        if not isinstance(self.content, str) or not self.content.strip():
            raise ValueError("Document content cannot be empty")
        if not self.id:
            self.id = generate_document_id()
        self.id = str(self.id)
        if self.meta is None:
            self.meta = {}

    def with_score(self, score: float) -> "Document":
        """Return a copy of this document carrying a ranking score."""
        return replace(self, meta=dict(self.meta), score=float(score))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON representation used by the API."""
        return {
            "id": self.id,
            "content": self.content,
            "meta": self.meta,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        """
        Build a document from its JSON representation.

        Args:
            data: Mapping with ``content`` and optional ``id``, ``meta``, ``score``

        Returns:
            Document instance
        """
        return cls(
            content=data["content"],
            id=data.get("id") or generate_document_id(),
            meta=dict(data.get("meta") or {}),
            score=data.get("score"),
        )


@dataclass(frozen=True)
class Answer:
    """An answer span extracted from a document."""

    answer: str
    score: float
    context: str
    document_id: str
    offsets_in_document: Tuple[int, int]
    offsets_in_context: Tuple[int, int]
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "score": self.score,
            "context": self.context,
            "document_id": self.document_id,
            "offsets_in_document": [
                {"start": self.offsets_in_document[0], "end": self.offsets_in_document[1]}
            ],
            "offsets_in_context": [
                {"start": self.offsets_in_context[0], "end": self.offsets_in_context[1]}
            ],
            "meta": self.meta,
        }


@dataclass
class SearchResult:
    """Documents ranked for a keyword query."""

    query: str
    documents: List[Document]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "documents": [doc.to_dict() for doc in self.documents],
        }


@dataclass
class AskResult:
    """Answers extracted for a question, with the documents they came from."""

    query: str
    answers: List[Answer]
    documents: List[Document]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "answers": [answer.to_dict() for answer in self.answers],
            "documents": [doc.to_dict() for doc in self.documents],
        }


def make_context(
    text: str, start: int, end: int, window: int = DEFAULT_CONTEXT_WINDOW
) -> Tuple[str, Tuple[int, int]]:
    """
    Cut a window of text around an answer span.

    The span is centred in a window of roughly ``window`` characters,
    clipped to the text bounds.

    Args:
        text: Full document text
        start: Answer start offset in ``text``
        end: Answer end offset in ``text``
        window: Total context length in characters

    Returns:
        Tuple of (context, (start, end) offsets of the answer inside context)
    """
    span = max(end - start, 0)
    padding = max((window - span) // 2, 0)
    context_start = max(start - padding, 0)
    context_end = min(end + padding, len(text))
    context = text[context_start:context_end]
    return context, (start - context_start, end - context_start)
