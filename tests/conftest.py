"""
Test configuration and fixtures
"""

from typing import List

import pytest
from fastapi.testclient import TestClient

from docsearch.app import create_app
from docsearch.config import Settings
from docsearch.domain.entities import Answer, Document
from docsearch.repositories.memory_repository import InMemoryDocumentRepository
from docsearch.services.document_service import DocumentService
from docsearch.services.reader import IAnswerReader


class FakeReader(IAnswerReader):
    """Reader returning the first word of each document as its answer."""

    def __init__(self):
        self.calls = []

    async def predict(self, question: str, documents: List[Document], top_k: int) -> List[Answer]:
        self.calls.append((question, [doc.id for doc in documents], top_k))
        answers = []
        for rank, document in enumerate(documents):
            word = document.content.split()[0]
            answers.append(
                Answer(
                    answer=word,
                    score=1.0 / (rank + 1),
                    context=document.content[:50],
                    document_id=document.id,
                    offsets_in_document=(0, len(word)),
                    offsets_in_context=(0, len(word)),
                )
            )
        return answers[:top_k]


def make_settings(**overrides) -> Settings:
    """Build settings isolated from the host environment and .env files."""
    values = {"DOCUMENT_STORE": "memory", "LOG_LEVEL": "WARNING"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def sample_documents():
    """Sample documents for testing"""
    return [
        Document(
            id="arya",
            content="Arya Stark is the daughter of Eddard Stark and Catelyn Stark.",
            meta={"name": "arya.txt"},
        ),
        Document(
            id="jon",
            content="Jon Snow was raised by Eddard Stark at Winterfell.",
            meta={"name": "jon.txt"},
        ),
        Document(
            id="tyrion",
            content="Tyrion Lannister is the youngest son of Tywin Lannister.",
            meta={"name": "tyrion.txt"},
        ),
    ]


@pytest.fixture
def repository():
    return InMemoryDocumentRepository()


@pytest.fixture
def fake_reader():
    return FakeReader()


@pytest.fixture
def document_service(repository, fake_reader):
    return DocumentService(repository=repository, reader=fake_reader, retriever_top_k=10, reader_top_k=3)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings, repository, fake_reader):
    """Create a test client backed by the in-memory store and a fake reader."""
    app = create_app(settings, repository=repository, reader=fake_reader)
    with TestClient(app) as test_client:
        yield test_client
