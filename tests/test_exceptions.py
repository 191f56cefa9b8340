"""
Tests for domain exceptions.

Simple tests to ensure exceptions work correctly.
"""

from docsearch.domain.exceptions import (
    DocumentNotFoundException,
    DocumentServiceException,
    DocumentStoreException,
    ReaderUnavailableException,
    ValidationException,
)


class TestExceptions:
    """Test custom exceptions."""

    def test_base_exception(self):
        exc = DocumentServiceException("Test error")
        assert exc.message == "Test error"
        assert exc.details == {}
        assert str(exc) == "Test error"

    def test_document_not_found_is_static(self):
        exc = DocumentNotFoundException("abc123")
        assert str(exc) == "Document not found"
        assert exc.document_id == "abc123"
        assert exc.details == {"document_id": "abc123"}

    def test_validation_exception(self):
        exc = ValidationException("query", "", "Query cannot be empty")
        assert "query" in str(exc)
        assert "Query cannot be empty" in str(exc)

    def test_document_store_exception(self):
        exc = DocumentStoreException("opensearch", "search", "connection refused")
        assert "opensearch" in str(exc)
        assert "search" in str(exc)
        assert "connection refused" in str(exc)
        assert exc.details["backend"] == "opensearch"

    def test_document_store_exception_without_reason(self):
        exc = DocumentStoreException("cosmos", "write")
        assert str(exc) == "Document store 'cosmos' failed during write"

    def test_reader_unavailable_exception(self):
        exc = ReaderUnavailableException("deepset/roberta-base-squad2", "out of memory")
        assert "deepset/roberta-base-squad2" in str(exc)
        assert "out of memory" in str(exc)

    def test_hierarchy(self):
        for exc in (
            DocumentNotFoundException("x"),
            ValidationException("f", 1, "r"),
            DocumentStoreException("memory", "get"),
            ReaderUnavailableException("m"),
        ):
            assert isinstance(exc, DocumentServiceException)
