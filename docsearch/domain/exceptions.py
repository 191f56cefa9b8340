"""
Custom exceptions for the document search domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns (HTTP, OpenSearch, Cosmos DB, ...).
"""

from typing import Any, Optional


class DocumentServiceException(Exception):
    """Base exception for all document service errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DocumentNotFoundException(DocumentServiceException):
    """Raised when no document exists for the requested identifier."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(
            message="Document not found", details={"document_id": document_id}
        )


class ValidationException(DocumentServiceException):
    """Raised when input validation fails."""

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Validation failed for {field}: {reason}"
        super().__init__(
            message=message,
            details={"field": field, "value": str(value), "reason": reason},
        )


class DocumentStoreException(DocumentServiceException):
    """Raised when the backing document store fails."""

    def __init__(self, backend: str, operation: str, reason: Optional[str] = None):
        message = f"Document store '{backend}' failed during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            details={"backend": backend, "operation": operation, "reason": reason},
        )


class ReaderUnavailableException(DocumentServiceException):
    """Raised when the question answering model cannot be loaded or run."""

    def __init__(self, model: str, reason: Optional[str] = None):
        message = f"Reader model '{model}' unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"model": model, "reason": reason})
