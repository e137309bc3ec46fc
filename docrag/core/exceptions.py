"""
Exception hierarchy for the document RAG service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocRAGException(Exception):
    """Base exception for all document RAG errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocRAGException):
    """Raised when input validation fails, before any I/O happens."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class EmbeddingError(DocRAGException):
    """Raised when the embedding backend is unavailable or inference fails."""

    pass


class RetrievalError(DocRAGException):
    """Raised when retrieval operations fail."""

    def __init__(
        self,
        message: str,
        collection: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize retrieval error.

        Args:
            message: Error message
            collection: Collection the failed retrieval targeted
            details: Additional context
        """
        details = details or {}
        if collection:
            details["collection"] = collection
        super().__init__(message, details)


class VectorStoreError(RetrievalError):
    """Raised when vector store operations fail (unreachable or malformed response)."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        collection: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, query, delete)
            collection: Collection involved
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, collection, details)


class CollectionNotFoundError(VectorStoreError):
    """Raised when an operation requires a collection that does not exist."""

    def __init__(self, collection: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize collection not found error.

        Args:
            collection: Name of the missing collection
            details: Additional context
        """
        super().__init__(f"Collection not found: {collection}", collection=collection, details=details)


class GenerationError(DocRAGException):
    """Raised when the generation backend is unreachable or answers with a failure."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize generation error.

        Args:
            message: Error message
            status_code: HTTP status returned by the backend, if any
            details: Additional context
        """
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)


class QueryTimeoutError(DocRAGException):
    """Raised when a query exceeds its overall deadline."""

    def __init__(self, timeout_seconds: float, details: dict[str, Any] | None = None) -> None:
        """
        Initialize query timeout error.

        Args:
            timeout_seconds: Deadline that expired
            details: Additional context
        """
        details = details or {}
        details["timeout_seconds"] = timeout_seconds
        super().__init__(f"Query exceeded deadline of {timeout_seconds}s", details)
