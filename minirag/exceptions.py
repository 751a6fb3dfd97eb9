"""Application exception hierarchy.

All custom exceptions inherit from MiniRAGError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "RAG-1000"
    CONFIGURATION_ERROR = "RAG-1001"
    VALIDATION_ERROR = "RAG-1002"

    # Document processing errors (2xxx)
    DOCUMENT_NOT_FOUND = "RAG-2000"
    DOCUMENT_READ_ERROR = "RAG-2001"
    DOCUMENT_DECODE_ERROR = "RAG-2002"

    # Embedding errors (3xxx)
    EMBEDDING_ERROR = "RAG-3000"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "RAG-4000"
    STORE_IO_ERROR = "RAG-4001"
    SERIALIZATION_ERROR = "RAG-4002"
    CONSISTENCY_ERROR = "RAG-4003"

    # LLM errors (5xxx)
    LLM_SERVICE_ERROR = "RAG-5000"
    LLM_TIMEOUT = "RAG-5001"
    LLM_UNAVAILABLE = "RAG-5002"

    # Retrieval errors (6xxx)
    RETRIEVAL_ERROR = "RAG-6000"
    STORE_NOT_READY = "RAG-6001"


class MiniRAGError(Exception):
    """Base exception for all minirag errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(MiniRAGError):
    """Invalid constructor parameter (dimension, chunk size, overlap)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(MiniRAGError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class DocumentError(MiniRAGError):
    """Source document could not be read."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DOCUMENT_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingError(MiniRAGError):
    """Embedder failed on a given text."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(MiniRAGError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class StoreIOError(VectorStoreError):
    """Reading or writing the persisted store file failed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.STORE_IO_ERROR, details)


class SerializationError(VectorStoreError):
    """The store could not be encoded, or the persisted file is malformed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.SERIALIZATION_ERROR, details)


class ConsistencyError(VectorStoreError):
    """Persisted documents and vectors do not line up."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONSISTENCY_ERROR, details)


class LLMError(MiniRAGError):
    """LLM service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class RetrievalError(MiniRAGError):
    """Retrieval operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RETRIEVAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
