"""
Domain exceptions for the ERP core.

Provides specific exception types for storage, numbering and status errors.
"""

from typing import Any


class ERPError(Exception):
    """Base exception for all ERP errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


# Storage Exceptions
class StorageError(ERPError):
    """Base exception for storage operations."""

    pass


class DocumentNotFoundError(StorageError):
    """Document not found in storage."""

    def __init__(self, doc_type: str, key: int | str):
        super().__init__(
            f"{doc_type} not found: {key}",
            code="DOCUMENT_NOT_FOUND",
            details={"doc_type": doc_type, "key": key},
        )


class DuplicateDocumentNumberError(StorageError):
    """
    A generated document number is already taken.

    Raised when the unique constraint on a number column rejects an insert,
    typically after two creators read the same sequence. Safe to retry with a
    fresh number.
    """

    retryable = True

    def __init__(self, doc_type: str, number: str):
        super().__init__(
            f"Document number already exists: {number}",
            code="DUPLICATE_DOCUMENT_NUMBER",
            details={"doc_type": doc_type, "number": number},
        )


# Validation Exceptions
class ValidationError(ERPError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class InvalidStatusTransitionError(ValidationError):
    """Requested status is not reachable from the current one."""

    def __init__(self, doc_type: str, current: str, requested: str):
        super().__init__(
            field="status",
            message=f"Cannot move {doc_type} from '{current}' to '{requested}'",
            value=requested,
        )
        self.code = "INVALID_STATUS_TRANSITION"
        self.details.update(
            {
                "doc_type": doc_type,
                "current": current,
                "requested": requested,
            }
        )


class ConfigurationError(ERPError):
    """Configuration error."""

    pass
