"""Custom exception hierarchy for Docfolio."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Not-found errors
    USER_NOT_FOUND = "USER_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"

    # Uniqueness violations
    DUPLICATE_NAME = "DUPLICATE_NAME"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Rate limiting
    RATE_LIMITED = "RATE_LIMITED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DocfolioException(Exception):
    """
    Base exception for all Docfolio errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to the response envelope.

        Returns:
            Dictionary with success, message, error, and details fields
        """
        return {
            "success": False,
            "message": self.message,
            "error": self.error_code.value,
            "details": self.details
        }


class UserNotFoundError(DocfolioException):
    """User not found in database."""

    def __init__(self, user_id: int):
        super().__init__(
            f"User not found: {user_id}",
            ErrorCode.USER_NOT_FOUND,
            status_code=404,
            details={"user_id": user_id}
        )


class DocumentNotFoundError(DocfolioException):
    """Document not found in database."""

    def __init__(self, document_id: int):
        super().__init__(
            f"Document not found: {document_id}",
            ErrorCode.DOCUMENT_NOT_FOUND,
            status_code=404,
            details={"document_id": document_id}
        )


class FolderNotFoundError(DocfolioException):
    """Folder not found in database."""

    def __init__(self, folder_id: int):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class DuplicateNameError(DocfolioException):
    """A document or folder with this name already exists for the owner."""

    def __init__(self, kind: str, name: str):
        super().__init__(
            f'A {kind} with the name "{name}" already exists for this user.',
            ErrorCode.DUPLICATE_NAME,
            status_code=409,
            details={"kind": kind, "name": name}
        )


class ValidationError(DocfolioException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DatabaseError(DocfolioException):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )


def parse_id(value: Any, label: str) -> int:
    """Parse an externally supplied identifier into a positive integer.

    Identifiers arrive as strings in the URL; anything that is not a
    positive integer is rejected before the store is touched.

    Raises:
        ValidationError: ``Invalid {label}`` when the value is not usable.
    """
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}", field=label.replace(" ", "_").lower())
    if parsed < 1:
        raise ValidationError(f"Invalid {label}", field=label.replace(" ", "_").lower())
    return parsed
