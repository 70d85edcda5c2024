"""Domain error taxonomy mapped onto HTTP responses by the application."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors that carry their own client-facing status."""

    status_code: int = 500
    error: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationFailure(ServiceError):
    status_code = 400
    error = "validation_error"
    default_message = "Validation error"


class InvalidInteractionKind(ValidationFailure):
    default_message = '"interactionType" must be one of [view, like, share]'


class InvalidIdentifier(ValidationFailure):
    default_message = "Invalid ID format"


class Unauthenticated(ServiceError):
    status_code = 401
    error = "unauthenticated"
    default_message = "Access token is required"


class Forbidden(ServiceError):
    status_code = 403
    error = "forbidden"
    default_message = "Not authorized to perform this action"


class NotFound(ServiceError):
    status_code = 404
    error = "not_found"
    default_message = "Resource not found"


class ArticleNotFound(NotFound):
    default_message = "Article not found"


class Conflict(ServiceError):
    status_code = 409
    error = "conflict"
    default_message = "Resource already exists"


class DuplicateUser(Conflict):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"User with this {field} already exists")
