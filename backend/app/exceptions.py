"""
Questions Portal Backend — Custom Exception Hierarchy
======================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, dependencies and middleware; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    QuestionsPortalError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── UnauthorizedError        → 401 Unauthorized (no identity / not the owner)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Anything outside this hierarchy (for example an IntegrityError raised by a
duplicate vote) is treated as an internal error by the catch-all handler.
"""

from typing import Any, Dict, Optional


class QuestionsPortalError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler chooses to expose it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuestionsPortalError):
    """
    Raised when client input fails a business-level validation.

    Schema-level problems (wrong types, unknown enum values) never reach
    this class: FastAPI rejects them with 422 before the handler runs.
    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(QuestionsPortalError):
    """
    Raised when the caller has no identity or fails an ownership check.

    HTTP: 401 Unauthorized

    Ownership failures never mutate anything: the check runs after the
    target row is loaded and before any write is issued.
    """

    def __init__(
        self,
        message: str = "User have no authorization to record.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(QuestionsPortalError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; the service layer converts
    that into this exception so routes never return null silently.
    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(QuestionsPortalError):
    """
    Raised when a read query fails unexpectedly.

    HTTP: 500 Internal Server Error

    The message returned to the client is always generic; the context is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(QuestionsPortalError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP: 429 Too Many Requests (with a Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
