"""
PetSitter Connect Backend — Custom Exception Hierarchy
=======================================================

What:  Application-specific exceptions for the listing/application domain.
Why:   Typed errors let the global handlers pick the HTTP status code while the
       services stay free of HTTP concerns.
How:   Each exception carries a human-readable message (stable prefixes so
       clients can pattern-match) and an optional context dict that is
       logged but never returned for server-side failures.
Who:   Raised by services and the store; caught by handlers in main.py.

Exception Hierarchy:
    PetSitterError (base)
    ├── ValidationError   → 400 Bad Request (client can fix the input)
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 400 Bad Request (duplicate application)
    ├── InternalError     → 500 Internal Server Error
    └── PersistenceError  → 500 Internal Server Error (generic message)
"""

from typing import Any, Dict, Optional


class PetSitterError(Exception):
    """
    Base exception for all PetSitter application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PetSitterError):
    """
    Raised when caller-supplied data violates a business rule.

    When:    Start date in the past, end date not after start date, empty
             sitterId, accepting an application for a listing that started.
    HTTP:    400 Bad Request
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


class NotFoundError(PetSitterError):
    """
    Raised when a referenced Listing or Application does not exist.

    The store returns None for missing rows; services and routes convert
    that into this exception. Message format: "Listing with ID 7 not found".
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource.lower()} was not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(PetSitterError):
    """
    Raised when a sitter applies twice to the same listing.

    Not retryable: the earlier application (in any status) keeps existing.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(PetSitterError):
    """
    Raised for unexpected failures inside a service operation.

    Also signals the partial-cascade case: an application was accepted but
    rejecting its siblings failed. That case needs manual verification of
    the listing, not a blind retry.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(PetSitterError):
    """
    Raised by the store when a database operation fails.

    The underlying SQLAlchemy exception is chained (``raise ... from``) and
    logged; the API response only carries a generic message.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
