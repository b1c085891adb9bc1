"""
User API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for each error kind the service knows.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by the repository and the route handlers.

Exception Hierarchy:
    UserApiError (base)
    ├── ValidationError   → 422 Unprocessable Entity
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict
    └── StoreError        → 500 Internal Server Error

The repository reports a missing row as None/False, never as NotFoundError;
routes raise NotFoundError when they need a 404.
"""

from typing import Any, Dict, Optional


class UserApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only selectively returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UserApiError):
    """
    Raised when client input fails validation.

    Request bodies are validated by Pydantic before a handler runs; the
    global handler re-raises those failures as this type so every validation
    failure shares one response format.
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


class NotFoundError(UserApiError):
    """Raised by the HTTP layer when the requested resource does not exist."""

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


class ConflictError(UserApiError):
    """
    Raised when a write violates a uniqueness constraint in the store.

    What:    Creating or updating a user with an email that already exists.
    HTTP:    409 Conflict

    The store enforces uniqueness; the repository only translates the
    constraint violation into this type.
    """

    def __init__(
        self,
        message: str = "A resource with the same unique value already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreError(UserApiError):
    """
    Raised when a database operation fails for any reason other than a
    uniqueness conflict: lost connection, pool timeout, bad SQL, etc.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver messages
    and SQL stay in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
