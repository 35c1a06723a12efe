"""
TechNotes Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for every way a request can be rejected.
Why:   Services raise typed errors; global handlers (registered in main.py)
       turn them into `{ "message": ... }` JSON responses with the right status.
How:   Each exception class carries a message, an optional context dict, and
       the HTTP status it maps to.
Who:   Raised by services and repositories; caught by global handlers.

Exception Hierarchy:
    TechNotesError (base)
    ├── ValidationError        → 400 (missing or malformed request field)
    ├── NotFoundError          → 400 (id does not resolve to a record)
    ├── ConflictError          → 409 (duplicate title / username)
    ├── DependencyError        → 400 (user still has assigned notes)
    └── StorePersistenceError  → 400 (create/save/delete failed in the store)

Why NotFoundError is 400 and not 404:
    The API addresses records through the request body, not the URL path.
    An unknown id is a bad request body, so clients see 400 for it just as
    they do for a missing field.
"""

from typing import Any, Dict, Optional


class TechNotesError(Exception):
    """
    Base exception for all TechNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 400
    error_code: str = "bad_request"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TechNotesError):
    """
    Raised when client input fails validation.

    When:    Missing required field, empty string, non-boolean `completed`/`active`,
             empty roles list, malformed id.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "All fields are required: title, text",
            "details": {"fields": ["title", "text"]}
        }
    """

    error_code = "validation_error"

    def __init__(
        self,
        message: str = "All fields are required",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = list(fields or [])


class NotFoundError(TechNotesError):
    """
    Raised when a referenced record does not exist.

    The default message follows the "<Resource> not found" wording clients
    already match on (e.g. "Note not found", "User not found"). Listing an
    empty collection passes its own message ("No notes found").
    """

    error_code = "not_found"

    def __init__(
        self,
        resource: str = "Record",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message or f"{resource} not found", context=ctx)
        self.resource = resource


class ConflictError(TechNotesError):
    """Raised when a write would duplicate a unique field (note title, username)."""

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Duplicate record",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DependencyError(TechNotesError):
    """
    Raised when a delete is blocked by records that still reference the target.

    When:    DELETE /users for a user that is assigned at least one note.
    HTTP:    400 Bad Request
    """

    error_code = "dependency_error"

    def __init__(
        self,
        message: str = "User has assigned notes",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorePersistenceError(TechNotesError):
    """
    Raised when the store rejects a create, save, or delete.

    Security Note:
        The message returned to the client is always generic; the driver error
        is logged server-side only.
    """

    error_code = "store_error"

    def __init__(
        self,
        message: str = "Invalid data received",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
