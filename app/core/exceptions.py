# /app/core/exceptions.py

"""
The business-error taxonomy shared by every service.

Services raise these instead of `HTTPException` so that they stay independent
of the web layer. Each error carries the HTTP status it maps to; the global
handler registered in `app.main` turns any of them into the standard
`{"success": false, "message": ...}` response body.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for all expected, user-facing failures."""

    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    """A referenced entity does not exist (or is archived)."""

    status_code = 404
    default_message = "Resource not found."


class ConflictError(ServiceError):
    """A uniqueness rule or scheduling rule would be violated."""

    status_code = 409
    default_message = "Resource already exists."


class InvalidReferenceError(ServiceError):
    """A provided id exists but fails a relational precondition."""

    status_code = 400
    default_message = "Invalid reference."


class InvalidInputError(ServiceError):
    status_code = 400
    default_message = "Invalid input."


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "Could not validate credentials."


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Not authorized."
