"""
Domain exceptions raised by the leave lifecycle and balance engine.

Every guard failure surfaces as one of these, carrying a stable error code and
the HTTP status the API layer maps it to (see app.core.errors).
"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all leave engine failures"""

    status_code: int = 400
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(DomainError):
    """Malformed input: bad dates, short reason, missing mandatory remarks"""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class Forbidden(DomainError):
    """Actor is not allowed to perform the action"""

    status_code = 403
    error_code = "FORBIDDEN"


class NotFound(DomainError):
    """Unknown request, employee, balance or department approver"""

    status_code = 404
    error_code = "NOT_FOUND"


class InvalidState(DomainError):
    """Action attempted on a leave request that is no longer pending"""

    status_code = 409
    error_code = "INVALID_STATE"


class Conflict(DomainError):
    """A concurrent write changed the record between read and write"""

    status_code = 409
    error_code = "CONFLICT"


class AlreadyExists(DomainError):
    """Duplicate balance or employee registration"""

    status_code = 409
    error_code = "ALREADY_EXISTS"
