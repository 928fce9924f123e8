"""
Domain error taxonomy.

Services raise only these errors at their boundary. Each carries the HTTP
status the API layer reports and an optional list of detail entries that end
up in the ``errors`` field of the error envelope.
"""
from typing import Any, Dict, List, Optional


class VideohubError(Exception):
    """Base class for every error that may cross a service boundary."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(VideohubError):
    """Malformed or unrecognized input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, errors=None):
        if field and not errors:
            errors = [{"field": field, "message": message}]
        super().__init__(message, errors)
        self.field = field


class MissingParameterError(ValidationError):
    """A required parameter was not supplied."""

    def __init__(self, field: str):
        super().__init__(f"{field} is required", field=field)


class AuthenticationError(VideohubError):
    status_code = 401


class AuthorizationError(VideohubError):
    """The requester does not own the resource."""

    status_code = 403


class NotFoundError(VideohubError):
    status_code = 404


class ConflictError(VideohubError):
    """Uniqueness violation."""

    status_code = 409


class DependencyError(VideohubError):
    """The asset store or the database failed, timeouts included."""

    status_code = 502


class InternalError(VideohubError):
    status_code = 500
