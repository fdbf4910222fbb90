# dogbook/core/exceptions.py
"""
Error kinds raised by the services and understood by the API layer.

Each class carries the HTTP status and the ``error_code`` that the global
error handler in ``create_app`` puts on the wire. The client package maps
responses back onto the same classes.
"""
from typing import Optional


class ApiError(Exception):
    """Unexpected failure. Base class of every error the API reports."""
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "", error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class ValidationError(ApiError):
    """Missing or malformed input."""
    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthError(ApiError):
    """Missing, invalid or expired token, or bad credentials."""
    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenError(ApiError):
    status_code = 403
    error_code = "FORBIDDEN"


class ConflictError(ApiError):
    """Duplicate email or duplicate dog profile."""
    status_code = 400
    error_code = "CONFLICT"


class NotFoundError(ApiError):
    status_code = 404
    error_code = "NOT_FOUND"


ERRORS_BY_STATUS = {
    400: ValidationError,
    401: AuthError,
    403: ForbiddenError,
    404: NotFoundError,
}

ERRORS_BY_CODE = {
    "CONFLICT": ConflictError,
    "EMAIL_ALREADY_REGISTERED": ConflictError,
    "DOG_PROFILE_EXISTS": ConflictError,
}


def error_from_response(status_code: int, body: Optional[dict]) -> ApiError:
    """Rebuilds the error kind from an API error response."""
    body = body or {}
    error_code = body.get("error_code")
    message = body.get("message") or str(body.get("details") or "")
    error_cls = ERRORS_BY_CODE.get(error_code) or ERRORS_BY_STATUS.get(status_code, ApiError)
    return error_cls(message, error_code=error_code)
