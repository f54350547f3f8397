"""Exception types and the standard JSON error body."""

from datetime import datetime, timezone

from flask import jsonify


class BaakhError(Exception):
    """Base exception for API errors that map to an HTTP status."""
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class InputError(BaakhError):
    """Raised when request data is missing or malformed."""
    status_code = 400


class NotFoundError(BaakhError):
    """Raised when a requested record does not exist."""
    status_code = 404


class ConflictError(BaakhError):
    """Raised when a write would violate a uniqueness rule."""
    status_code = 409


class ServiceError(Exception):
    """Raised by the HTTP client when a remote service call fails."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def error_response(message, status_code=500, details=None):
    """Standardized error response."""
    body = {
        "error": {
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }
    if details is not None:
        body["error"]["details"] = details
    return jsonify(body), status_code
