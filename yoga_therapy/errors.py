"""Error taxonomy shared by the API and the client.

Every error carries the HTTP status it maps to, so the server can translate
a raised error into a response and the client can translate a response back
into the same error type.
"""


class YogaTherapyError(Exception):
    status_code = 500

    def __init__(self, message: str = "Internal server error", errors: list | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(YogaTherapyError):
    """Malformed or missing input."""
    status_code = 400


class AuthenticationError(YogaTherapyError):
    """Missing, invalid or expired credentials."""
    status_code = 401


class AuthorizationError(YogaTherapyError):
    """Authenticated, but the role or ownership does not allow the action."""
    status_code = 403


class NotFoundError(YogaTherapyError):
    status_code = 404


class ConflictError(YogaTherapyError):
    status_code = 409


class TransientError(YogaTherapyError):
    """Network or server failure; the caller may retry."""
    status_code = 503


_BY_STATUS = {
    cls.status_code: cls
    for cls in (ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError)
}


def error_for_status(status_code: int, message: str, errors: list | None = None) -> YogaTherapyError:
    """Rebuild an error from a response; the instance keeps the real status."""
    if status_code == 422:
        cls = ValidationError
    elif status_code == 429 or status_code >= 500:
        # rate limited or server trouble, both retriable
        cls = TransientError
    else:
        cls = _BY_STATUS.get(status_code, YogaTherapyError)
    error = cls(message, errors)
    error.status_code = status_code
    return error
