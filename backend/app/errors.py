from __future__ import annotations


class DomainError(Exception):
    """
    Base for failures raised by the service layer.

    Each subclass carries the HTTP status it maps to and a stable `code`
    so clients can tell "not eligible" from "campaign closed" from
    "already done" without parsing messages.
    """
    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class Unauthenticated(DomainError):
    status_code = 401
    code = "unauthenticated"


class Forbidden(DomainError):
    status_code = 403
    code = "forbidden"


class NotFound(DomainError):
    status_code = 404
    code = "not_found"


class InvalidState(DomainError):
    status_code = 400
    code = "invalid_state"


class Conflict(DomainError):
    status_code = 409
    code = "conflict"


class ValidationFailed(DomainError):
    status_code = 422
    code = "validation_error"
