"""
DevMatch — Domain error taxonomy.

Services raise these; ``app.main`` registers one exception handler that
renders every ``DevMatchError`` as ``{"message": ...}`` with the class's
HTTP status code.
"""

from __future__ import annotations


class DevMatchError(Exception):
    """Base class for every error the API reports to clients."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DevMatchError):
    """Bad input shape or format."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ForbiddenFieldError(DevMatchError):
    def __init__(self, fields: list[str]):
        super().__init__(f"Update not allowed on field(s): {', '.join(fields)}")
        self.fields = fields


class SelfRequestError(DevMatchError):
    pass


class DuplicateRequestError(DevMatchError):
    pass


class InvalidTargetUser(DevMatchError):
    pass


class Unauthenticated(DevMatchError):
    status_code = 401


class InvalidToken(Unauthenticated):
    pass


class InvalidCredentials(Unauthenticated):
    pass


class UserNotFound(DevMatchError):
    status_code = 404


class RequestNotFound(DevMatchError):
    status_code = 404


class StorageError(DevMatchError):
    status_code = 500
