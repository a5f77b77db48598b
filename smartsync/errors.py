"""Application error taxonomy.

Each error carries the HTTP status it maps to; ``smartsync.main`` turns them
into ``{"detail": message}`` JSON responses and the client package raises
them back from response status codes.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class UpstreamError(AppError):
    status_code = 500


def error_for_status(status_code: int, message: str) -> AppError:
    """Map an HTTP status from the API back onto the error taxonomy."""
    if status_code == 401:
        return AuthError(message)
    if status_code == 403:
        return ForbiddenError(message)
    if status_code >= 500:
        return UpstreamError(message)
    return ValidationError(message)
