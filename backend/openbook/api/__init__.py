from .errors import (
    WikiError,
    BadRequestError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    PageNotFoundError,
    ConflictError
)

__all__ = [
    "WikiError",
    "BadRequestError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "PageNotFoundError",
    "ConflictError"
]
