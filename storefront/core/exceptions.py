# storefront/core/exceptions.py
"""
Application error taxonomy.

Every error is an HTTPException carrying its own status code, so services
can raise them directly and the envelope handlers in
`storefront.core.responses` render them uniformly.
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class: `detail` becomes the `error` field of the envelope."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: Any = None):
        super().__init__(status_code=self.default_status, detail=detail)


class ValidationError(AppError):
    """Missing or malformed input."""

    default_status = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    default_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: Any = None):
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    """Valid identity, wrong role or not the owner."""

    default_status = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Uniqueness violation (duplicate email, order number, default address...)."""

    default_status = status.HTTP_409_CONFLICT


class ServerError(AppError):
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
