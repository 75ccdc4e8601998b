"""
Error taxonomy for the auth endpoints.

Every error maps to one HTTP status and a client-facing message; the
application renders them as ``{"message": ...}``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import status


class AuthError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Bad request"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthError):
    """A required field is missing."""
    message = "Missing required fields"


class ConflictError(AuthError):
    """The email is already registered."""
    message = "User already exists"


class NotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class InvalidCredentialsError(AuthError):
    message = "invalid credentials"


class MissingTokenError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access denied, no token provided"


class InvalidTokenError(AuthError):
    """Bad signature, malformed token, or expired."""
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid token"


class InternalError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"
