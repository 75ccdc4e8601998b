"""User views shared by the auth routes and the token dependency."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from database.models import User


class TokenClaims(BaseModel):
    """
    Payload of a verified bearer token.

    Tokens issued by ``/auth/login`` carry ``id``, ``username``, ``iat`` and
    ``exp``; any other payload signed with the shared secret is passed
    through as-is, extra claims included.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    username: Any = None
    iat: Any = None
    exp: Any = None


def public_user(user: User) -> Dict[str, Any]:
    """The only shape in which a user record leaves the service."""
    return {"id": user.id, "username": user.username, "email": user.email}


__all__ = ["TokenClaims", "User", "public_user"]
