"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_settings`` and ``require_user``; the last
one gates every protected route.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import MissingTokenError
from auth.jwt import verify_token
from auth.models import TokenClaims
from config.settings import Settings
from database.session import get_db_session

logger = logging.getLogger(__name__)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    """The settings the running app was built with."""
    return request.app.state.settings


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Second whitespace-delimited segment of the header, if any."""
    if not authorization:
        return None
    parts = authorization.split()
    return parts[1] if len(parts) > 1 else None


async def require_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """
    Verify the Bearer token and return the decoded identity.

    Raises ``MissingTokenError`` (401) when no token is sent and
    ``InvalidTokenError`` (403) when it fails verification.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise MissingTokenError()

    claims = verify_token(token, settings.jwt_secret)
    logger.debug("Token accepted for user %s", claims.get("id"))
    return TokenClaims.model_validate(claims)
