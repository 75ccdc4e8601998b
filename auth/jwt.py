"""
JWT creation and verification.

Tokens are compact HS256 JWTs. The secret is always passed in by the
caller (the application's ``Settings``), never read from module state.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from auth.errors import InvalidTokenError

logger = logging.getLogger(__name__)

_JWT_ALG = "HS256"


def create_token(claims: Dict[str, Any], secret: str, expires_in: int) -> str:
    """Sign *claims* with ``iat`` and an ``exp`` of *expires_in* seconds from now."""
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = dict(claims)
    payload["iat"] = int(now.timestamp())
    payload["exp"] = int((now + timedelta(seconds=expires_in)).timestamp())
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def verify_token(token: str, secret: str) -> Dict[str, Any]:
    """
    Verify *token* and return its claims.

    Raises ``InvalidTokenError`` on a bad signature, a malformed token or
    an elapsed expiry. Tokens without ``exp`` never expire.
    """
    try:
        return jwt.decode(token, secret, algorithms=[_JWT_ALG])
    except jwt.InvalidTokenError as exc:
        # covers ExpiredSignatureError, InvalidSignatureError, DecodeError
        logger.debug("Token rejected: %s", exc)
        raise InvalidTokenError() from exc
