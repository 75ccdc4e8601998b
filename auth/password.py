"""
Password hashing and verification with bcrypt.

bcrypt only reads the first 72 bytes of its input; longer passwords are
cut to that length before hashing and before checking, so any password
a user can register with is also one they can log in with.
"""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Salted bcrypt hash of *password* at work factor *rounds*."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check; an unreadable stored hash never matches."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError) as exc:
        logger.warning("Stored password hash could not be checked: %s", exc)
        return False
