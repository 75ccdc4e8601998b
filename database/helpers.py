"""
Database helper functions — user lookup and creation.

"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User

logger = logging.getLogger(__name__)


async def find_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Return the ``User`` registered under *email*, or ``None``."""
    result = await session.execute(
        select(User).where(User.email == email)
    )
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    password_hash: str,
) -> User:
    """
    Insert a ``User`` row and return it with its ``id`` assigned.

    Raises ``sqlalchemy.exc.IntegrityError`` when the email is already
    taken; the unique constraint on ``users.email`` is what guarantees
    uniqueness, whatever lookups the caller did beforehand.
    """
    user = User(username=username, email=email, password=password_hash)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.debug("Inserted user row id=%s", user.id)
    return user
