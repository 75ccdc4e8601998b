"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase

MAX_FIELD_LENGTH = 255


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(MAX_FIELD_LENGTH), nullable=False)
    email = Column(String(MAX_FIELD_LENGTH), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def token_claims(self) -> Dict[str, Any]:
        """Claims embedded in this user's access tokens."""
        return {"id": self.id, "username": self.username}

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
