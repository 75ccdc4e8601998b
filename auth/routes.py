"""
Auth API routes — register, login, current identity.

Route prefix: /auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_settings, require_user
from auth.errors import (
    AuthError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from auth.jwt import create_token
from auth.models import TokenClaims, public_user
from auth.password import hash_password, verify_password
from config.settings import Settings
from database.helpers import create_user, find_user_by_email
from database.models import MAX_FIELD_LENGTH

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────
# Fields are optional so that absent values get the endpoint's own 400
# message instead of a generic validation error.


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    id: int
    username: str
    email: str


class RegisterResponse(BaseModel):
    message: str
    user: PublicUser


class LoginResponse(BaseModel):
    token: str
    user: PublicUser


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: Optional[RegisterRequest] = None,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user."""
    req = req or RegisterRequest()
    if not req.username or not req.password or not req.email:
        raise ValidationError("Username, password and email are required")
    if len(req.username) > MAX_FIELD_LENGTH or len(req.email) > MAX_FIELD_LENGTH:
        raise ValidationError(
            f"Username and email must be at most {MAX_FIELD_LENGTH} characters"
        )

    try:
        if await find_user_by_email(session, req.email) is not None:
            raise ConflictError()

        password_hash = await run_in_threadpool(
            hash_password, req.password, settings.bcrypt_rounds
        )
        try:
            user = await create_user(
                session,
                username=req.username,
                email=req.email,
                password_hash=password_hash,
            )
        except IntegrityError as exc:
            # lost a race with a concurrent registration for the same email
            logger.info("Duplicate email rejected by store: %s", req.email)
            raise ConflictError() from exc
    except AuthError:
        raise
    except Exception as exc:
        logger.exception("Failed to create user")
        raise InternalError() from exc

    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"message": "User created successfully", "user": public_user(user)}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: Optional[LoginRequest] = None,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Login with email + password."""
    req = req or LoginRequest()
    if not req.email or not req.password:
        raise ValidationError("Email and password are required")

    try:
        user = await find_user_by_email(session, req.email)
        if user is None:
            raise NotFoundError()

        matched = await run_in_threadpool(verify_password, req.password, user.password)
        if not matched:
            logger.info("Login rejected for user %s: bad password", user.id)
            raise InvalidCredentialsError()

        token = create_token(
            user.token_claims(),
            settings.jwt_secret,
            settings.jwt_expiry_seconds,
        )
    except AuthError:
        raise
    except Exception as exc:
        logger.exception("Failed to login user")
        raise InternalError() from exc

    logger.info("Login: %s (%s)", user.username, user.id)
    return {"token": token, "user": public_user(user)}


@router.get("/me")
async def me(claims: TokenClaims = Depends(require_user)) -> Dict[str, Any]:
    """Identity carried by the caller's bearer token."""
    return {"user": claims.model_dump(exclude={"iat", "exp"})}
