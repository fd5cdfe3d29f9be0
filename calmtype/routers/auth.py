"""Auth routes: register, login, guest session. Stateless JWT for users."""
from __future__ import annotations

import logging
import re
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from calmtype.core.security import (
    BCRYPT_MAX_BYTES,
    TokenClaims,
    create_access_token,
    hash_password,
    verify_password,
)
from calmtype.routers.deps import AppSettings, Db, require_user
from calmtype.schemas.auth import (
    AuthOutSchema,
    GuestOutSchema,
    LoginSchema,
    MeOutSchema,
    RegisterSchema,
    UserOutSchema,
)
from calmtype.services import guests, users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@router.post("/register", response_model=AuthOutSchema)
async def register(body: RegisterSchema, db: Db, settings: AppSettings):
    """Create a user and return a signed token."""
    username = (body.username or "").strip()
    email = (body.email or "").strip()
    password = body.password or ""

    if not username or not email or not password:
        raise HTTPException(status_code=400, detail="Username, email, and password are required")

    # minimum password length (characters)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400, detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise HTTPException(status_code=400, detail="Password is too long")

    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="Invalid email address")

    try:
        taken = await users.username_or_email_taken(db, username, email)
    except SQLAlchemyError:
        logger.exception("Database error during user check")
        raise HTTPException(status_code=500, detail="Database error")
    if taken:
        raise HTTPException(status_code=409, detail="Username or email already exists")

    password_hash = await run_in_threadpool(hash_password, password, settings.bcrypt_rounds)

    try:
        user = await users.create_user(db, username, email, password_hash)
    except IntegrityError:
        # lost a race with a concurrent registration
        raise HTTPException(status_code=409, detail="Username or email already exists")
    except SQLAlchemyError:
        logger.exception("Database error during user creation")
        raise HTTPException(status_code=500, detail="Failed to create user")

    logger.info("User registered: %s", user["id"])
    token = create_access_token(TokenClaims(user["id"], username, email), settings)
    return AuthOutSchema(message="User created successfully", token=token, user=UserOutSchema(**user))


@router.post("/login", response_model=AuthOutSchema)
async def login(body: LoginSchema, db: Db, settings: AppSettings):
    """Authenticate by username or email; return a fresh token."""
    identifier = (body.username or "").strip()
    password = body.password or ""
    if not identifier or not password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    try:
        user = await users.find_for_login(db, identifier)
    except SQLAlchemyError:
        logger.exception("Database error during login")
        raise HTTPException(status_code=500, detail="Database error")

    if not user or not await run_in_threadpool(verify_password, password, user["password_hash"]):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    await users.touch_last_login(db, user["id"])

    claims = TokenClaims(user["id"], user["username"], user["email"])
    return AuthOutSchema(
        message="Login successful",
        token=create_access_token(claims, settings),
        user=UserOutSchema(id=user["id"], username=user["username"], email=user["email"]),
    )


@router.post("/guest", response_model=GuestOutSchema)
async def create_guest(db: Db, settings: AppSettings):
    try:
        guest_id = await guests.create_guest_session(db)
    except SQLAlchemyError:
        logger.exception("Guest session creation error")
        raise HTTPException(status_code=500, detail="Failed to create guest session")
    return GuestOutSchema(
        message="Guest session created",
        guest_id=guest_id,
        expires_in=settings.guest_session_advertised_ttl,
    )


@router.get("/me", response_model=MeOutSchema)
def me(claims: Annotated[TokenClaims, Depends(require_user)]):
    """Decoded claims of the presented token."""
    return MeOutSchema(user_id=claims.user_id, username=claims.username, email=claims.email)
