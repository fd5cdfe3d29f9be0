"""Password hashing and JWT access tokens."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from calmtype.core.config import Settings

# bcrypt hard limit: 72 bytes (UTF-8)
BCRYPT_MAX_BYTES = 72

_contexts: dict[int, CryptContext] = {}


def _pwd_context(rounds: int) -> CryptContext:
    ctx = _contexts.get(rounds)
    if ctx is None:
        ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        _contexts[rounds] = ctx
    return ctx


def hash_password(password: str, rounds: int = 12) -> str:
    return _pwd_context(rounds).hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    # verification reads the cost factor from the hash itself
    return _pwd_context(12).verify(plain, hashed)


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    username: str
    email: str


class InvalidTokenError(Exception):
    """Raised when a bearer token fails signature or expiry checks."""


def create_access_token(claims: TokenClaims, settings: Settings, extra: dict[str, Any] | None = None) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "userId": claims.user_id,
        "username": claims.username,
        "email": claims.email,
        "iat": now,
        "exp": now + timedelta(hours=settings.access_token_expire_hours),
    }
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify signature and expiry; return the user claims."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    user_id = payload.get("userId")
    if not user_id:
        raise InvalidTokenError("token has no userId claim")
    return TokenClaims(
        user_id=str(user_id),
        username=payload.get("username") or "",
        email=payload.get("email") or "",
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token part of an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None
