"""Request dependencies: settings, token gate, guest gate, admin gate."""
import hmac
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError

from calmtype.core.config import Settings
from calmtype.core.logging import security_logger
from calmtype.core.security import (
    InvalidTokenError,
    TokenClaims,
    decode_access_token,
    extract_bearer_token,
)
from calmtype.db.adapters import DatabaseAdapter
from calmtype.db.session import get_db
from calmtype.services.common import GUEST, USER, Owner
from calmtype.services.guests import get_guest_session, is_expired, touch_guest_session

logger = logging.getLogger(__name__)

GUEST_HEADER = "x-guest-id"
ADMIN_HEADER = "x-admin-key"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


Db = Annotated[DatabaseAdapter, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


def require_user(request: Request, settings: AppSettings) -> TokenClaims:
    """Bearer token gate: 401 when absent, 403 when invalid or expired."""
    token = extract_bearer_token(request.headers.get("authorization"))
    if not token:
        security_logger.info("No access token on %s", request.url.path)
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        claims = decode_access_token(token, settings)
    except InvalidTokenError as exc:
        security_logger.info("Token verification failed on %s: %s", request.url.path, exc)
        raise HTTPException(status_code=403, detail="Invalid or expired token")
    return claims


async def require_guest(request: Request, db: Db, settings: AppSettings) -> str:
    """Guest gate: the x-guest-id header must name an existing session."""
    guest_id = request.headers.get(GUEST_HEADER)
    if not guest_id:
        raise HTTPException(status_code=401, detail="Guest session ID required")
    try:
        session = await get_guest_session(db, guest_id)
    except SQLAlchemyError:
        logger.exception("Guest session lookup failed")
        raise HTTPException(status_code=500, detail="Database error")
    if session is None:
        security_logger.info("Unknown guest session on %s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid guest session")
    if is_expired(session, settings.guest_session_ttl_hours):
        raise HTTPException(status_code=401, detail="Guest session expired")
    await touch_guest_session(db, guest_id)
    return guest_id


def user_owner(claims: Annotated[TokenClaims, Depends(require_user)]) -> Owner:
    return Owner(kind=USER, id=claims.user_id)


def guest_owner(guest_id: Annotated[str, Depends(require_guest)]) -> Owner:
    return Owner(kind=GUEST, id=guest_id)


def require_admin(request: Request, settings: AppSettings) -> None:
    """Admin listings are open unless ADMIN_API_KEY is configured."""
    if not settings.admin_api_key:
        return
    supplied = request.headers.get(ADMIN_HEADER) or ""
    if not hmac.compare_digest(supplied.encode("utf-8"), settings.admin_api_key.encode("utf-8")):
        security_logger.warning("Rejected admin request on %s", request.url.path)
        raise HTTPException(status_code=401, detail="Admin key required")
