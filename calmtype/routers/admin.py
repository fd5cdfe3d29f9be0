"""Admin listings for development: users and guest sessions."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from calmtype.routers.deps import Db, require_admin
from calmtype.schemas.admin import AdminGuestsOutSchema, AdminUsersOutSchema
from calmtype.services import guests, users
from calmtype.services.common import ADMIN_TIMEZONE_LABEL, format_admin_time, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=AdminUsersOutSchema)
async def list_users(db: Db):
    try:
        rows = await users.list_users(db)
    except SQLAlchemyError:
        logger.exception("Admin user listing failed")
        raise HTTPException(status_code=500, detail="Database error")
    formatted = [
        {
            **row,
            "is_guest": bool(row["is_guest"]) if row["is_guest"] is not None else None,
            "created_at": format_admin_time(row["created_at"]),
            "last_login": format_admin_time(row["last_login"]),
        }
        for row in rows
    ]
    return AdminUsersOutSchema(
        users=formatted,
        total=len(rows),
        timestamp=format_admin_time(utcnow()),
        timezone=ADMIN_TIMEZONE_LABEL,
    )


@router.get("/guests", response_model=AdminGuestsOutSchema)
async def list_guests(db: Db):
    try:
        rows = await guests.list_guest_sessions(db)
    except SQLAlchemyError:
        logger.exception("Admin guest listing failed")
        raise HTTPException(status_code=500, detail="Database error")
    formatted = [
        {
            "id": row["id"],
            "created_at": format_admin_time(row["created_at"]),
            "last_activity": format_admin_time(row["last_activity"]),
        }
        for row in rows
    ]
    return AdminGuestsOutSchema(
        guests=formatted,
        total=len(rows),
        timestamp=format_admin_time(utcnow()),
        timezone=ADMIN_TIMEZONE_LABEL,
    )
