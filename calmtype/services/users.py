"""Account storage: lookup, creation, last-login bookkeeping."""
import logging
import uuid

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from calmtype.db.adapters import DatabaseAdapter
from calmtype.models.user import User
from calmtype.services.common import utcnow

logger = logging.getLogger(__name__)

users = User.__table__


async def username_or_email_taken(db: DatabaseAdapter, username: str, email: str) -> bool:
    row = await db.get(
        select(users.c.id).where(or_(users.c.username == username, users.c.email == email)).limit(1)
    )
    return row is not None


async def find_for_login(db: DatabaseAdapter, identifier: str) -> dict | None:
    """Look a user up by username or email."""
    return await db.get(
        select(users).where(or_(users.c.username == identifier, users.c.email == identifier)).limit(1)
    )


async def create_user(db: DatabaseAdapter, username: str, email: str, password_hash: str) -> dict:
    user_id = str(uuid.uuid4())
    await db.run(
        users.insert().values(
            id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            is_guest=False,
            created_at=utcnow(),
        )
    )
    return {"id": user_id, "username": username, "email": email}


async def touch_last_login(db: DatabaseAdapter, user_id: str) -> bool:
    """Best-effort: a failure is logged and never fails the login."""
    try:
        await db.run(update(users).where(users.c.id == user_id).values(last_login=utcnow()))
    except SQLAlchemyError as exc:
        logger.warning("Could not update last_login for user %s: %s", user_id, exc)
        return False
    return True


async def list_users(db: DatabaseAdapter) -> list[dict]:
    return await db.all(
        select(
            users.c.id,
            users.c.username,
            users.c.email,
            users.c.is_guest,
            users.c.created_at,
            users.c.last_login,
        ).order_by(users.c.created_at.desc())
    )
