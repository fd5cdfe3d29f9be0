"""Guest sessions and the per-guest JSON data blob."""
import logging
import uuid
from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from calmtype.db.adapters import DatabaseAdapter
from calmtype.models.guest_session import GuestSession
from calmtype.services.common import dump_blob, ensure_utc, load_blob, utcnow

logger = logging.getLogger(__name__)

guest_sessions = GuestSession.__table__


async def create_guest_session(db: DatabaseAdapter) -> str:
    guest_id = str(uuid.uuid4())
    now = utcnow()
    await db.run(guest_sessions.insert().values(id=guest_id, created_at=now, last_activity=now))
    logger.info("Guest session created: %s", guest_id)
    return guest_id


async def get_guest_session(db: DatabaseAdapter, guest_id: str) -> dict | None:
    return await db.get(select(guest_sessions).where(guest_sessions.c.id == guest_id))


def is_expired(session: dict, ttl_hours: int | None) -> bool:
    """True when a TTL is configured and the session has been idle past it."""
    if not ttl_hours:
        return False
    seen = ensure_utc(session.get("last_activity") or session.get("created_at"))
    if seen is None:
        return False
    return utcnow() - seen > timedelta(hours=ttl_hours)


async def touch_guest_session(db: DatabaseAdapter, guest_id: str) -> bool:
    """Best-effort last_activity bump; a failure is logged and never fails the request."""
    try:
        await db.run(update(guest_sessions).where(guest_sessions.c.id == guest_id).values(last_activity=utcnow()))
    except SQLAlchemyError as exc:
        logger.warning("Could not update last_activity for guest %s: %s", guest_id, exc)
        return False
    return True


async def get_guest_data(db: DatabaseAdapter, guest_id: str, data_type: str):
    row = await db.get(select(guest_sessions.c.data).where(guest_sessions.c.id == guest_id))
    if not row or not row["data"]:
        return None
    return (load_blob(row["data"]) or {}).get(data_type)


async def save_guest_data(db: DatabaseAdapter, guest_id: str, data_type: str, value) -> None:
    """Read-modify-write of the session blob; concurrent writers race, last one wins."""
    row = await db.get(select(guest_sessions.c.data).where(guest_sessions.c.id == guest_id))
    blob = (load_blob(row["data"]) if row and row["data"] else None) or {}
    blob[data_type] = value
    await db.run(
        update(guest_sessions)
        .where(guest_sessions.c.id == guest_id)
        .values(data=dump_blob(blob), last_activity=utcnow())
    )


async def list_guest_sessions(db: DatabaseAdapter) -> list[dict]:
    return await db.all(
        select(
            guest_sessions.c.id,
            guest_sessions.c.created_at,
            guest_sessions.c.last_activity,
        ).order_by(guest_sessions.c.created_at.desc())
    )
