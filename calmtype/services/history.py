"""Typing history: committed sentences per owner."""
from datetime import datetime

from sqlalchemy import select

from calmtype.db.adapters import DatabaseAdapter
from calmtype.models.typing_history import TypingHistory
from calmtype.services.common import Owner, ensure_utc, utcnow, word_count

HISTORY_LIMIT = 100

typing_history = TypingHistory.__table__


async def add_entry(
    db: DatabaseAdapter,
    owner: Owner,
    text: str,
    timestamp: datetime | None = None,
    words: int | None = None,
    wpm: int | None = None,
    accuracy: float | None = None,
):
    """Insert one entry; returns the new row id."""
    result = await db.run(
        typing_history.insert().values(
            **owner.values(),
            text=text,
            word_count=words if words is not None else word_count(text),
            wpm=wpm,
            accuracy=accuracy,
            created_at=ensure_utc(timestamp) or utcnow(),
        )
    )
    return result.last_id


async def list_entries(db: DatabaseAdapter, owner: Owner, limit: int = HISTORY_LIMIT) -> list[dict]:
    rows = await db.all(
        select(typing_history)
        .where(typing_history.c[owner.column] == owner.id)
        .order_by(typing_history.c.created_at.desc(), typing_history.c.id.desc())
        .limit(limit)
    )
    return [
        {
            "id": row["id"],
            "text": row["text"],
            "timestamp": ensure_utc(row["created_at"]),
            "wordCount": word_count(row["text"]),
            "wpm": row["wpm"],
            "accuracy": row["accuracy"],
        }
        for row in rows
    ]
