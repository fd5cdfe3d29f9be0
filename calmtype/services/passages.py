"""Passages: titled blocks of text saved by a user or a guest."""
from sqlalchemy import delete, select, update

from calmtype.db.adapters import DatabaseAdapter
from calmtype.models.passage import Passage
from calmtype.services.common import Owner, ensure_utc, utcnow, word_count

DEFAULT_TITLE = "Untitled Passage"
TITLE_MAX_LENGTH = 255

passages = Passage.__table__


def _to_dict(row: dict) -> dict:
    return {
        "id": row["id"],
        "title": row["title"],
        "content": row["content"],
        "word_count": row["word_count"],
        "created_at": ensure_utc(row["created_at"]),
        "updated_at": ensure_utc(row["updated_at"]),
    }


def _owned(owner: Owner):
    return passages.c[owner.column] == owner.id


def clean_title(title: str | None) -> str:
    title = (title or "").strip()
    return title[:TITLE_MAX_LENGTH] if title else DEFAULT_TITLE


async def list_passages(db: DatabaseAdapter, owner: Owner) -> list[dict]:
    rows = await db.all(
        select(passages).where(_owned(owner)).order_by(passages.c.created_at.desc(), passages.c.id.desc())
    )
    return [_to_dict(row) for row in rows]


async def get_passage(db: DatabaseAdapter, owner: Owner, passage_id: int) -> dict | None:
    row = await db.get(select(passages).where(passages.c.id == passage_id, _owned(owner)))
    return _to_dict(row) if row else None


async def create_passage(db: DatabaseAdapter, owner: Owner, title: str | None, content: str) -> dict:
    now = utcnow()
    result = await db.run(
        passages.insert().values(
            **owner.values(),
            title=clean_title(title),
            content=content,
            word_count=word_count(content),
            created_at=now,
            updated_at=now,
        )
    )
    return await get_passage(db, owner, result.last_id)


async def update_passage(
    db: DatabaseAdapter,
    owner: Owner,
    passage_id: int,
    title: str | None = None,
    content: str | None = None,
) -> dict | None:
    values: dict = {"updated_at": utcnow()}
    if title is not None:
        values["title"] = clean_title(title)
    if content is not None:
        values["content"] = content
        values["word_count"] = word_count(content)
    result = await db.run(update(passages).where(passages.c.id == passage_id, _owned(owner)).values(**values))
    if not result.changes:
        return None
    return await get_passage(db, owner, passage_id)


async def delete_passage(db: DatabaseAdapter, owner: Owner, passage_id: int) -> bool:
    result = await db.run(delete(passages).where(passages.c.id == passage_id, _owned(owner)))
    return result.changes > 0
