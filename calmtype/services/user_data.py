"""Per-user JSON blobs, upserted per (user, data type)."""
from sqlalchemy import select

from calmtype.db.adapters import DatabaseAdapter
from calmtype.models.user_data import UserData
from calmtype.services.common import dump_blob, load_blob, utcnow

user_data = UserData.__table__


async def get_user_data(db: DatabaseAdapter, user_id: str, data_type: str):
    row = await db.get(
        select(user_data.c.data_content)
        .where(user_data.c.user_id == user_id, user_data.c.data_type == data_type)
        .order_by(user_data.c.updated_at.desc())
        .limit(1)
    )
    return load_blob(row["data_content"]) if row else None


async def save_user_data(db: DatabaseAdapter, user_id: str, data_type: str, value) -> None:
    now = utcnow()
    await db.run(
        db.upsert(
            user_data,
            {
                "user_id": user_id,
                "data_type": data_type,
                "data_content": dump_blob(value),
                "created_at": now,
                "updated_at": now,
            },
            conflict_columns=("user_id", "data_type"),
            update_columns=("data_content", "updated_at"),
        )
    )
