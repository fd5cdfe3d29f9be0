"""Settings blob per owner (user or guest), upserted in place."""
from sqlalchemy import select

from calmtype.db.adapters import DatabaseAdapter
from calmtype.models.user_settings import UserSettings
from calmtype.services.common import Owner, dump_blob, load_blob, utcnow

user_settings = UserSettings.__table__


async def get_settings_blob(db: DatabaseAdapter, owner: Owner):
    row = await db.get(select(user_settings.c.settings).where(user_settings.c[owner.column] == owner.id))
    return load_blob(row["settings"]) if row else None


async def save_settings_blob(db: DatabaseAdapter, owner: Owner, value) -> None:
    now = utcnow()
    await db.run(
        db.upsert(
            user_settings,
            {**owner.values(), "settings": dump_blob(value), "created_at": now, "updated_at": now},
            conflict_columns=(owner.column,),
            update_columns=("settings", "updated_at"),
        )
    )
