"""Persistence adapter over SQLite, and the PostgreSQL dialect hooks"""
import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, ProgrammingError
from sqlalchemy.ext.asyncio import create_async_engine

from calmtype.core.config import Settings, to_async_postgres_url
from calmtype.db.adapters import PostgresAdapter, SQLiteAdapter, create_adapter
from calmtype.db.base import Base
from calmtype.models.user_data import UserData

user_data = UserData.__table__


class TestSQLiteAdapter:
    async def test_run_get_all(self, db):
        result = await db.run(
            "INSERT INTO guest_sessions (id, data) VALUES (:id, :data)", {"id": "g1", "data": "{}"}
        )
        assert result.changes == 1

        row = await db.get("SELECT id, data FROM guest_sessions WHERE id = :id", {"id": "g1"})
        assert row == {"id": "g1", "data": "{}"}
        assert await db.get("SELECT id FROM guest_sessions WHERE id = :id", {"id": "nope"}) is None

        await db.run("INSERT INTO guest_sessions (id) VALUES (:id)", {"id": "g2"})
        rows = await db.all("SELECT id FROM guest_sessions ORDER BY id")
        assert [r["id"] for r in rows] == ["g1", "g2"]

    async def test_last_id_for_core_and_text_inserts(self, db):
        first = await db.run(user_data.insert().values(user_id="u1", data_type="a", data_content="1"))
        second = await db.run(
            "INSERT INTO user_data (user_id, data_type, data_content) VALUES (:u, :t, :c)",
            {"u": "u1", "t": "b", "c": "2"},
        )
        assert first.last_id == 1
        assert second.last_id == 2

    async def test_update_reports_changes(self, db):
        await db.run("INSERT INTO guest_sessions (id) VALUES ('g1')")
        result = await db.run("UPDATE guest_sessions SET data = 'x' WHERE id = 'missing'")
        assert result.changes == 0
        assert result.last_id is None

    async def test_upsert_keeps_single_row(self, db):
        for content in ("first", "second"):
            await db.run(
                db.upsert(
                    user_data,
                    {"user_id": "u1", "data_type": "prefs", "data_content": content},
                    conflict_columns=("user_id", "data_type"),
                    update_columns=("data_content",),
                )
            )
        rows = await db.all(select(user_data.c.data_content).where(user_data.c.user_id == "u1"))
        assert rows == [{"data_content": "second"}]

    async def test_unique_violation_raises(self, db):
        await db.run(user_data.insert().values(user_id="u1", data_type="a", data_content="1"))
        with pytest.raises(IntegrityError):
            await db.run(user_data.insert().values(user_id="u1", data_type="a", data_content="2"))

    async def test_exec_raw_statement(self, db):
        await db.exec("CREATE TABLE scratch (id INTEGER PRIMARY KEY)")
        await db.run("INSERT INTO scratch (id) VALUES (7)")
        assert await db.get("SELECT id FROM scratch") == {"id": 7}

    async def test_init_schema_is_idempotent(self, db):
        assert await db.init_schema(Base.metadata) == []
        assert await db.init_schema(Base.metadata) == []

    async def test_ping_and_server_time(self, db):
        assert await db.ping() is True
        assert await db.server_time()

    def test_backend_selection(self, settings):
        assert isinstance(create_adapter(settings), SQLiteAdapter)
        # DATABASE_URL alone is not enough outside production
        dev = settings.model_copy(update={"database_url": "postgres://u:p@db/calm"})
        assert isinstance(create_adapter(dev), SQLiteAdapter)


class _PgError(Exception):
    def __init__(self, pgcode):
        super().__init__(pgcode)
        self.pgcode = pgcode


class TestPostgresAdapter:
    @pytest.fixture
    def pg(self):
        # engine is never connected in these tests
        return PostgresAdapter(create_async_engine("postgresql+asyncpg://u:p@localhost/calm"))

    def test_already_applied_codes(self, pg):
        assert pg._already_applied(ProgrammingError("ALTER", {}, _PgError("42710")))
        assert pg._already_applied(ProgrammingError("CREATE", {}, _PgError("42P07")))
        assert not pg._already_applied(ProgrammingError("ALTER", {}, _PgError("42601")))

    def test_patches(self, pg):
        names = [name for name, _ in pg.schema_patches()]
        assert names == ["add guest_sessions.data", "add user_data unique constraint"]

    def test_upsert_compiles_on_conflict(self, pg):
        stmt = pg.upsert(
            user_data,
            {"user_id": "u1", "data_type": "prefs", "data_content": "{}"},
            conflict_columns=("user_id", "data_type"),
            update_columns=("data_content",),
        )
        sql = str(stmt.compile(dialect=pg.engine.dialect))
        assert "ON CONFLICT (user_id, data_type) DO UPDATE" in sql

    def test_production_selects_postgres(self):
        settings = Settings(_env_file=None, node_env="production", database_url="postgres://u:p@db/calm")
        assert settings.use_postgres
        assert settings.async_database_url() == "postgresql+asyncpg://u:p@db/calm"
        assert isinstance(create_adapter(settings), PostgresAdapter)


def test_async_postgres_url_rewrite():
    assert to_async_postgres_url("postgresql://a/b") == "postgresql+asyncpg://a/b"
    assert to_async_postgres_url("postgresql+asyncpg://a/b") == "postgresql+asyncpg://a/b"
