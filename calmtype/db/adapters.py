"""
Persistence adapters: one query interface over SQLite and PostgreSQL.

Call sites talk to a `DatabaseAdapter` and never branch on the backend. The
dialect-specific pieces (upsert construct, server clock query, last inserted
id, schema patches) live in the two concrete adapters below, and
`create_adapter` picks one of them once at startup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import MetaData, Table, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.schema import CreateIndex, CreateTable
from sqlalchemy.sql import Executable

from calmtype.core.config import Settings
from calmtype.models.user_data import USER_DATA_UNIQUE

logger = logging.getLogger(__name__)

Params = Optional[Mapping[str, Any]]


@dataclass(frozen=True)
class RunResult:
    """Outcome of a write: last inserted id (if any) and affected rows."""

    last_id: Any
    changes: int


class DatabaseAdapter:
    """
    Uniform get/all/run/exec over an async SQLAlchemy engine.

    `query` is SQL text with named `:param` placeholders or an SQLAlchemy
    statement. Every call runs on its own connection and commits on success;
    there is no transaction spanning several calls. Errors surface as
    `SQLAlchemyError`.
    """

    backend = "generic"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _execute(self, conn: AsyncConnection, query: str | Executable, params: Params):
        statement = text(query) if isinstance(query, str) else query
        if params:
            return await conn.execute(statement, dict(params))
        return await conn.execute(statement)

    async def get(self, query: str | Executable, params: Params = None) -> Optional[dict]:
        async with self.engine.begin() as conn:
            result = await self._execute(conn, query, params)
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def all(self, query: str | Executable, params: Params = None) -> list[dict]:
        async with self.engine.begin() as conn:
            result = await self._execute(conn, query, params)
            rows = result.mappings().all()
        return [dict(row) for row in rows]

    async def run(self, query: str | Executable, params: Params = None) -> RunResult:
        async with self.engine.begin() as conn:
            result = await self._execute(conn, query, params)
            last_id = self._last_id(result)
            changes = result.rowcount if result.rowcount and result.rowcount > 0 else 0
        return RunResult(last_id=last_id, changes=changes)

    async def exec(self, sql: str) -> None:
        """Run a single raw statement (DDL, maintenance) with no parameters."""
        async with self.engine.begin() as conn:
            await conn.exec_driver_sql(sql)

    def _last_id(self, result) -> Any:
        if result.context.isinsert:
            try:
                pk = result.inserted_primary_key
            except InvalidRequestError:
                pk = None
            if pk:
                return pk[0]
        # text() inserts with RETURNING id
        if result.returns_rows:
            row = result.mappings().first()
            if row is not None:
                return row.get("id")
        return None

    # -- dialect hooks ----------------------------------------------------

    def insert(self, table: Table):
        """Dialect insert construct supporting ON CONFLICT."""
        raise NotImplementedError

    def server_time_sql(self) -> str:
        raise NotImplementedError

    def schema_patches(self) -> list[tuple[str, str]]:
        """Extra (name, sql) steps run after the tables are created."""
        return []

    def _already_applied(self, exc: SQLAlchemyError) -> bool:
        return False

    # -- shared operations --------------------------------------------------

    def upsert(
        self,
        table: Table,
        values: Mapping[str, Any],
        conflict_columns: Iterable[str],
        update_columns: Iterable[str],
    ):
        """INSERT ... ON CONFLICT (conflict_columns) DO UPDATE update_columns."""
        stmt = self.insert(table).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=list(conflict_columns),
            set_={col: stmt.excluded[col] for col in update_columns},
        )

    async def server_time(self) -> str:
        row = await self.get(self.server_time_sql())
        value = row["now"] if row else None
        return value.isoformat() if hasattr(value, "isoformat") else str(value)

    async def ping(self) -> bool:
        row = await self.get("SELECT 1 AS ok")
        return bool(row and row["ok"] == 1)

    async def init_schema(self, metadata: MetaData) -> list[str]:
        """
        Create every table and index if absent, then apply dialect patches.

        Each step is issued on its own; a failure is logged and neither rolls
        back earlier steps nor stops later ones. Returns the failed step names.
        """
        steps: list[tuple[str, Any]] = []
        for table in metadata.sorted_tables:
            steps.append((f"create table {table.name}", CreateTable(table, if_not_exists=True)))
            for index in sorted(table.indexes, key=lambda ix: ix.name or ""):
                steps.append((f"create index {index.name}", CreateIndex(index, if_not_exists=True)))
        steps.extend(self.schema_patches())

        failed: list[str] = []
        for name, ddl in steps:
            try:
                if isinstance(ddl, str):
                    await self.exec(ddl)
                else:
                    async with self.engine.begin() as conn:
                        await conn.execute(ddl)
            except SQLAlchemyError as exc:
                if self._already_applied(exc):
                    logger.info("Schema step %r already applied", name)
                    continue
                logger.error("Schema step %r failed: %s", name, exc)
                failed.append(name)
        if failed:
            logger.warning("%s schema initialised with %d failed step(s)", self.backend, len(failed))
        else:
            logger.info("%s schema initialised", self.backend)
        return failed

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("%s connection pool closed", self.backend)


class SQLiteAdapter(DatabaseAdapter):
    """Embedded single-file backend (aiosqlite)."""

    backend = "sqlite"

    def insert(self, table: Table):
        return sqlite.insert(table)

    def server_time_sql(self) -> str:
        return "SELECT CURRENT_TIMESTAMP AS now"

    def _last_id(self, result) -> Any:
        last_id = super()._last_id(result)
        if last_id is None and result.context.statement.lstrip().upper().startswith("INSERT"):
            return result.lastrowid
        return last_id


class PostgresAdapter(DatabaseAdapter):
    """Client/server backend (asyncpg pool)."""

    backend = "postgresql"

    # duplicate_object, duplicate_table
    ALREADY_EXISTS_CODES = ("42710", "42P07")

    def insert(self, table: Table):
        return postgresql.insert(table)

    def server_time_sql(self) -> str:
        return "SELECT NOW() AS now"

    def schema_patches(self) -> list[tuple[str, str]]:
        return [
            (
                "add guest_sessions.data",
                "ALTER TABLE guest_sessions ADD COLUMN IF NOT EXISTS data TEXT",
            ),
            (
                "add user_data unique constraint",
                f"ALTER TABLE user_data ADD CONSTRAINT {USER_DATA_UNIQUE} UNIQUE (user_id, data_type)",
            ),
        ]

    def _already_applied(self, exc: SQLAlchemyError) -> bool:
        orig = getattr(exc, "orig", None)
        code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        return code in self.ALREADY_EXISTS_CODES


def create_adapter(settings: Settings) -> DatabaseAdapter:
    """Build the adapter for the configured backend."""
    url = settings.async_database_url()
    if settings.use_postgres:
        connect_args = {"ssl": "require"} if settings.database_ssl else {}
        engine = create_async_engine(
            url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            pool_recycle=1800,
            connect_args=connect_args,
        )
        logger.info("Using PostgreSQL database")
        return PostgresAdapter(engine)

    engine = create_async_engine(url, echo=settings.database_echo)
    logger.info("Using SQLite database at %s", settings.sqlite_path)
    return SQLiteAdapter(engine)
