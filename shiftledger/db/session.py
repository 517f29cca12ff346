"""
Async SQLAlchemy engine & session factory.

PostgreSQL (asyncpg) in production.  SQLite (aiosqlite) works for local
runs once ``configure_sqlite`` hands transaction control to SQLAlchemy,
which the per-row and per-insert savepoints need.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)

from shiftledger.core.config import settings


def configure_sqlite(engine: AsyncEngine) -> None:
    """Make SAVEPOINT usable on pysqlite and keep readers off writers' backs."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine_args: dict = {"echo": False}

if settings.DATABASE_URL.startswith("postgresql"):
    engine_args.update(
        {
            "pool_pre_ping": True,
            "pool_size": 20,
            "max_overflow": 10,
            "pool_recycle": 300,
        }
    )

engine = create_async_engine(settings.DATABASE_URL, **engine_args)

if engine.dialect.name == "sqlite":
    configure_sqlite(engine)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
