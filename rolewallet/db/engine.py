"""
Async engine and session factory construction.

Nothing here is global: callers build an engine from ``Settings`` once at
startup and hand the session factory to whatever creates per-request
services.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from rolewallet.config import Settings
from rolewallet.logging_config import get_logger
from rolewallet.models import Base

logger = get_logger("db")

# Seconds a SQLite connection waits on the database write lock
_SQLITE_BUSY_TIMEOUT = 30


def _install_sqlite_write_locking(engine: AsyncEngine) -> None:
    """
    Makes every SQLite transaction start with ``BEGIN IMMEDIATE``.

    pysqlite's implicit deferred BEGIN lets two transactions both read and
    then fail to upgrade to a write lock. Taking the write lock up front
    serialises writers instead, so balance updates queue rather than error.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(settings: Settings) -> AsyncEngine:
    connect_args = {}
    is_sqlite = settings.database_url.startswith("sqlite")
    if is_sqlite:
        connect_args["timeout"] = _SQLITE_BUSY_TIMEOUT

    engine = create_async_engine(settings.database_url, echo=settings.sql_echo, connect_args=connect_args)
    if is_sqlite:
        _install_sqlite_write_locking(engine)

    logger.info("engine_created", extra={"dialect": engine.dialect.name})
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services return pydantic models after commit; keep loaded attributes readable
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Creates all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("schema_ready", extra={"tables": sorted(Base.metadata.tables)})
