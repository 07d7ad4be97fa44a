# boardshelf/database.py

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from boardshelf.config import Settings

Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine with the pool tuned from settings.

    SQLite gets foreign keys switched on (RESTRICT/CASCADE rules depend on it)
    and explicit BEGIN handling so SAVEPOINTs behave.
    """
    if settings.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in settings.DATABASE_URL or settings.DATABASE_URL.endswith("://"):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, **kwargs)
        _enable_sqlite_pragmas(engine)
        return engine

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def _enable_sqlite_pragmas(engine: AsyncEngine) -> None:

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        # let SQLAlchemy emit BEGIN itself (see on_begin)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """One session per request, taken from the factory built in `create_app`."""
    async with request.app.state.session_factory() as session:
        yield session
