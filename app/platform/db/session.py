from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from app.platform.config import settings


def is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless every connection turns it on."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _engine_options(database_url: str) -> dict:
    if is_sqlite(database_url):
        return {"echo": False, "future": True}
    return {
        "echo": False,
        "future": True,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "pool_size": 20,
        "max_overflow": 30,  # (burst capacity)
        "pool_timeout": 30,
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
if is_sqlite(settings.DATABASE_URL):
    enable_sqlite_foreign_keys(engine)

SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)


async def get_db():
    async with SessionLocal() as session:
        yield session
