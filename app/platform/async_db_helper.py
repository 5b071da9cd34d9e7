"""
Async Database Helper for Celery Tasks

Celery runs every analysis through ``asyncio.run``, so each task gets a fresh
event loop. Pooled async connections are bound to the loop that opened them,
which is why worker sessions come from a NullPool engine that lives exactly as
long as the task.
"""

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.platform.config import settings
from app.platform.db.session import enable_sqlite_foreign_keys, is_sqlite


@asynccontextmanager
async def worker_session_factory(database_url: str = None):
    """
    Yield a session factory bound to a task-scoped engine.

    Usage in Celery task:
        async def _job():
            async with worker_session_factory() as sessions:
                async with sessions() as db:
                    ...

        asyncio.run(_job())
    """
    url = database_url or settings.DATABASE_URL
    engine = create_async_engine(url, poolclass=NullPool, pool_pre_ping=True)
    if is_sqlite(url):
        enable_sqlite_foreign_keys(engine)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()
