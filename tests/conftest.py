"""
Test configuration and fixtures for the Page Insight API.

DATABASE_URL points at a throwaway SQLite file before anything under ``app``
is imported, so the module-level engine never touches a real database.
"""

import asyncio
import os
import tempfile
from typing import Generator

from dotenv import load_dotenv

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

load_dotenv()

test_db_url = os.getenv("TEST_DATABASE_URL")
if test_db_url:
    if "postgresql://" in test_db_url and "asyncpg" not in test_db_url:
        test_db_url = test_db_url.replace("postgresql://", "postgresql+asyncpg://")
    os.environ["DATABASE_URL"] = test_db_url
else:
    test_db_path = tempfile.mktemp(suffix=".db")
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"

from app.features.urls import models  # noqa: E402,F401  (registers tables on Base)
from app.platform.db.base import Base  # noqa: E402
from app.platform.db.session import enable_sqlite_foreign_keys, get_db, is_sqlite  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def session_factory():
    """
    Fresh schema per test on a NullPool engine, so sessions can be opened from
    pytest-asyncio's loop and from TestClient's portal thread alike.
    """
    database_url = os.environ["DATABASE_URL"]
    engine = create_async_engine(database_url, poolclass=NullPool)
    if is_sqlite(database_url):
        enable_sqlite_foreign_keys(engine)

    async def reset_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(reset_schema())

    yield async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)

    asyncio.run(engine.dispose())


@pytest.fixture(scope="function")
def client(test_app, session_factory) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    Every request gets a session from the per-test ``session_factory``.
    """

    async def override_get_db():
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.pop(get_db, None)
