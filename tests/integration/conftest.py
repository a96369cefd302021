"""Integration test fixtures for database and HTTP client operations.

Each test runs against a fresh SQLite file database built from the model
metadata, the same schema the initial migration creates.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import src.boardsync.models  # noqa: F401 - registers tables on the metadata
from src.boardsync.core import db
from src.boardsync.core.config import get_settings
from src.boardsync.main import create_app
from src.boardsync.models import User
from src.boardsync.realtime import RoomManager
from tests.helpers import create_user


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine with an empty schema."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()
    await db.dispose_engine()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging and inspecting data.

    The session does NOT auto-commit; helpers in tests.helpers commit for you.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def app(engine: AsyncEngine) -> FastAPI:
    return create_app()


@pytest.fixture
def rooms(app: FastAPI) -> RoomManager:
    return app.state.rooms


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to a fresh application instance."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def owner(db_session: AsyncSession) -> User:
    return await create_user(db_session, name="Olivia Owner", email="owner@example.com")


@pytest.fixture
async def member(db_session: AsyncSession) -> User:
    return await create_user(db_session, name="Mark Member", email="member@example.com")


@pytest.fixture
async def outsider(db_session: AsyncSession) -> User:
    return await create_user(db_session, name="Oscar Outsider", email="outsider@example.com")
