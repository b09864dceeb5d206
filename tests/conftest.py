"""
Pytest configuration and fixtures for testing.

Provides:
- In-memory SQLite database (aiosqlite) created fresh for every test
- The example users table seeded with ten rows
- An httpx client bound to the app through ASGITransport

Usage:
    pytest tests/ -v
"""

import os

# Must be set before bitcrud.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator, Callable, Mapping

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from bitcrud.app import create_app
from bitcrud.core.database import get_session
from bitcrud.crud import Crud
from bitcrud.example.controllers import UserController, UserMixController
from bitcrud.example.models import User

from tests.factories import UserFactory


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create a private in-memory SQLite engine with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,  # One shared connection keeps the memory DB alive
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def seeded(session_maker) -> list[User]:
    """Insert the standard users (ids 1..10)."""
    users = UserFactory.seed()
    async with session_maker() as session:
        session.add_all(users)
        await session.commit()
    return users


@pytest_asyncio.fixture
async def db_session(session_maker, seeded) -> AsyncGenerator[AsyncSession, None]:
    """A separate session for asserting on persisted state."""
    async with session_maker() as session:
        yield session


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def make_client(session_maker) -> Callable[[Mapping[str, Crud]], httpx.AsyncClient]:
    """Build a client for an app serving the given resources."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                if session.in_transaction():
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    def factory(resources: Mapping[str, Crud]) -> httpx.AsyncClient:
        app = create_app(resources)
        app.dependency_overrides[get_session] = override_get_session
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
        )

    return factory


@pytest_asyncio.fixture
async def client(make_client, seeded) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client for the example app: /user (defaults) and /user-mix (mixed)."""
    async with make_client(
        {
            "user": UserController(),
            "user-mix": UserMixController(),
        }
    ) as ac:
        yield ac
