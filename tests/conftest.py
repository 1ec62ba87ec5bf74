"""
Pytest configuration and fixtures.

This module provides:
- An in-memory SQLite database (aiosqlite) with the tables created per test
- Test session management
- FastAPI test client with dependency overrides
- Factory fixtures for creating test data
"""

import os

# Settings are read at import time, so configure them before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ["SNAPSHOT_ISOLATION_LEVEL"] = "none"
os.environ.setdefault("DEFAULT_PAGE_SIZE", "20")

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from pagequery.database import get_session
from pagequery.main import app
from pagequery.models import Article, User
from tests.factories import ArticleFactory, UserFactory


# =============================================================================
# Function-scoped fixtures (fresh for each test)
# =============================================================================


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create an engine on a fresh in-memory database with all tables.

    StaticPool keeps the single in-memory connection alive for the whole test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,  # Set to True for SQL query debugging
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a single test."""
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an async HTTP client for testing FastAPI endpoints.

    The database session dependency is overridden to use the test session.
    """

    async def override_get_session():
        yield test_session

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Factory fixtures for creating test data
# =============================================================================


@pytest.fixture
async def user_factory(test_session: AsyncSession):
    """
    Factory fixture for creating User instances in the test database.

    Usage:
        user = await user_factory(name="Alice", age=30)
    """

    async def _create_user(**kwargs) -> User:
        user = UserFactory.build(**kwargs)
        test_session.add(user)
        await test_session.commit()
        await test_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
async def article_factory(test_session: AsyncSession):
    """
    Factory fixture for creating Article instances in the test database.

    Usage:
        article = await article_factory(title="Hello", author_id=user.id)
    """

    async def _create_article(**kwargs) -> Article:
        article = ArticleFactory.build(**kwargs)
        test_session.add(article)
        await test_session.commit()
        await test_session.refresh(article)
        return article

    return _create_article


@pytest.fixture
async def people(user_factory) -> list[User]:
    """Five users with distinct names and ages, inserted in id order."""
    rows = [
        ("Alice", 34, True),
        ("Bob", 17, True),
        ("Carol", 25, False),
        ("Dave", 41, True),
        ("Eve", 18, True),
    ]
    return [
        await user_factory(name=name, age=age, is_active=is_active)
        for name, age, is_active in rows
    ]
