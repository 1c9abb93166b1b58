"""
Pytest configuration and shared fixtures.

Each database test gets its own in-memory SQLite engine with the schema
created, so tests never see each other's rows. Nothing is committed unless
a test commits it.
"""

import os

# Select the [test] settings section before chirper.config is imported
os.environ.setdefault("CHIRPER_ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from chirper.database.config import (
    create_engine,
    create_session_factory,
    create_tables,
    dispose_engine,
)
from chirper.database.repositories import (
    LikeRepository,
    PostRepository,
    RepositoryFactory,
    RetweetRepository,
    UserRepository,
)


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a fresh in-memory database for one test.

    Yields:
        Async engine with all tables created
    """
    engine = create_engine(TEST_DATABASE_URL, echo=False)
    await create_tables(engine)

    yield engine

    await dispose_engine(engine)


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session for one test.

    Args:
        db_engine: Test database engine fixture

    Yields:
        Database session for the test
    """
    session_factory = create_session_factory(db_engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def repositories(db_session: AsyncSession) -> RepositoryFactory:
    return RepositoryFactory(db_session)


@pytest.fixture
def post_repository(db_session: AsyncSession) -> PostRepository:
    return PostRepository(db_session)


@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def retweet_repository(db_session: AsyncSession) -> RetweetRepository:
    return RetweetRepository(db_session)


@pytest.fixture
def like_repository(db_session: AsyncSession) -> LikeRepository:
    return LikeRepository(db_session)


@pytest.fixture
def mock_session() -> AsyncMock:
    """
    Mock AsyncSession for unit tests that should not touch a database.

    ``add`` is synchronous on a real session, so it is a plain Mock here.
    """
    session = AsyncMock(spec=AsyncSession)
    session.add = Mock()
    return session


def pytest_collection_modifyitems(config, items):
    """
    Add markers based on test location and fixtures.

    Args:
        config: Pytest configuration object
        items: List of collected test items
    """
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        if "db_session" in item.fixturenames:
            item.add_marker(pytest.mark.database)
