"""
Pytest configuration file.
API tests run against an in-memory SQLite database; Redis and Kafka are
replaced with in-process mocks.
"""
import os

# Настройки должны быть заданы до импорта приложения
os.environ["TESTING"] = "1"
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sprintboard.db.base import Base
from sprintboard.db.session import get_db
from sprintboard.main import app
import sprintboard.models  # noqa: F401
from tests.mocks.services import (
    patch_redis, patch_kafka, mock_db_session,
    MockRedisCache, MockKafkaProducer,
)


# Database fixtures
@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test, all sessions share one connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting test data."""
    async with session_factory() as session:
        yield session


# Mock service fixtures
@pytest.fixture
def mock_redis() -> Generator[MockRedisCache, None, None]:
    """Provide a mock Redis cache and patch the cache client functions."""
    mock_redis_instance, patches = patch_redis()

    for patch_item in patches:
        patch_item.start()

    yield mock_redis_instance

    for patch_item in patches:
        patch_item.stop()


@pytest_asyncio.fixture
async def mock_kafka() -> AsyncGenerator[MockKafkaProducer, None]:
    """Provide a started mock Kafka producer and patch event publishing."""
    mock_kafka_instance, patches = patch_kafka()
    await mock_kafka_instance.start()

    for patch_item in patches:
        patch_item.start()

    yield mock_kafka_instance

    for patch_item in patches:
        patch_item.stop()
    await mock_kafka_instance.stop()


@pytest.fixture
def mock_session() -> AsyncSession:
    """Provide a mock database session for unit tests."""
    return mock_db_session()


# HTTP client fixture
@pytest_asyncio.fixture
async def async_client(session_factory, mock_redis, mock_kafka) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async client for testing API endpoints."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)
