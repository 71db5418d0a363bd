"""
Core pytest configuration for the entire test suite.

Provides the database setup and logging installation shared by all tests.
Domain fixtures (repositories, entity factories) live in
tests/test_fixtures/repository_fixtures.py and are imported at the bottom of
this module so every test can use them without importing.

Database selection (see `get_test_database_url`):
  1. `TEST_DATABASE_URL` environment variable (e.g. a PostgreSQL test database in CI)
  2. settings.DATABASE_URL when `TESTING=true` and `TEST_POSTGRES_DB` is set
  3. a private in-memory SQLite database per test (default)
"""

import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# Silence noisy third-party loggers before anything else configures logging.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


import pytest
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine

from eschool_repository.database.base import Base
from eschool_repository.database.session import create_engine, create_session_factory
from eschool_repository import models  # noqa: F401 - registers every table on Base.metadata
from eschool_repository.config import get_settings
from eschool_repository.core.logging.builder import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the package's logging configuration for the whole test session, so
    formatters, filters and handlers are exercised exactly as in production.
    pytest's caplog handler is attached per test and keeps working on top of it.
    """
    setup_logging(settings)
    yield


def safe_log_db_url(db_url: str) -> str:
    """Return the database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return SQLITE_MEMORY_URL


TEST_DATABASE_URL = get_test_database_url()
logger.info("tests.database", extra={"url": safe_log_db_url(TEST_DATABASE_URL)})


def _configure_sqlite(engine: AsyncEngine) -> None:
    """
    Make SQLite behave like PostgreSQL for what the repositories rely on:
      - foreign keys are enforced
      - the driver does not manage transactions itself, SQLAlchemy emits BEGIN,
        so SAVEPOINT / ROLLBACK TO work inside the session's transaction
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


async def _with_schema(engine: AsyncEngine) -> AsyncGenerator[AsyncEngine, None]:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh schema per test.

    The in-memory SQLite database lives as long as its single pooled connection
    (StaticPool), so every test starts from empty tables.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_engine(settings, url=TEST_DATABASE_URL, poolclass=StaticPool)
        _configure_sqlite(engine)
    else:
        engine = create_engine(settings, url=TEST_DATABASE_URL)

    async for ready in _with_schema(engine):
        yield ready


@pytest.fixture
async def pooled_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    An engine whose pool hands out separate connections, for tests that run
    repository calls concurrently.

    SQLite gets a database file under `tmp_path`: an in-memory database exists on
    one shared connection only.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_engine(settings, url=f"sqlite+aiosqlite:///{tmp_path / 'eschool.db'}")
        _configure_sqlite(engine)
    else:
        engine = create_engine(settings, url=TEST_DATABASE_URL)

    async for ready in _with_schema(engine):
        yield ready


@pytest.fixture
def pooled_session_factory(pooled_engine: AsyncEngine):
    """The pool handle repositories take when each call should get its own session."""
    return create_session_factory(pooled_engine)


@pytest.fixture
def session_factory(async_engine: AsyncEngine):
    return create_session_factory(async_engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    The caller-owned session handed to repositories.

    Nothing is committed: whatever a test wrote is rolled back on exit, and the
    schema is dropped with the engine anyway.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    fake,
    user_repository,
    school_repository,
    course_repository,
    review_repository,
    certificate_repository,
    create_user,
    created_user,
    create_school,
    created_school,
    create_course,
    created_course,
    make_user,
)
