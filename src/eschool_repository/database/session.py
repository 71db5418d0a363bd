"""
Engine and session factories.

Nothing is created at import time: callers build the engine from settings and
own its lifetime (`await engine.dispose()` on shutdown).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from eschool_repository.config.settings import Settings

logger = logging.getLogger(__name__)


def create_engine(settings: Settings, url: str | None = None, **engine_kwargs) -> AsyncEngine:
    """
    Create the AsyncEngine.

    Args:
        settings: Application settings (echo / pool options).
        url: Overrides `settings.DATABASE_URL`, e.g. an in-memory SQLite URL in tests.
        **engine_kwargs: Passed through to `create_async_engine` (e.g. `poolclass`).
    """
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,
        pool_pre_ping=settings.DB_POOL_PRE_PING,   # connection health checks
        **engine_kwargs,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """`async_sessionmaker` bound to `engine`; objects are not expired on commit."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope(factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """
    Default unit of work for callers that have none of their own.

    Usage:
        async with session_scope(factory) as session:
            user = await UserRepository(session).create(user)

    Commits when the block finishes, rolls back when it raises (including on
    cancellation) and always closes the session.
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            logger.debug("session.rollback")
            await session.rollback()
            raise
