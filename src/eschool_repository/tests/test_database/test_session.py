import pytest
from sqlalchemy import text

from eschool_repository.config.settings import Settings
from eschool_repository.database.session import session_scope
from eschool_repository.exceptions import DuplicateError
from eschool_repository.repositories import UserRepository


def test_database_url_uses_test_database_when_testing():
    settings = Settings(
        POSTGRES_USERNAME="app", POSTGRES_PASSWORD="pw", POSTGRES_HOST="db", POSTGRES_PORT=5433,
        POSTGRES_DB="eschool", TEST_POSTGRES_DB="eschool_test", TESTING=True,
    )
    assert settings.DATABASE_URL == "postgresql+psycopg://app:pw@db:5433/eschool_test"


def test_database_url_defaults_to_main_database():
    settings = Settings(POSTGRES_DB="eschool", TEST_POSTGRES_DB="eschool_test", TESTING=False, POSTGRES_DRIVER="asyncpg")
    assert settings.DATABASE_URL.startswith("postgresql+asyncpg://")
    assert settings.DATABASE_URL.endswith("/eschool")


async def count_users(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(text('SELECT COUNT(*) FROM "user"'))).scalar_one()


@pytest.mark.asyncio
class TestSessionScope:
    """
    session_scope() is the unit of work: commit on success, rollback on error.

    Fixtures used:
      - session_factory: async_sessionmaker bound to the per-test engine.
      - make_user: unsaved User factory.
    """

    async def test_commits_on_success(self, session_factory, make_user):
        async with session_scope(session_factory) as session:
            created = await UserRepository(session).create(make_user())

        async with session_factory() as session:
            assert await UserRepository(session).find_by_id(created.id) == created

    async def test_rolls_back_on_error(self, session_factory, make_user):
        with pytest.raises(DuplicateError):
            async with session_scope(session_factory) as session:
                repo = UserRepository(session)
                await repo.create(make_user(email="twice@example.com"))
                await repo.create(make_user(email="twice@example.com"))

        assert await count_users(session_factory) == 0
