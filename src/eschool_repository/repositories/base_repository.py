"""
Base repository class providing the uniform persistence contract.

Every entity repository gets the same five operations from this class:

    find_all()        -> list[Entity]
    find_by_id(id)    -> Entity              (NotFoundError when absent)
    create(entity)    -> Entity              (write, then read back by the assigned id)
    update(entity)    -> Entity              (write keyed by id, then read back)
    delete(id)        -> None                (no-op when absent)

Entity-specific finders in subclasses go through the protected helpers
(`_fetch_one`, `_fetch_all`, `_exists`, `_execute`) so that every path is run,
classified and logged the same way.

Sessions:
    A repository is built over either
      - an `async_sessionmaker` (the handle to the shared connection pool): every
        statement gets its own session and transaction, committed when the
        statement succeeds. Calls on one repository may run concurrently.
      - a caller's `AsyncSession` (the caller's unit of work): each statement runs
        inside a SAVEPOINT (`session.begin_nested()`), so a failing statement is
        undone on its own and the session stays usable. Nothing is committed;
        that is the caller's decision (see `database.session.session_scope`).
        An AsyncSession runs one statement at a time, so overlapping calls on
        the same session wait for each other.

Create/update are two statements (write + read-back) and are not atomic with
respect to other sessions: a concurrent delete in between surfaces as NotFoundError.
"""

import time
import asyncio
import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Executable

from eschool_repository.database.base import Base
from eschool_repository.domain.entities import ID
from eschool_repository.exceptions.base import Operation
from eschool_repository.exceptions.mapper import translate_errors

from .statements import build_delete, build_insert, build_select, build_update, primary_key_name

# Type variables for the record (row schema) class and the domain entity it maps to
RecordT = TypeVar("RecordT", bound=Base)
EntityT = TypeVar("EntityT")

# What a repository can be built over: the pool handle, or a caller's session
SessionSource = async_sessionmaker[AsyncSession] | AsyncSession

# Key in `AsyncSession.info` of the lock serializing statements on that session
SESSION_LOCK_KEY = "eschool_repository.lock"

logger = logging.getLogger(__name__)


def _session_lock(session: AsyncSession) -> asyncio.Lock:
    # Stored on the session, not the repository: every repository sharing the
    # session must wait on the same lock.
    return session.info.setdefault(SESSION_LOCK_KEY, asyncio.Lock())


class BaseRepository(Generic[RecordT, EntityT]):
    """
    Generic repository over one record class.

    Type Parameters:
        RecordT: the declarative record class describing the entity's row.
        EntityT: the domain entity the record converts to and from.
    """

    def __init__(self, record: type[RecordT], db: SessionSource):
        """
        Initialize the repository.

        Args:
            record: The record class itself (not an instance), e.g. UserRecord.
                Its table drives every generated statement.
            db: An `async_sessionmaker` to open a session per statement, or the
                caller's `AsyncSession` to run inside its unit of work.
        """
        self.record = record
        self.db = db
        self.entity_name = record.__name__.removesuffix("Record")

        table = record.__table__
        self._key = primary_key_name(table)
        self._select_all = build_select(table)
        self._select_by_id = build_select(table, self._key)
        self._delete_by_id = build_delete(table)

    # =================================================================================================================
    # Protected helpers
    # =================================================================================================================

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield the session one statement runs in (see "Sessions" above).

        Leaving the block commits (own session) or releases the SAVEPOINT (caller's
        session); an error rolls back just as far.
        """
        if isinstance(self.db, async_sessionmaker):
            async with self.db.begin() as session:
                yield session
            return

        async with _session_lock(self.db):
            async with self.db.begin_nested():
                yield self.db

    async def _fetch_all(self, statement: Executable, params: Mapping[str, Any] | None = None,
                         record: type[Base] | None = None) -> list:
        """
        Run a read statement and return every row as a record.

        Args:
            statement: A typed read statement (see `statements.build_select`).
            params: Bound parameter values.
            record: Record class to build rows into (defaults to this repository's).
        """
        record = record or self.record
        async with translate_errors(Operation.READ, self.entity_name):
            async with self._session() as session:
                result = await session.execute(statement, dict(params or {}))
                return [record.from_mapping(row) for row in result.mappings().all()]

    async def _fetch_one(self, statement: Executable, params: Mapping[str, Any] | None = None,
                         record: type[Base] | None = None):
        """
        Run a read statement expected to match exactly one row.

        Raises:
            NotFoundError: If no row matched.
            PersistenceFailedError: If the read failed (including more than one match).
        """
        record = record or self.record
        async with translate_errors(Operation.READ, self.entity_name):
            async with self._session() as session:
                result = await session.execute(statement, dict(params or {}))
                return record.from_mapping(result.mappings().one())

    async def _exists(self, statement: Executable, params: Mapping[str, Any] | None = None) -> bool:
        """Return True when the read statement matches at least one row."""
        async with translate_errors(Operation.READ, self.entity_name):
            async with self._session() as session:
                result = await session.execute(statement, dict(params or {}))
                return result.first() is not None

    async def _execute(self, operation: Operation, statement: Executable,
                       params: Mapping[str, Any] | None = None, entity: str | None = None) -> int:
        """
        Run a write statement and return the number of affected rows.

        Failures are classified according to `operation` (see `classify_error`) and
        reported against `entity` (defaults to this repository's entity).
        """
        async with translate_errors(operation, entity or self.entity_name):
            async with self._session() as session:
                result = await session.execute(statement, dict(params or {}))
                return result.rowcount

    def _to_entities(self, records: Sequence[RecordT]) -> list[EntityT]:
        return [record.to_domain() for record in records]

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def find_all(self) -> list[EntityT]:
        """
        Return every entity, in storage order. An empty table yields an empty list.

        Raises:
            PersistenceFailedError: If the read failed.
        """
        records = await self._fetch_all(self._select_all)
        logger.debug("repo.find_all.success", extra={"entity": self.entity_name, "count": len(records)})
        return self._to_entities(records)

    async def find_by_id(self, entity_id: ID) -> EntityT:
        """
        Get an entity by its ID.

        Raises:
            NotFoundError: If no entity has this ID.
            PersistenceFailedError: If the read failed.
        """
        record = await self._fetch_one(self._select_by_id, {self._key: entity_id})
        return record.to_domain()

    # =================================================================================================================
    # Write Operations
    # =================================================================================================================

    async def create(self, entity: EntityT) -> EntityT:
        """
        Persist a new entity and return it as stored.

        An entity without an ID is assigned a fresh one. The stored row is read back so
        that values computed by the store (e.g. timestamps) are present in the result.

        Raises:
            DuplicateError: If a unique constraint is violated.
            EnumValueError: If an enumerated column gets a value outside its set.
            PersistenceFailedError: For any other storage failure.
            NotFoundError: If the row vanished before it could be read back.
        """
        logger.debug("repo.create.start", extra={"entity": self.entity_name, "operation": "create"})
        start = time.perf_counter()

        record = self.record.from_domain(entity)
        statement = build_insert(record)
        await self._execute(Operation.INSERT, statement.clause(), statement.params)

        entity_id = getattr(record, self._key)
        created = await self.find_by_id(entity_id)

        logger.info(
            "repo.create.success",
            extra={
                "entity": self.entity_name,
                "operation": "create",
                "id": entity_id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return created

    async def update(self, entity: EntityT) -> EntityT:
        """
        Overwrite the stored entity with the same ID and return it as stored.

        Updating an ID that does not exist changes nothing; the read-back then
        raises NotFoundError.

        Raises:
            UpdateFailedError: If the UPDATE statement failed.
            NotFoundError: If no entity has this ID.
            PersistenceFailedError: If the read-back failed.
        """
        start = time.perf_counter()

        record = self.record.from_domain(entity)
        statement = build_update(record)
        affected = await self._execute(Operation.UPDATE, statement.clause(), statement.params)

        entity_id = getattr(record, self._key)
        updated = await self.find_by_id(entity_id)

        logger.info(
            "repo.update.success",
            extra={
                "entity": self.entity_name,
                "operation": "update",
                "id": entity_id,
                "rows": affected,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return updated

    async def delete(self, entity_id: ID) -> None:
        """
        Delete the entity with this ID. Deleting an ID that does not exist succeeds.

        Raises:
            DeleteFailedError: If the DELETE statement failed.
        """
        affected = await self._execute(Operation.DELETE, self._delete_by_id, {self._key: entity_id})

        if affected:
            logger.info("repo.delete.success", extra={"entity": self.entity_name, "operation": "delete", "id": entity_id})
        else:
            logger.debug("repo.delete.nothing_matched", extra={"entity": self.entity_name, "operation": "delete", "id": entity_id})
