"""
Driver-level failure -> ErrorKind.

Postgres failures are recognized by SQLSTATE (and constraint name); backends
without SQLSTATE, such as SQLite, by message text. The duplicate and enum rules
apply to INSERT only: a read or a write of another kind never reports them.
"""

import logging
from enum import Enum

from sqlalchemy.exc import NoResultFound, StatementError

from .base import ErrorKind, Operation

logger = logging.getLogger(__name__)

# =================================================================================================================
# Postgres error code mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"
    # Raised for a value outside a native ENUM type ("invalid input value for enum ...")
    INVALID_TEXT_REPRESENTATION = "22P02"


# Enum types (and the CHECK constraints generated for them on backends without
# native enums) are named "<something>_enum".
ENUM_NAME_SUFFIX = "_enum"


# =================================================================================================================
# Helpers
# =================================================================================================================

def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _driver_error(exc: BaseException):
    """Return the DBAPI exception wrapped by SQLAlchemy, or `exc` itself."""
    if isinstance(exc, StatementError) and exc.orig is not None:
        return exc.orig
    return exc


def postgres_code(exc: BaseException) -> str | None:
    """
    SQLSTATE of a Postgres failure, whatever the driver.

    psycopg exposes it as `sqlstate`; psycopg2 and SQLAlchemy's asyncpg adapter as `pgcode`.
    """
    orig = _driver_error(exc)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def constraint_name(exc: BaseException) -> str | None:
    """Best-effort name of the violated constraint (Postgres drivers only)."""
    orig = _driver_error(exc)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None) if diag else None
    if name:
        return name
    # asyncpg keeps it on the underlying driver exception
    return getattr(getattr(orig, "__cause__", None), "constraint_name", None)


# =================================================================================================================
# Classifiers
# =================================================================================================================

def _classify_from_postgres_code(exc: BaseException, pgcode: str) -> ErrorKind:
    message = str(_driver_error(exc)).lower()
    name = constraint_name(exc) or ""

    if pgcode == PostgresErrorCodes.UNIQUE_VIOLATION:
        return ErrorKind.DUPLICATE

    if pgcode == PostgresErrorCodes.INVALID_TEXT_REPRESENTATION and "enum" in message:
        return ErrorKind.ENUM_VALUE

    if pgcode == PostgresErrorCodes.CHECK_VIOLATION and (
        name.endswith(ENUM_NAME_SUFFIX) or ENUM_NAME_SUFFIX in message
    ):
        return ErrorKind.ENUM_VALUE

    logger.debug("Postgres error diagnostic", extra={"pgcode": pgcode, "constraint_name": name or None})
    return ErrorKind.PERSISTENCE_FAILED


def _classify_from_generic_message(message: str) -> ErrorKind:
    """
    Classify from message content (SQLite and other backends without SQLSTATE).
    """
    normalized = message.lower()

    if _match_any(normalized, ["unique constraint", "unique failed", "unique violation", "duplicate"]):
        return ErrorKind.DUPLICATE

    if _match_any(normalized, ["check constraint", "check failed"]) and ENUM_NAME_SUFFIX in normalized:
        return ErrorKind.ENUM_VALUE

    if "invalid input value for enum" in normalized:
        return ErrorKind.ENUM_VALUE

    return ErrorKind.PERSISTENCE_FAILED


def classify_error(operation: Operation, exc: BaseException) -> ErrorKind:
    """
    Map a failure raised while running `operation` to an `ErrorKind`.

    Pure and total: never raises, anything unrecognized is PERSISTENCE_FAILED.

    Precedence:
      1. a read that found no row                      -> NOT_FOUND
      2. an UPDATE / DELETE statement that failed      -> UPDATE_FAILED / DELETE_FAILED
      3. any other failure of a read                   -> PERSISTENCE_FAILED
      4. INSERT: unique violation                      -> DUPLICATE
      5. INSERT: value outside an enumerated type      -> ENUM_VALUE
      6. everything else                               -> PERSISTENCE_FAILED
    """
    if isinstance(exc, NoResultFound):
        return ErrorKind.NOT_FOUND

    if operation is Operation.UPDATE:
        return ErrorKind.UPDATE_FAILED

    if operation is Operation.DELETE:
        return ErrorKind.DELETE_FAILED

    if operation is not Operation.INSERT:
        return ErrorKind.PERSISTENCE_FAILED

    orig = _driver_error(exc)

    # SQLAlchemy's Enum type rejects values it cannot map before they reach the driver.
    if isinstance(orig, LookupError) and not isinstance(orig, (KeyError, IndexError)):
        return ErrorKind.ENUM_VALUE

    pgcode = postgres_code(exc)
    if pgcode:
        return _classify_from_postgres_code(exc, str(pgcode))

    return _classify_from_generic_message(str(orig))
