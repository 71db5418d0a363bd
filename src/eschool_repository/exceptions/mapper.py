import re
import logging
from contextlib import asynccontextmanager

from .base import ErrorKind, Operation, RepositoryError, error_for
from .classifier import classify_error, constraint_name

logger = logging.getLogger(__name__)

# Kinds that are normal client-level outcomes rather than storage trouble.
EXPECTED_KINDS = frozenset({ErrorKind.NOT_FOUND, ErrorKind.DUPLICATE, ErrorKind.ENUM_VALUE})

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    Try to extract involved column names from common Postgres messages:
      - 'null value in column "email" violates not-null constraint'
      - 'DETAIL:  Key (course_id, user_id)=(..., ...) already exists.'
    """
    if not msg:
        return None

    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # SQLite: 'UNIQUE constraint failed: user.email' / 'NOT NULL constraint failed: user.email'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>[^\n\[]+)', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols").strip())]

    return None


def extract_columns(exc: BaseException) -> list[str] | None:
    """
    Best-effort extraction of column names from the DB message (Postgres, SQLite).
    """
    orig = getattr(exc, "orig", None)
    msg = str(orig) if orig is not None else str(exc)

    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def _message_for(kind: ErrorKind, operation: Operation, entity: str, columns: list[str] | None) -> str:
    if kind is ErrorKind.NOT_FOUND:
        return f"{entity} not found"
    if kind is ErrorKind.DUPLICATE:
        if columns:
            return f"{entity} already exists for field(s): {', '.join(columns)}"
        return f"{entity} already exists (unique constraint)"
    if kind is ErrorKind.ENUM_VALUE:
        return f"{entity} has a value outside its allowed set"
    if kind is ErrorKind.UPDATE_FAILED:
        return f"Failed to update {entity}"
    if kind is ErrorKind.DELETE_FAILED:
        return f"Failed to delete {entity}"
    return f"Failed to {operation.value} {entity}"


def map_error(exc: BaseException, operation: Operation, entity: str) -> RepositoryError:
    """
    Classify `exc` and build the matching app-level exception (not raised).
    Populates `.fields` and `.constraint` where possible.
    """
    kind = classify_error(operation, exc)
    columns = extract_columns(exc)
    constraint = constraint_name(exc)
    orig = getattr(exc, "orig", None)
    raw = str(orig) if orig is not None else str(exc)

    context = {
        "entity": entity,
        "operation": operation.value,
        "kind": kind.value,
        "fields": columns,
        "constraint": constraint,
    }
    if kind in EXPECTED_KINDS:
        # Expected client-level outcomes: INFO with minimal structured context.
        logger.info(f"mapper.{kind.value}", extra=context)
    else:
        logger.warning(f"mapper.{kind.value}", extra={**context, "error_type": type(exc).__name__})
        # Raw driver text may contain values; keep it at DEBUG only.
        logger.debug("mapper.raw_error", extra={"entity": entity, "raw": raw})

    return error_for(
        kind,
        _message_for(kind, operation, entity, columns),
        entity=entity,
        operation=operation,
        detail=raw,
        fields=columns,
        constraint=constraint,
    )


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def translate_errors(operation: Operation, entity: str):
    """
    Usage:
        async with translate_errors(Operation.INSERT, "User"):
            ... DB ops ...

    Every `Exception` raised inside becomes a classified `RepositoryError` chained to
    the original. `asyncio.CancelledError` and other non-`Exception` errors pass
    through untouched. No rollback happens here: statements run in a SAVEPOINT
    that undoes itself, and the session's owner decides on the transaction.
    """
    try:
        yield
    except RepositoryError:
        raise
    except Exception as exc:
        raise map_error(exc, operation, entity) from exc
