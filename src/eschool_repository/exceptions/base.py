"""
Custom exceptions for repository-related operations.

Every failure that leaves a repository is a `RepositoryError` carrying one
`ErrorKind`. Callers may either catch a subclass (`except NotFoundError`) or
branch on `.kind`; both views always agree.
"""

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    """Closed set of repository failure categories."""
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    ENUM_VALUE = "enum_value"
    UPDATE_FAILED = "update_failed"
    DELETE_FAILED = "delete_failed"
    PERSISTENCE_FAILED = "persistence_failed"


class Operation(str, Enum):
    """Kind of statement a repository path was executing when it failed."""
    READ = "read"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


# canonical repository-level exception

class RepositoryError(Exception):
    """
    Base exception for repository errors.

    - kind: the `ErrorKind` this failure was classified as
    - message: human-friendly message (safe to show to clients)
    - entity: name of the entity the operation targeted (e.g. 'User')
    - operation: the `Operation` that failed
    - detail: text of the original failure (for logs only)
    - fields: optional list of column names related to the error (e.g. ['email'])
    - constraint: optional DB constraint name (for logs only)

    The original exception is chained as `__cause__` by whoever raises this.
    """

    kind: ErrorKind = ErrorKind.PERSISTENCE_FAILED

    def __init__(self, message: str, *, entity: str | None = None,
                 operation: Operation | None = None, detail: str | None = None,
                 fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.operation = operation
        self.detail = detail
        self.fields = list(fields) if fields else None
        self.constraint = constraint

    def __str__(self) -> str:
        base = self.message
        parts = [f"kind: {self.kind.value}"]
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        return f"{base} ({'; '.join(parts)})"

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable summary, e.g. for structured logs.

            {
                "kind": "duplicate",
                "detail": "User already exists for field(s): email",
                "entity": "User",
                "fields": ["email"],
            }

        Raw driver text (`detail` attribute) and constraint names are left out.
        """
        payload = {"kind": self.kind.value, "detail": self.message}
        if self.entity:
            payload["entity"] = self.entity
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload


class NotFoundError(RepositoryError):
    kind = ErrorKind.NOT_FOUND


class DuplicateError(RepositoryError):
    kind = ErrorKind.DUPLICATE


class EnumValueError(RepositoryError):
    """A value outside an enumerated column's allowed set was written."""
    kind = ErrorKind.ENUM_VALUE


class UpdateFailedError(RepositoryError):
    kind = ErrorKind.UPDATE_FAILED


class DeleteFailedError(RepositoryError):
    kind = ErrorKind.DELETE_FAILED


class PersistenceFailedError(RepositoryError):
    """Any other storage failure (connectivity, foreign keys, unknown)."""
    kind = ErrorKind.PERSISTENCE_FAILED


ERROR_CLASSES: dict[ErrorKind, type[RepositoryError]] = {
    cls.kind: cls
    for cls in (
        NotFoundError,
        DuplicateError,
        EnumValueError,
        UpdateFailedError,
        DeleteFailedError,
        PersistenceFailedError,
    )
}


def error_for(kind: ErrorKind, message: str, **context) -> RepositoryError:
    """Build the `RepositoryError` subclass matching `kind`."""
    return ERROR_CLASSES[kind](message, **context)


__all__ = [
    "ErrorKind",
    "Operation",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "EnumValueError",
    "UpdateFailedError",
    "DeleteFailedError",
    "PersistenceFailedError",
    "error_for",
]
