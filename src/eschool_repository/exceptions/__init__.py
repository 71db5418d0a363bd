"""
Repository error handling in two levels:

1. `classify_error(operation, exc) -> ErrorKind` (classifier.py) reads what the
   driver reported and which kind of statement was running. It never raises.
2. `RepositoryError` and its one-per-kind subclasses (base.py) are what
   repository methods raise; `translate_errors` (mapper.py) joins the two.
"""

from .base import (
    ErrorKind,
    Operation,
    RepositoryError,
    NotFoundError,
    DuplicateError,
    EnumValueError,
    UpdateFailedError,
    DeleteFailedError,
    PersistenceFailedError,
    error_for,
)
from .classifier import classify_error
from .mapper import translate_errors

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
    "classify_error",
    "translate_errors",
]
