"""
Declarative base shared by every record (row schema) class.

Records are the storage-shaped counterparts of domain entities. They are used
as typed value holders and as the schema the statement builder reads; they are
never attached to an ORM session.
"""

from collections.abc import Mapping
from typing import Any, Self

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):

    def values(self) -> dict[str, Any]:
        """Return one value per column, in table column order."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> Self:
        """Build a record from a result row keyed by column name."""
        return cls(**{column.key: row[column.key] for column in cls.__table__.columns})

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={getattr(self, 'id', None)!r})>"


# Naming convention for constraints and indexes.
# Enum CHECK constraints end up as "ck_<table>_<type name>"; enum type names end in "_enum",
# which is what the error classifier keys on for non-native enum backends.
Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}
