"""
Statement builder.

Turns a record (see `eschool_repository.models`) into parameterized INSERT and
UPDATE statements, and builds the fixed, typed read statements repositories keep
as module constants.

Rules:
  - The column set comes from the record's table only. Nothing here knows about a
    particular entity; a new record class needs no change in this module.
  - Values are always bound as named parameters (`:column`). Identifiers are quoted
    and only ever come from the schema, never from caller input.
  - Statements are built fresh on every call; there is no cache keyed by schema.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Table, bindparam, text
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.sql.selectable import TextualSelect
from sqlalchemy.types import TypeEngine

from eschool_repository.database.base import Base


@dataclass(frozen=True)
class Statement:
    """
    A generated write statement.

    - sql: statement text with named placeholders
    - params: parameter name -> value
    - types: parameter name -> column type, so enum/datetime values go through the
      same bind processing as ORM writes would
    """
    sql: str
    params: dict[str, Any]
    types: dict[str, TypeEngine] = field(default_factory=dict, repr=False)

    def clause(self) -> TextClause:
        """Return an executable `text()` clause with typed bind parameters."""
        return text(self.sql).bindparams(
            *(bindparam(name, type_=type_) for name, type_ in self.types.items())
        )


def quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def column_list(table: Table, alias: str | None = None) -> str:
    """Comma-separated, quoted column list of `table`, optionally qualified by `alias`."""
    prefix = f"{quote(alias)}." if alias else ""
    return ", ".join(prefix + quote(column.name) for column in table.columns)


def primary_key_name(table: Table) -> str:
    keys = list(table.primary_key.columns)
    if len(keys) != 1:
        raise ValueError(f"Table '{table.name}' must have a single-column primary key, got {len(keys)}")
    return keys[0].key


def _bound_values(record: Base) -> dict[str, Any]:
    """
    Values to bind for `record`, in column order.

    A column left empty (None) that declares a server default is skipped, so the
    store computes it on INSERT and keeps it on UPDATE.
    """
    values = {}
    for column in record.__table__.columns:
        value = getattr(record, column.key)
        if value is None and column.server_default is not None:
            continue
        values[column.key] = value
    return values


def _column_types(table: Table, names) -> dict[str, TypeEngine]:
    return {name: table.c[name].type for name in names}


def build_insert(record: Base) -> Statement:
    """
    Build `INSERT INTO "<table>" ("c1", "c2", ...) VALUES (:c1, :c2, ...)` for `record`.

    Raises:
        ValueError: if the record's table declares no columns (schema bug).
    """
    table = record.__table__
    if not table.columns:
        raise ValueError(f"Table '{table.name}' declares no columns")

    values = _bound_values(record)
    columns = ", ".join(quote(name) for name in values)
    placeholders = ", ".join(f":{name}" for name in values)

    return Statement(
        sql=f"INSERT INTO {quote(table.name)} ({columns}) VALUES ({placeholders})",
        params=values,
        types=_column_types(table, values),
    )


def build_update(record: Base) -> Statement:
    """
    Build `UPDATE "<table>" SET "c" = :c, ... WHERE "<key>" = :<key>` for `record`.

    Every non-key column is assigned; the primary key is the only predicate.

    Raises:
        ValueError: if the table has no single-column primary key or nothing to assign.
    """
    table = record.__table__
    key = primary_key_name(table)

    values = _bound_values(record)
    assignments = [name for name in values if name != key]
    if not assignments:
        raise ValueError(f"Table '{table.name}' has no non-key columns to update")

    set_clause = ", ".join(f"{quote(name)} = :{name}" for name in assignments)

    return Statement(
        sql=f"UPDATE {quote(table.name)} SET {set_clause} WHERE {quote(key)} = :{key}",
        params=values,
        types=_column_types(table, values),
    )


def build_select(table: Table, *predicates: str) -> TextualSelect:
    """
    Build a fixed read statement over every column of `table`.

    Each name in `predicates` becomes an equality test bound to a parameter of the
    same name, joined with AND. Result columns are typed by the table so rows come
    back with the same Python values the record declares.
    """
    sql = f"SELECT {column_list(table)} FROM {quote(table.name)}"
    if predicates:
        sql += " WHERE " + " AND ".join(f"{quote(name)} = :{name}" for name in predicates)

    clause = text(sql)
    if predicates:
        clause = clause.bindparams(
            *(bindparam(name, type_=table.c[name].type) for name in predicates)
        )
    return clause.columns(*table.columns)


def build_delete(table: Table) -> TextClause:
    """Build `DELETE FROM "<table>" WHERE "<key>" = :<key>`."""
    key = primary_key_name(table)
    return text(f"DELETE FROM {quote(table.name)} WHERE {quote(key)} = :{key}")
