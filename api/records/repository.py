"""
Record persistence.

Table and column names come from the caller, so they cannot be bound as
parameters. They are checked against a plain identifier pattern (and the
optional allow-list), folded to lower case the way PostgreSQL folds unquoted
names, and double-quoted; values are always bound.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from core import db

from .service import InsertRecord

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


class InvalidIdentifierError(ValueError):
    pass


def quote_identifier(name: Any) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise InvalidIdentifierError(f"Invalid identifier: {name!r}")
    return f'"{name.lower()}"'


def quote_table(table: Any, *, allowed: Iterable[str] = ()) -> str:
    """
    Quote `table` or `schema.table`. A non-empty `allowed` set restricts the names.
    """
    if not isinstance(table, str):
        raise InvalidIdentifierError(f"Invalid table name: {table!r}")

    allowed = frozenset(name.lower() for name in allowed)
    if allowed and table.lower() not in allowed:
        raise InvalidIdentifierError(f"Table not allowed: {table!r}")

    parts = table.split(".")
    if len(parts) > 2:
        raise InvalidIdentifierError(f"Invalid table name: {table!r}")
    return ".".join(quote_identifier(part) for part in parts)


def build_insert(record: InsertRecord, *, id_column: str = "id", allowed_tables: Iterable[str] = ()) -> tuple[str, list[Any]]:
    table = quote_table(record.table, allowed=allowed_tables)
    columns = ", ".join(quote_identifier(name) for name in record.columns)
    placeholders = ", ".join(f"${i}" for i in range(1, len(record.fields) + 1))
    sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING {quote_identifier(id_column)}"
    return sql, record.values


async def insert_record(record: InsertRecord, *, id_column: str = "id", allowed_tables: Iterable[str] = ()) -> Any:
    """
    Insert one row and return its generated id.
    """
    sql, args = build_insert(record, id_column=id_column, allowed_tables=allowed_tables)
    row = await db.fetch_one(sql, *args)
    id_key = id_column.lower()
    if row is None or id_key not in row:
        raise RuntimeError("Failed to insert record.")
    return row[id_key]
