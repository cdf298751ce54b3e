"""
SQL statement builders for single-row records.

Each builder returns a `Statement`: SQL text with `%s` placeholders plus the
values to bind, ready for `cursor.execute(text, params)`. Table and column
names are interpolated into the text (they come from validated schema
metadata); values are always bound.

`Statement.render()` produces the equivalent literal SQL, with each value
quoted by psycopg, for logging and dry runs:

    >>> insert_statement("items", {"id": "", "name": "Coin", "price": "5"}, ["id"]).render()
    "INSERT INTO items (name, price) VALUES ('Coin', '5')"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Tuple

from psycopg import sql

PLACEHOLDER = "%s"


def escape(value: Any) -> str:
    """Return `value` as SQL literal text (`'O''Brien'`, `42`, `NULL`)."""
    return sql.Literal(value).as_string(None)


@dataclass(frozen=True)
class Statement:
    """SQL text with `%s` placeholders and the parameters bound to them."""

    text: str
    params: Tuple[Any, ...] = ()

    def render(self) -> str:
        """Substitute every placeholder with the escaped literal of its value."""
        if not self.params:
            return self.text
        return self.text % tuple(escape(value) for value in self.params)

    def __str__(self) -> str:
        return self.render()


def where_clause(primary_key: Sequence[str], values: Mapping[str, Any]) -> Statement:
    """
    Build the predicate that identifies one row by its primary key.

    Columns are joined with `AND` in primary-key order. A keyless table has no
    such predicate, so an empty key raises `ValueError`.
    """
    if not primary_key:
        raise ValueError("no primary key to address a single row")
    predicates = [f"{column}={PLACEHOLDER}" for column in primary_key]
    return Statement(
        "WHERE " + " AND ".join(predicates),
        tuple(values[column] for column in primary_key),
    )


def _writable(values: Mapping[str, Any], auto_fields: Iterable[str]) -> list[str]:
    auto = set(auto_fields)
    return [column for column in values if column not in auto]


def select_statement(
    table: str, primary_key: Sequence[str], values: Mapping[str, Any]
) -> Statement:
    where = where_clause(primary_key, values)
    return Statement(f"SELECT * FROM {table} {where.text}", where.params)


def insert_statement(
    table: str, values: Mapping[str, Any], auto_fields: Iterable[str] = ()
) -> Statement:
    """Build an INSERT for every non-auto column, in field order."""
    columns = _writable(values, auto_fields)
    placeholders = ", ".join(PLACEHOLDER for _ in columns)
    return Statement(
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
        tuple(values[column] for column in columns),
    )


def update_statement(
    table: str,
    values: Mapping[str, Any],
    primary_key: Sequence[str],
    auto_fields: Iterable[str] = (),
) -> Statement:
    """Build an UPDATE that sets every non-auto column of the addressed row."""
    columns = _writable(values, auto_fields)
    assignments = ", ".join(f"{column}={PLACEHOLDER}" for column in columns)
    where = where_clause(primary_key, values)
    return Statement(
        f"UPDATE {table} SET {assignments} {where.text}",
        tuple(values[column] for column in columns) + where.params,
    )


def delete_statement(
    table: str, primary_key: Sequence[str], values: Mapping[str, Any]
) -> Statement:
    where = where_clause(primary_key, values)
    return Statement(f"DELETE FROM {table} {where.text}", where.params)


__all__ = [
    "Statement",
    "delete_statement",
    "escape",
    "insert_statement",
    "select_statement",
    "update_statement",
    "where_clause",
]
