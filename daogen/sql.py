# File: daogen/sql.py
"""
daogen - SQL Statement Builders
================================

Builds the parameterised SQL embedded in generated accessor methods.

* Every identifier is quoted (backticks by default, configurable) so
  reserved words such as ``order`` or ``user`` work as table/column names.
  An embedded quote character is doubled.
* WHERE clauses are ``col = ?`` predicates joined with ``AND``, one per key
  column, in the key's own column order.
* Reads use ``SELECT *``.  Row mapping addresses columns by name, so
  added columns are harmless; renamed ones break the accessor at runtime.
* Existence checks are ``SELECT 1 ... LIMIT 1``.

    >>> select_statement("customer", ["customerId"])
    'SELECT * FROM `customer` WHERE `customerId` = ?'
"""

from __future__ import annotations

from typing import List, Sequence

DEFAULT_QUOTE: str = "`"


def quote_identifier(name: str, quote: str = DEFAULT_QUOTE) -> str:
    """Quote one identifier, doubling any embedded quote character."""
    if not quote:
        return name
    return f"{quote}{name.replace(quote, quote * 2)}{quote}"


def _assignments(columns: Sequence[str], quote: str) -> List[str]:
    return [f"{quote_identifier(col, quote)} = ?" for col in columns]


def where_clause(key_columns: Sequence[str], quote: str = DEFAULT_QUOTE) -> str:
    """``a = ? AND b = ?`` over *key_columns*, in the given order."""
    if not key_columns:
        raise ValueError("A WHERE clause needs at least one key column.")
    return " AND ".join(_assignments(key_columns, quote))


def insert_statement(
    table: str, columns: Sequence[str], quote: str = DEFAULT_QUOTE
) -> str:
    if not columns:
        raise ValueError(f"Cannot build INSERT for table '{table}' without columns.")
    column_list: str = ", ".join(quote_identifier(col, quote) for col in columns)
    markers: str = ", ".join("?" for _ in columns)
    return (
        f"INSERT INTO {quote_identifier(table, quote)} "
        f"({column_list}) VALUES ({markers})"
    )


def update_statement(
    table: str,
    set_columns: Sequence[str],
    key_columns: Sequence[str],
    quote: str = DEFAULT_QUOTE,
) -> str:
    """UPDATE with SET over *set_columns* and WHERE over *key_columns*."""
    if not set_columns:
        raise ValueError(f"Cannot build UPDATE for table '{table}' without SET columns.")
    return (
        f"UPDATE {quote_identifier(table, quote)} "
        f"SET {', '.join(_assignments(set_columns, quote))} "
        f"WHERE {where_clause(key_columns, quote)}"
    )


def delete_statement(
    table: str, key_columns: Sequence[str], quote: str = DEFAULT_QUOTE
) -> str:
    return (
        f"DELETE FROM {quote_identifier(table, quote)} "
        f"WHERE {where_clause(key_columns, quote)}"
    )


def select_statement(
    table: str, key_columns: Sequence[str], quote: str = DEFAULT_QUOTE
) -> str:
    return (
        f"SELECT * FROM {quote_identifier(table, quote)} "
        f"WHERE {where_clause(key_columns, quote)}"
    )


def exists_statement(
    table: str, key_columns: Sequence[str], quote: str = DEFAULT_QUOTE
) -> str:
    return (
        f"SELECT 1 FROM {quote_identifier(table, quote)} "
        f"WHERE {where_clause(key_columns, quote)} LIMIT 1"
    )


__all__: List[str] = [
    "DEFAULT_QUOTE",
    "quote_identifier",
    "where_clause",
    "insert_statement",
    "update_statement",
    "delete_statement",
    "select_statement",
    "exists_statement",
]
