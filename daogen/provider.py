# File: daogen/provider.py
"""
daogen - Database Metadata Provider
====================================

The generator never talks to a database directly.  Everything it needs to
know about a schema comes through four read-only queries on a
``MetadataProvider``:

    list_tables()            → table names, in provider order
    list_columns(table)      → (column name, SQL type code), declared order
    list_primary_key(table)  → (key sequence, column name), possibly empty
    list_indexes(table)      → (index name or None, column name or None,
                                ordinal position, non_unique)

``SQLAlchemyMetadataProvider`` answers them through SQLAlchemy's runtime
inspection API (``sqlalchemy.inspect``), so any dialect SQLAlchemy can
reflect works.  Column types are converted to ``java.sql.Types`` codes
(``SqlType``) so the rest of the pipeline sees the same codes a JDBC
driver would report.

Index rows follow the shape of JDBC's ``getIndexInfo``: the primary-key
index comes first with a ``None`` name, then every index, then every unique
constraint that was not already reported as an index.

Usage::

    with SQLAlchemyMetadataProvider("sqlite:///shop.db") as provider:
        for table in provider.list_tables():
            print(table, provider.list_columns(table))
"""

from __future__ import annotations

import contextlib
import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Set, Type

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Connection, Engine, Inspector, make_url
from sqlalchemy.engine.url import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import sqltypes
from sqlalchemy.types import TypeEngine

from daogen.errors import MetadataError
from daogen.type_mapping import SqlType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.provider")


# ---------------------------------------------------------------------------
# Raw metadata rows
# ---------------------------------------------------------------------------


class RawColumn(NamedTuple):
    name: str
    sql_type_code: int


class RawPrimaryKeyColumn(NamedTuple):
    key_seq: int
    column_name: str


class RawIndexRow(NamedTuple):
    index_name: Optional[str]
    column_name: Optional[str]
    ordinal: int
    non_unique: bool


# ---------------------------------------------------------------------------
# Abstract provider
# ---------------------------------------------------------------------------


class MetadataProvider(ABC):
    """
    Read-only source of schema metadata.

    A provider holds at most one session.  ``connect()`` acquires it and
    ``close()`` releases it; ``close()`` must be safe to call any number of
    times, including when nothing was ever acquired.
    """

    def connect(self) -> None:
        """Acquire the metadata session.  No-op by default."""

    def close(self) -> None:
        """Release the metadata session.  No-op by default."""

    @abstractmethod
    def list_tables(self) -> List[str]:
        ...

    @abstractmethod
    def list_columns(self, table: str) -> List[RawColumn]:
        ...

    @abstractmethod
    def list_primary_key(self, table: str) -> List[RawPrimaryKeyColumn]:
        ...

    @abstractmethod
    def list_indexes(self, table: str) -> List[RawIndexRow]:
        ...

    def __enter__(self) -> "MetadataProvider":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()


# ---------------------------------------------------------------------------
# SQLAlchemy type → SqlType code
# ---------------------------------------------------------------------------

# Keyed by upper-cased ``__visit_name__``; dialect types that have no generic
# SQLAlchemy counterpart (MySQL TINYINT, BIT, the *TEXT / *BLOB families)
# are only recognisable this way.
_VISIT_NAME_CODES: Dict[str, SqlType] = {
    "BIT": SqlType.BIT,
    "TINYINT": SqlType.TINYINT,
    "SMALLINT": SqlType.SMALLINT,
    "MEDIUMINT": SqlType.INTEGER,
    "INTEGER": SqlType.INTEGER,
    "INT": SqlType.INTEGER,
    "BIGINT": SqlType.BIGINT,
    "FLOAT": SqlType.FLOAT,
    "REAL": SqlType.REAL,
    "DOUBLE": SqlType.DOUBLE,
    "DOUBLE_PRECISION": SqlType.DOUBLE,
    "NUMERIC": SqlType.NUMERIC,
    "DECIMAL": SqlType.DECIMAL,
    "CHAR": SqlType.CHAR,
    "NCHAR": SqlType.NCHAR,
    "VARCHAR": SqlType.VARCHAR,
    "NVARCHAR": SqlType.NVARCHAR,
    "TEXT": SqlType.LONGVARCHAR,
    "TINYTEXT": SqlType.LONGVARCHAR,
    "MEDIUMTEXT": SqlType.LONGVARCHAR,
    "LONGTEXT": SqlType.LONGVARCHAR,
    "CLOB": SqlType.CLOB,
    "DATE": SqlType.DATE,
    "TIME": SqlType.TIME,
    "TIMESTAMP": SqlType.TIMESTAMP,
    "DATETIME": SqlType.TIMESTAMP,
    "BOOLEAN": SqlType.BOOLEAN,
    "BINARY": SqlType.BINARY,
    "VARBINARY": SqlType.VARBINARY,
    "BLOB": SqlType.BLOB,
    "TINYBLOB": SqlType.LONGVARBINARY,
    "MEDIUMBLOB": SqlType.LONGVARBINARY,
    "LONGBLOB": SqlType.LONGVARBINARY,
    "BYTEA": SqlType.LONGVARBINARY,
}


def _code_by_class(type_: TypeEngine) -> SqlType:
    # Order matters: subclasses before their bases.
    if isinstance(type_, sqltypes.Boolean):
        return SqlType.BOOLEAN
    if isinstance(type_, sqltypes.SmallInteger):
        return SqlType.SMALLINT
    if isinstance(type_, sqltypes.BigInteger):
        return SqlType.BIGINT
    if isinstance(type_, sqltypes.Integer):
        return SqlType.INTEGER
    if isinstance(type_, sqltypes.Float):
        return SqlType.DOUBLE if isinstance(type_, sqltypes.Double) else SqlType.FLOAT
    if isinstance(type_, sqltypes.Numeric):
        return SqlType.DECIMAL
    if isinstance(type_, sqltypes.DateTime):
        return SqlType.TIMESTAMP
    if isinstance(type_, sqltypes.Date):
        return SqlType.DATE
    if isinstance(type_, sqltypes.Time):
        return SqlType.TIME
    if isinstance(type_, sqltypes.UnicodeText):
        return SqlType.LONGNVARCHAR
    if isinstance(type_, sqltypes.Text):
        return SqlType.LONGVARCHAR
    if isinstance(type_, sqltypes.Unicode):
        return SqlType.NVARCHAR
    if isinstance(type_, sqltypes.String):
        return SqlType.VARCHAR
    if isinstance(type_, sqltypes.LargeBinary):
        return SqlType.LONGVARBINARY
    if isinstance(type_, sqltypes._Binary):
        return SqlType.VARBINARY
    if isinstance(type_, sqltypes.ARRAY):
        return SqlType.ARRAY
    return SqlType.OTHER


def sql_type_code_for(type_: TypeEngine) -> int:
    """
    Map a reflected SQLAlchemy column type to a ``java.sql.Types`` code.

    Examples:
        >>> sql_type_code_for(sqltypes.VARCHAR(50))
        12
        >>> sql_type_code_for(sqltypes.TIMESTAMP(timezone=True))
        2014
    """
    visit_name: str = str(getattr(type_, "__visit_name__", "")).upper()
    code: Optional[SqlType] = _VISIT_NAME_CODES.get(visit_name)
    if code is None:
        code = _code_by_class(type_)

    if getattr(type_, "timezone", False):
        if code == SqlType.TIMESTAMP:
            return int(SqlType.TIMESTAMP_WITH_TIMEZONE)
        if code == SqlType.TIME:
            return int(SqlType.TIME_WITH_TIMEZONE)
    return int(code)


# ---------------------------------------------------------------------------
# SQLAlchemy provider
# ---------------------------------------------------------------------------


class SQLAlchemyMetadataProvider(MetadataProvider):
    """
    ``MetadataProvider`` over a live database via SQLAlchemy.

    One engine and one connection are opened by ``connect()`` (or lazily by
    the first query) and kept until ``close()``.  Every SQLAlchemy failure is
    re-raised as ``MetadataError``.
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        engine_options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._url: str = url
        self._username: Optional[str] = username
        self._password: Optional[str] = password
        self._engine_options: Dict[str, Any] = dict(engine_options or {})

        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._inspector: Optional[Inspector] = None

    # -----------------------------------------------------------------
    # Session lifecycle
    # -----------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def _build_url(self) -> URL:
        url: URL = make_url(self._url)
        if self._username:
            url = url.set(username=self._username)
        if self._password:
            url = url.set(password=self._password)
        return url

    def connect(self) -> None:
        if self._connection is not None:
            return

        try:
            url: URL = self._build_url()
            self._engine = create_engine(url, **self._engine_options)
            self._connection = self._engine.connect()
            self._inspector = inspect(self._connection)
        except SQLAlchemyError as exc:
            self.close()
            raise MetadataError(f"Could not connect to the database: {exc}") from exc

        dialect = self._engine.dialect
        version: str = ".".join(str(p) for p in dialect.server_version_info or ())
        logger.info(
            "Connected to %s %s (driver: %s).",
            dialect.name,
            version or "(unknown version)",
            dialect.driver,
        )

    def close(self) -> None:
        connection: Optional[Connection] = self._connection
        engine: Optional[Engine] = self._engine
        self._connection = None
        self._engine = None
        self._inspector = None

        if connection is not None:
            try:
                connection.close()
            except SQLAlchemyError as exc:
                logger.warning("Error while closing the database connection: %s", exc)
        if engine is not None:
            engine.dispose()
            logger.debug("Database connection released.")

    @contextlib.contextmanager
    def _inspecting(self, what: str) -> Iterator[Inspector]:
        """Yield the inspector, converting SQLAlchemy errors to MetadataError."""
        self.connect()
        if self._inspector is None:
            raise MetadataError(f"Could not read {what}: no open database connection.")
        try:
            yield self._inspector
        except SQLAlchemyError as exc:
            self._rollback()
            raise MetadataError(f"Could not read {what}: {exc}") from exc

    def _rollback(self) -> None:
        """End the failed transaction so the next query starts clean."""
        if self._connection is None or not self._connection.in_transaction():
            return
        try:
            self._connection.rollback()
        except SQLAlchemyError as exc:
            logger.warning("Could not roll back after a failed metadata query: %s", exc)

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------

    def list_tables(self) -> List[str]:
        with self._inspecting("table list") as insp:
            tables: List[str] = list(insp.get_table_names())
        logger.debug("Found %d table(s).", len(tables))
        return tables

    def list_columns(self, table: str) -> List[RawColumn]:
        with self._inspecting(f"columns of table '{table}'") as insp:
            reflected: List[Dict[str, Any]] = list(insp.get_columns(table))
        return [
            RawColumn(col["name"], sql_type_code_for(col["type"])) for col in reflected
        ]

    def list_primary_key(self, table: str) -> List[RawPrimaryKeyColumn]:
        with self._inspecting(f"primary key of table '{table}'") as insp:
            pk: Dict[str, Any] = insp.get_pk_constraint(table) or {}
        columns: List[str] = list(pk.get("constrained_columns") or [])
        return [RawPrimaryKeyColumn(seq, name) for seq, name in enumerate(columns, start=1)]

    def list_indexes(self, table: str) -> List[RawIndexRow]:
        rows: List[RawIndexRow] = []
        seen: Set[str] = set()

        with self._inspecting(f"indexes of table '{table}'") as insp:
            pk: Dict[str, Any] = insp.get_pk_constraint(table) or {}
            indexes: List[Dict[str, Any]] = list(insp.get_indexes(table))
            uniques: List[Dict[str, Any]] = list(insp.get_unique_constraints(table))

        # Primary-key index, anonymous like JDBC's getIndexInfo reports it.
        for ordinal, column in enumerate(pk.get("constrained_columns") or [], start=1):
            rows.append(RawIndexRow(None, column, ordinal, False))

        for idx in indexes:
            name: Optional[str] = idx.get("name")
            non_unique: bool = not idx.get("unique", False)
            for ordinal, column in enumerate(idx.get("column_names") or [], start=1):
                # Expression members come back as None.
                rows.append(RawIndexRow(name, column, ordinal, non_unique))
            if name:
                seen.add(name)

        for uq in uniques:
            columns: List[str] = list(uq.get("column_names") or [])
            name = uq.get("name") or f"uq_{table}_{'_'.join(columns)}"
            if name in seen:
                continue
            for ordinal, column in enumerate(columns, start=1):
                rows.append(RawIndexRow(name, column, ordinal, False))
            seen.add(name)

        logger.debug("Table '%s': %d index row(s).", table, len(rows))
        return rows


__all__: List[str] = [
    "RawColumn",
    "RawPrimaryKeyColumn",
    "RawIndexRow",
    "MetadataProvider",
    "SQLAlchemyMetadataProvider",
    "sql_type_code_for",
]
