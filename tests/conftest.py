"""
tests/conftest.py
Shared fixtures for the daogen test suite.

No external mocking libraries are used.  Metadata comes either from the
in-memory ``FakeMetadataProvider`` below or from a real SQLite database
built through SQLAlchemy; all file I/O happens inside pytest's tmp_path.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import pytest
from sqlalchemy import create_engine, text

from daogen.errors import MetadataError
from daogen.models import GeneratorConfig
from daogen.provider import (
    MetadataProvider,
    RawColumn,
    RawIndexRow,
    RawPrimaryKeyColumn,
)
from daogen.type_mapping import SqlType


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_daogen_logging() -> Iterator[None]:
    """Undo the CLI's logger setup so caplog keeps seeing daogen records."""
    yield
    logging.disable(logging.NOTSET)
    package_logger: logging.Logger = logging.getLogger("daogen")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# In-memory metadata provider
# ---------------------------------------------------------------------------


class FakeMetadataProvider(MetadataProvider):
    """
    Metadata provider backed by plain dicts.

    ``failing_tables`` makes every query about those tables raise
    ``MetadataError``; ``fail_connect`` makes ``connect()`` raise.
    """

    def __init__(self) -> None:
        self.tables: Dict[str, List[RawColumn]] = {}
        self.primary_keys: Dict[str, List[RawPrimaryKeyColumn]] = {}
        self.indexes: Dict[str, List[RawIndexRow]] = {}
        self.failing_tables: set = set()
        self.fail_connect: bool = False
        self.connect_calls: int = 0
        self.close_calls: int = 0

    # -- builder helpers ----------------------------------------------------

    def add_table(
        self,
        name: str,
        columns: Sequence[Tuple[str, int]],
        primary_key: Sequence[str] = (),
        indexes: Sequence[Tuple[Optional[str], Optional[str], int, bool]] = (),
    ) -> "FakeMetadataProvider":
        self.tables[name] = [RawColumn(col, code) for col, code in columns]
        self.primary_keys[name] = [
            RawPrimaryKeyColumn(seq, col) for seq, col in enumerate(primary_key, start=1)
        ]
        self.indexes[name] = [RawIndexRow(*row) for row in indexes]
        return self

    # -- MetadataProvider ---------------------------------------------------

    def connect(self) -> None:
        self.connect_calls += 1
        if self.fail_connect:
            raise MetadataError("Could not connect to the database: refused")

    def close(self) -> None:
        self.close_calls += 1

    def _check(self, table: str) -> None:
        if table in self.failing_tables:
            raise MetadataError(f"Could not read metadata of table '{table}': lost connection")

    def list_tables(self) -> List[str]:
        return list(self.tables)

    def list_columns(self, table: str) -> List[RawColumn]:
        self._check(table)
        return list(self.tables.get(table, []))

    def list_primary_key(self, table: str) -> List[RawPrimaryKeyColumn]:
        self._check(table)
        return list(self.primary_keys.get(table, []))

    def list_indexes(self, table: str) -> List[RawIndexRow]:
        self._check(table)
        return list(self.indexes.get(table, []))


# ---------------------------------------------------------------------------
# Provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_provider() -> FakeMetadataProvider:
    return FakeMetadataProvider()


@pytest.fixture()
def customer_provider(fake_provider: FakeMetadataProvider) -> FakeMetadataProvider:
    """``customer(customerId PK INTEGER, lastName VARCHAR)`` with index ``lastName``."""
    return fake_provider.add_table(
        "customer",
        [("customerId", SqlType.INTEGER), ("lastName", SqlType.VARCHAR)],
        primary_key=["customerId"],
        indexes=[("lastName", "lastName", 1, True)],
    )


@pytest.fixture()
def shop_provider(fake_provider: FakeMetadataProvider) -> FakeMetadataProvider:
    """Several tables covering the PK / no-PK / empty / unique-index cases."""
    fake_provider.add_table(
        "customer",
        [("customerId", SqlType.INTEGER), ("lastName", SqlType.VARCHAR)],
        primary_key=["customerId"],
        indexes=[
            (None, "customerId", 1, False),
            ("lastName", "lastName", 1, True),
        ],
    )
    fake_provider.add_table(
        "order_line",
        [
            ("order_id", SqlType.BIGINT),
            ("line_no", SqlType.INTEGER),
            ("amount", SqlType.DECIMAL),
            ("created_at", SqlType.TIMESTAMP),
        ],
        primary_key=["order_id", "line_no"],
    )
    fake_provider.add_table(
        "audit_log",
        [("message", SqlType.VARCHAR), ("logged_on", SqlType.DATE)],
        indexes=[("ux_message", "message", 1, False)],
    )
    fake_provider.add_table("empty_table", [])
    return fake_provider


# ---------------------------------------------------------------------------
# SQLite database
# ---------------------------------------------------------------------------

_SHOP_DDL: List[str] = [
    """
    CREATE TABLE customer (
        customer_id INTEGER PRIMARY KEY,
        last_name VARCHAR(80) NOT NULL,
        email VARCHAR(120),
        balance NUMERIC(10, 2),
        created_at TIMESTAMP,
        CONSTRAINT uq_customer_email UNIQUE (email)
    )
    """,
    "CREATE INDEX idx_customer_last_name ON customer (last_name)",
    """
    CREATE TABLE order_line (
        order_id BIGINT NOT NULL,
        line_no INTEGER NOT NULL,
        quantity SMALLINT,
        note TEXT,
        PRIMARY KEY (order_id, line_no)
    )
    """,
    """
    CREATE TABLE event_log (
        message VARCHAR(200),
        payload BLOB
    )
    """,
]


@pytest.fixture()
def sqlite_url(tmp_path: pathlib.Path) -> str:
    """File-backed SQLite database with three tables; returns its URL."""
    url: str = f"sqlite:///{tmp_path / 'shop.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        for statement in _SHOP_DDL:
            conn.execute(text(statement))
    engine.dispose()
    return url


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "generated"


@pytest.fixture()
def config(output_dir: pathlib.Path) -> GeneratorConfig:
    return GeneratorConfig(
        database_url="sqlite://",
        username="app",
        password="secret",
        output_dir=str(output_dir),
        model_package="com.shop.model",
        dao_package="com.shop.dao",
    )
