# File: daogen/schema.py
"""
daogen - Schema Introspection
==============================

Turns the raw rows of a ``MetadataProvider`` into a ``TableSchema``:

    1. Columns, in the provider's declared order.
    2. Primary key, ordered by key sequence number.
    3. Indexes, grouped by name and finished once all rows are consumed.

Nothing here decides what to *do* with a table.  A table without columns
comes back with an empty column list and the orchestrator skips it; a
``MetadataError`` from the provider propagates to the orchestrator, which
fails that one table.

Schema anomalies (no primary key, an index name reported with conflicting
uniqueness, an index over an expression, two indexes that would get the
same generated names) are logged at WARNING and collected in
``TableSchema.anomalies``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from daogen.models import (
    PRIMARY_INDEX_NAME,
    ColumnInfo,
    IndexInfo,
    IndexInfoBuilder,
    TableSchema,
)
from daogen.provider import MetadataProvider, RawColumn

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.schema")


def _anomaly(anomalies: Optional[List[str]], message: str) -> None:
    logger.warning(message)
    if anomalies is not None:
        anomalies.append(message)


# ---------------------------------------------------------------------------
# Primary key
# ---------------------------------------------------------------------------


def resolve_primary_key(
    rows: Iterable[Tuple[int, str]],
    *,
    table_name: str = "",
) -> List[str]:
    """
    Order primary-key columns by their key sequence number.

    ``rows`` are ``(key_seq, column_name)`` pairs in any order.  The sort is
    stable, so rows sharing a sequence number keep the provider's relative
    order.  That order is not meaningful: a well-formed provider never
    reports ties, and which column comes first is then unspecified.

        >>> resolve_primary_key([(2, "b"), (1, "a")])
        ['a', 'b']
    """
    ordered: List[Tuple[int, str]] = sorted(rows, key=lambda row: row[0])

    sequences: List[int] = [seq for seq, _ in ordered]
    if len(sequences) != len(set(sequences)):
        logger.warning(
            "Primary key of table '%s' repeats key sequence numbers %s; "
            "column order is unspecified.",
            table_name,
            sequences,
        )
    return [column for _, column in ordered]


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------


def group_indexes(
    rows: Iterable[Tuple[Optional[str], Optional[str], int, bool]],
    *,
    table_name: str = "",
    anomalies: Optional[List[str]] = None,
) -> Dict[str, IndexInfo]:
    """
    Group raw ``(index_name, column_name, ordinal, non_unique)`` rows.

    One ``IndexInfo`` is produced per distinct index name, in order of first
    appearance.  Columns are appended in the order the rows arrive.

    * ``index_name`` of ``None`` (the anonymous primary-key index) becomes
      ``PRIMARY_INDEX_NAME``.
    * Rows with no column name and an ordinal below 1 are statistics
      pseudo-rows and are skipped.
    * Rows with no column name at a real ordinal are expression members
      (``lower(email)``).  Such an index cannot be bound from plain column
      values, so the whole index is dropped as an anomaly.
    * A repeated column within one index is ignored.
    * A name seen again with the opposite uniqueness flag is an anomaly; the
      first-seen flag wins.

    Every group is finished exactly once, after the last row is read.
    """
    builders: Dict[str, IndexInfoBuilder] = {}
    expression_indexes: List[str] = []

    for index_name, column_name, ordinal, non_unique in rows:
        if column_name is None and ordinal >= 1:
            key_of_expression: str = index_name or PRIMARY_INDEX_NAME
            if key_of_expression not in expression_indexes:
                expression_indexes.append(key_of_expression)
            continue
        if column_name is None:
            logger.debug(
                "Skipping pseudo-row of index %r (ordinal %s) on table '%s'.",
                index_name,
                ordinal,
                table_name,
            )
            continue

        is_unique: bool = not non_unique
        key: str = index_name or PRIMARY_INDEX_NAME
        builder: Optional[IndexInfoBuilder] = builders.get(key)
        if builder is None:
            builder = IndexInfoBuilder(key, is_unique)
            builders[builder.grouping_key] = builder
        elif builder.is_unique != is_unique:
            _anomaly(
                anomalies,
                f"Table '{table_name}': index '{key}' is reported as both unique "
                f"and non-unique; treating it as "
                f"{'unique' if builder.is_unique else 'non-unique'}.",
            )

        if not builder.add_column(column_name):
            _anomaly(
                anomalies,
                f"Table '{table_name}': index '{key}' lists column "
                f"'{column_name}' more than once; it is used once.",
            )

    for key in expression_indexes:
        _anomaly(
            anomalies,
            f"Table '{table_name}': index '{key}' contains an expression member; "
            "skipped.",
        )

    return {
        key: builder.finish()
        for key, builder in builders.items()
        if key not in expression_indexes
    }


def drop_redundant_indexes(
    indexes: Dict[str, IndexInfo],
    *,
    table_name: str = "",
    anomalies: Optional[List[str]] = None,
) -> Dict[str, IndexInfo]:
    """
    Remove indexes whose derived names clash with an earlier one.

    Artifact and method names come from the uniqueness and the joined
    column names, so ``(a, b_c)`` and ``(a_b, c)`` both become ``ABC``.
    Only the first index per ``(kind, name_pojo_suffix)`` is kept.
    """
    kept: Dict[str, IndexInfo] = {}
    for key, index in indexes.items():
        twin: Optional[IndexInfo] = next(
            (
                other
                for other in kept.values()
                if (other.kind, other.name_pojo_suffix)
                == (index.kind, index.name_pojo_suffix)
            ),
            None,
        )
        if twin is None:
            kept[key] = index
        elif twin.same_structure(index):
            _anomaly(
                anomalies,
                f"Table '{table_name}': index '{index.index_name}' duplicates "
                f"'{twin.index_name}' {list(index.column_names)}; skipped.",
            )
        else:
            _anomaly(
                anomalies,
                f"Table '{table_name}': index '{index.index_name}' "
                f"{list(index.column_names)} would get the same generated names as "
                f"'{twin.index_name}' {list(twin.column_names)}; skipped.",
            )
    return kept


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


def load_table_schema(provider: MetadataProvider, table_name: str) -> TableSchema:
    """
    Introspect one table.

    Raises:
        MetadataError: If the provider fails on any of its queries.
    """
    anomalies: List[str] = []

    raw_columns: Sequence[RawColumn] = provider.list_columns(table_name)
    if not raw_columns:
        return TableSchema(table_name=table_name)

    pk_order: List[str] = resolve_primary_key(
        provider.list_primary_key(table_name), table_name=table_name
    )
    column_names: Set[str] = {raw.name for raw in raw_columns}
    pk_names: List[str] = []
    for name in pk_order:
        if name in column_names:
            pk_names.append(name)
        else:
            _anomaly(
                anomalies,
                f"Table '{table_name}': primary-key column '{name}' is not among "
                "its columns; ignored.",
            )
    pk_set: Set[str] = set(pk_names)

    columns: List[ColumnInfo] = [
        ColumnInfo.from_database(raw.name, raw.sql_type_code, raw.name in pk_set)
        for raw in raw_columns
    ]

    if not pk_names:
        _anomaly(
            anomalies,
            f"Table '{table_name}' has no primary key; "
            "update, deleteByPk and getByPk are not generated.",
        )

    indexes: Dict[str, IndexInfo] = group_indexes(
        provider.list_indexes(table_name),
        table_name=table_name,
        anomalies=anomalies,
    )
    indexes = drop_redundant_indexes(
        indexes, table_name=table_name, anomalies=anomalies
    )

    schema: TableSchema = TableSchema(
        table_name=table_name,
        columns=tuple(columns),
        primary_key=tuple(pk_names),
        indexes=indexes,
        anomalies=tuple(anomalies),
    )
    logger.debug("Loaded %r.", schema)
    return schema


__all__: List[str] = [
    "resolve_primary_key",
    "group_indexes",
    "drop_redundant_indexes",
    "load_table_schema",
]
