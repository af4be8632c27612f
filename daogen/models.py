# File: daogen/models.py
"""
daogen - Core Data Models
==========================
Pydantic V2 models for everything the pipeline passes around:

    ColumnInfo       one database column, with its derived Java field/type.
    IndexInfo        one finished index (built through IndexInfoBuilder).
    TableSchema      columns + primary key + indexes of one table.
    GeneratorConfig  all settings of a generation run.

Schema values are frozen: they are built once during introspection of a
table and only read afterwards.  Equality on them is the ordinary pydantic
field-by-field equality.  Grouping raw index rows by name goes through the
separate ``IndexInfo.grouping_key`` instead.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from daogen.naming import java_identifier, method_suffix, to_class_name
from daogen.type_mapping import to_target_type

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.models")

# Literal name given to indexes the metadata reports without a name (the
# primary-key index, in practice).
PRIMARY_INDEX_NAME: str = "PRIMARY"

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_VALUE_CONFIG: ConfigDict = ConfigDict(
    frozen=True,
    extra="forbid",
)

_SETTINGS_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Column
# ---------------------------------------------------------------------------


class ColumnInfo(BaseModel):
    """One database column of a table, in declared order."""

    model_config = _VALUE_CONFIG

    db_name: str = Field(..., min_length=1, description="Exact column identifier.")
    field_name: str = Field(..., min_length=1, description="camelCase Java field name.")
    type_name: str = Field(..., min_length=1, description="Boxed Java type name.")
    sql_type_code: int = Field(..., description="java.sql.Types code reported for it.")
    is_primary_key: bool = Field(default=False)

    @classmethod
    def from_database(
        cls, db_name: str, sql_type_code: int, is_primary_key: bool = False
    ) -> "ColumnInfo":
        """Build a column, deriving field and type names from the raw metadata."""
        return cls(
            db_name=db_name,
            field_name=java_identifier(db_name),
            type_name=to_target_type(sql_type_code),
            sql_type_code=sql_type_code,
            is_primary_key=is_primary_key,
        )

    @property
    def accessor_suffix(self) -> str:
        """``Customerid`` in ``getCustomerid`` / ``setCustomerid``."""
        return to_class_name(self.field_name)

    def __repr__(self) -> str:
        pk_flag: str = ", PK" if self.is_primary_key else ""
        return f"<Column {self.db_name} ({self.type_name}{pk_flag})>"


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class IndexInfo(BaseModel):
    """
    A finished index: name, uniqueness and ordered columns.

    Do not build these directly from metadata rows; collect rows in an
    ``IndexInfoBuilder`` and call ``finish()`` once every column is known,
    which is when the name suffixes can be derived.
    """

    model_config = _VALUE_CONFIG

    index_name: str = Field(..., min_length=1)
    is_unique: bool = Field(default=False)
    column_names: Tuple[str, ...] = Field(..., min_length=1)
    name_pojo_suffix: str = Field(..., min_length=1, description="e.g. 'UserIdEmail'.")
    name_method_suffix: str = Field(
        ..., min_length=1, description="e.g. 'ByUniqueUserIdEmail'."
    )

    @field_validator("column_names")
    @classmethod
    def _no_duplicate_columns(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(v) != len(set(v)):
            raise ValueError(f"Duplicate columns in index: {list(v)}")
        return v

    @property
    def grouping_key(self) -> str:
        """Key used to collect raw rows into one index.  Not an identity."""
        return self.index_name

    @property
    def kind(self) -> str:
        return "Unique" if self.is_unique else "Index"

    def is_primary_index(self, has_primary_key: bool) -> bool:
        """True for the index backing the primary key of a table that has one."""
        return has_primary_key and self.index_name.upper() == PRIMARY_INDEX_NAME

    def same_structure(self, other: "IndexInfo") -> bool:
        return (
            self.is_unique == other.is_unique
            and self.column_names == other.column_names
        )

    def __repr__(self) -> str:
        return f"<Index {self.index_name} ({self.kind}): {list(self.column_names)}>"


class IndexInfoBuilder:
    """
    Mutable collector for the rows of one index.

    Usage::

        builder = IndexInfoBuilder("idx_name", is_unique=False)
        builder.add_column("last_name")
        builder.add_column("first_name")
        index = builder.finish()

    ``finish()`` may be called once; the builder refuses columns afterwards.
    """

    __slots__ = ("index_name", "is_unique", "_columns", "_finished")

    def __init__(self, index_name: Optional[str], is_unique: bool) -> None:
        self.index_name: str = index_name or PRIMARY_INDEX_NAME
        self.is_unique: bool = is_unique
        # dict as an insertion-ordered set
        self._columns: Dict[str, None] = {}
        self._finished: bool = False

    @property
    def grouping_key(self) -> str:
        return self.index_name

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(self._columns)

    def add_column(self, column_name: str) -> bool:
        """Append a column.  Returns False if it was already present."""
        if self._finished:
            raise RuntimeError(
                f"Index '{self.index_name}' is already finished; "
                f"cannot add column '{column_name}'."
            )
        if column_name in self._columns:
            return False
        self._columns[column_name] = None
        return True

    def finish(self) -> IndexInfo:
        """Freeze the collected columns into an ``IndexInfo``."""
        if self._finished:
            raise RuntimeError(f"Index '{self.index_name}' was already finished.")
        self._finished = True

        pojo_suffix: str = method_suffix(self._columns)
        kind: str = "Unique" if self.is_unique else "Index"
        return IndexInfo(
            index_name=self.index_name,
            is_unique=self.is_unique,
            column_names=tuple(self._columns),
            name_pojo_suffix=pojo_suffix,
            name_method_suffix=f"By{kind}{pojo_suffix}",
        )

    def __repr__(self) -> str:
        state: str = "finished" if self._finished else "open"
        return f"<IndexInfoBuilder {self.index_name} [{state}]: {list(self._columns)}>"


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


class TableSchema(BaseModel):
    """
    Everything generation needs to know about one table.

    ``columns`` keeps the provider's order; every derived list (constructor
    parameters, SQL column lists, binding order) follows it.
    """

    model_config = _VALUE_CONFIG

    table_name: str = Field(..., min_length=1)
    columns: Tuple[ColumnInfo, ...] = Field(default_factory=tuple)
    primary_key: Tuple[str, ...] = Field(
        default_factory=tuple, description="PK column names in key-sequence order."
    )
    indexes: Dict[str, IndexInfo] = Field(
        default_factory=dict, description="Finished indexes keyed by grouping key."
    )
    anomalies: Tuple[str, ...] = Field(
        default_factory=tuple, description="Warnings raised while introspecting."
    )

    @computed_field  # type: ignore[misc]
    @property
    def class_name(self) -> str:
        return to_class_name(self.table_name)

    @property
    def primary_key_columns(self) -> List[ColumnInfo]:
        """PK columns in key-sequence order, which may differ from column order."""
        resolved: List[ColumnInfo] = []
        for name in self.primary_key:
            col: Optional[ColumnInfo] = self.get_column(name)
            if col is not None:
                resolved.append(col)
        return resolved

    @property
    def non_key_columns(self) -> List[ColumnInfo]:
        return [c for c in self.columns if not c.is_primary_key]

    @property
    def has_primary_key(self) -> bool:
        return len(self.primary_key_columns) > 0

    def get_column(self, db_name: str) -> Optional[ColumnInfo]:
        for col in self.columns:
            if col.db_name == db_name:
                return col
        return None

    def columns_for_index(self, index: IndexInfo) -> List[ColumnInfo]:
        """Index columns as ``ColumnInfo``, in index order; unknown names dropped."""
        resolved: List[ColumnInfo] = []
        for name in index.column_names:
            col: Optional[ColumnInfo] = self.get_column(name)
            if col is not None:
                resolved.append(col)
        return resolved

    def __repr__(self) -> str:
        return (
            f"<Table {self.table_name} "
            f"({len(self.columns)} cols, {len(self.primary_key_columns)} PK, "
            f"{len(self.indexes)} indexes)>"
        )


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """
    Settings for one generation run.

    Built by ``daogen.config.load_config`` (or directly in code / tests) and
    handed to ``DaoGenerator``; nothing reads settings from anywhere else.
    """

    model_config = _SETTINGS_CONFIG

    # -- Connection ---------------------------------------------------------
    database_url: str = Field(
        ..., description="SQLAlchemy URL of the database to introspect."
    )
    username: Optional[str] = Field(default=None, description="Login user.")
    password: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="Login password; missing means empty.",
    )

    # -- Locations ----------------------------------------------------------
    template_dir: Optional[str] = Field(
        default=None,
        description="Template directory; None uses the bundled templates.",
    )
    output_dir: str = Field(default="generated", min_length=1)
    model_package: str = Field(default="com.example.model", min_length=1)
    dao_package: str = Field(default="com.example.dao", min_length=1)
    source_extension: str = Field(default="java", min_length=1)

    # -- Generation ---------------------------------------------------------
    identifier_quote: Literal["`", '"'] = Field(
        default="`", description="Quote character for SQL identifiers."
    )
    strict_placeholders: bool = Field(
        default=True,
        description="Fail on ${key} placeholders with no value instead of blanking them.",
    )
    dao_config_resource: str = Field(
        default="database.properties",
        min_length=1,
        description="Classpath resource generated DAOs read their connection from.",
    )
    tables: List[str] = Field(
        default_factory=list, description="Only generate these tables (empty = all)."
    )
    exclude_tables: List[str] = Field(default_factory=list)

    # -- Output behaviour ---------------------------------------------------
    clean_output: bool = Field(default=False)
    dry_run: bool = Field(default=False)

    @field_validator("database_url")
    @classmethod
    def _url_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("database_url is missing or empty.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def _default_password(cls, v: Optional[str]) -> str:
        if v is None:
            logger.warning("No database password configured; using an empty password.")
            return ""
        return v

    @field_validator("model_package", "dao_package")
    @classmethod
    def _valid_package(cls, v: str) -> str:
        parts: List[str] = v.split(".")
        if not all(part.isidentifier() for part in parts):
            raise ValueError(f"'{v}' is not a valid Java package name.")
        return v

    @field_validator("source_extension")
    @classmethod
    def _strip_dot(cls, v: str) -> str:
        return v.lstrip(".")

    @property
    def model_package_path(self) -> str:
        return self.model_package.replace(".", "/")

    @property
    def dao_package_path(self) -> str:
        return self.dao_package.replace(".", "/")

    def selects_table(self, table_name: str) -> bool:
        """Apply the include / exclude lists."""
        if self.tables and table_name not in self.tables:
            return False
        return table_name not in self.exclude_tables


__all__: List[str] = [
    "PRIMARY_INDEX_NAME",
    "ColumnInfo",
    "IndexInfo",
    "IndexInfoBuilder",
    "TableSchema",
    "GeneratorConfig",
]

logger.debug("daogen.models loaded — %d public symbols.", len(__all__))
