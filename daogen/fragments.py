# File: daogen/fragments.py
"""
daogen - Java Source Fragments
===============================

Small builders for the repeated pieces of generated Java: field lists,
constructor parts, accessors, ``PreparedStatement`` binding blocks and
``ResultSet`` row-mapping lines.

Every builder takes columns in the order they must appear and never
reorders them.  Multi-line fragments are joined with newline + indent so
that a fragment dropped into a template at the right indentation keeps
every line aligned.

Generated Java is indented with tabs.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from daogen.models import ColumnInfo
from daogen.type_mapping import required_import, simple_type_name, sql_type_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.fragments")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TAB: str = "\t"
MEMBER_INDENT: str = TAB
BODY_INDENT: str = TAB * 2
STATEMENT_INDENT: str = TAB * 3

# Variable names used by the accessor method templates.
DATA_VAR: str = "data"
PK_VAR: str = "pkData"
UNIQUE_VAR: str = "uniqueData"
INDEX_VAR: str = "indexData"


def escape_java_string(text: str) -> str:
    """Escape *text* for use inside a Java ``"..."`` literal."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _java_type(col: ColumnInfo) -> str:
    return simple_type_name(col.type_name)


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


def _qualified_imports(columns: Iterable[ColumnInfo]) -> List[str]:
    imports: Set[str] = set()
    for col in columns:
        qualified: Optional[str] = required_import(col.type_name)
        if qualified is not None:
            imports.add(qualified)
    return sorted(imports)


def _import_block(qualified: Sequence[str]) -> str:
    if not qualified:
        return ""
    return "\n".join(f"import {name};" for name in qualified) + "\n"


def pojo_imports(columns: Iterable[ColumnInfo]) -> str:
    """
    Sorted ``import`` lines for the non-``java.lang`` types of *columns*.

    Ends with a newline when non-empty, so the template can place it
    directly above a blank line.
    """
    return _import_block(_qualified_imports(columns))


def dao_imports(columns: Iterable[ColumnInfo]) -> str:
    """Like ``pojo_imports``, minus ``java.sql`` types (the DAO imports ``java.sql.*``)."""
    return _import_block(
        [name for name in _qualified_imports(columns) if not name.startswith("java.sql.")]
    )


# ---------------------------------------------------------------------------
# POJO members
# ---------------------------------------------------------------------------


def field_declarations(columns: Sequence[ColumnInfo]) -> str:
    return f"\n{MEMBER_INDENT}".join(
        f"private {_java_type(col)} {col.field_name};" for col in columns
    )


def constructor_params(columns: Sequence[ColumnInfo]) -> str:
    return ", ".join(f"{_java_type(col)} {col.field_name}" for col in columns)


def constructor_assignments(columns: Sequence[ColumnInfo]) -> str:
    return f"\n{BODY_INDENT}".join(
        f"this.{col.field_name} = {col.field_name};" for col in columns
    )


def getters_setters(columns: Sequence[ColumnInfo]) -> str:
    """A getter and a setter per column, separated by blank lines."""
    methods: List[str] = []
    for col in columns:
        java_type: str = _java_type(col)
        methods.append(
            f"public {java_type} get{col.accessor_suffix}() {{\n"
            f"{BODY_INDENT}return {col.field_name};\n"
            f"{MEMBER_INDENT}}}"
        )
        methods.append(
            f"public void set{col.accessor_suffix}({java_type} {col.field_name}) {{\n"
            f"{BODY_INDENT}this.{col.field_name} = {col.field_name};\n"
            f"{MEMBER_INDENT}}}"
        )
    return f"\n\n{MEMBER_INDENT}".join(methods)


def to_string_content(columns: Sequence[ColumnInfo]) -> str:
    """Body of ``toString()``: ``"a='" + a + '\\'' + ", " + ...``."""
    parts: List[str] = [
        f"\"{col.field_name}='\" + {col.field_name} + '\\''" for col in columns
    ]
    return f' + ", " +\n{BODY_INDENT}{TAB}'.join(parts)


# ---------------------------------------------------------------------------
# Accessor (DAO) pieces
# ---------------------------------------------------------------------------


def parameter_setting_lines(
    columns: Sequence[ColumnInfo], variable: str, start: int = 1
) -> List[str]:
    """
    ``pstmt.setObject(n, variable.getX());`` per column, numbered from *start*.
    """
    return [
        f"pstmt.setObject({position}, {variable}.get{col.accessor_suffix}());"
        for position, col in enumerate(columns, start=start)
    ]


def parameter_setting_block(
    columns: Sequence[ColumnInfo], variable: str, start: int = 1
) -> str:
    return f"\n{STATEMENT_INDENT}".join(parameter_setting_lines(columns, variable, start))


def update_parameter_block(
    set_columns: Sequence[ColumnInfo],
    key_columns: Sequence[ColumnInfo],
    variable: str = DATA_VAR,
) -> str:
    """SET parameters first, then WHERE parameters, numbered continuously."""
    set_lines: List[str] = parameter_setting_lines(set_columns, variable, 1)
    key_lines: List[str] = parameter_setting_lines(
        key_columns, variable, len(set_columns) + 1
    )
    separator: str = f"\n{STATEMENT_INDENT}"
    return separator.join(set_lines) + f"\n{separator}" + separator.join(key_lines)


def row_mapping_block(columns: Sequence[ColumnInfo], variable: str = DATA_VAR) -> str:
    """
    One ``setX(rs.getObject("col", Type.class))`` line per column.

    Each line ends with a comment naming the JDBC type it was derived from.
    """
    lines: List[str] = []
    for col in columns:
        lines.append(
            f"{variable}.set{col.accessor_suffix}("
            f"rs.getObject(\"{escape_java_string(col.db_name)}\", {_java_type(col)}.class));"
            f" // {sql_type_name(col.sql_type_code)} ({col.sql_type_code})"
        )
    return f"\n{BODY_INDENT}".join(lines)


def index_columns_list(columns: Sequence[ColumnInfo]) -> str:
    return ", ".join(col.db_name for col in columns)


def update_skipped_comment(table_name: str) -> str:
    return (
        f"\n{MEMBER_INDENT}// Note: Update method was not generated because table "
        f"'{table_name}' has no non-primary-key columns to update.\n"
    )


def pojo_values(
    package_name: str, class_name: str, columns: Sequence[ColumnInfo]
) -> Dict[str, str]:
    """Every value the ``pojo_class`` template expects."""
    return {
        "packageName": package_name,
        "className": class_name,
        "imports_block": pojo_imports(columns),
        "field_declarations": field_declarations(columns),
        "constructor_params": constructor_params(columns),
        "constructor_assignments": constructor_assignments(columns),
        "getters_setters": getters_setters(columns),
        "toString_content": to_string_content(columns),
    }


__all__: List[str] = [
    "DATA_VAR",
    "PK_VAR",
    "UNIQUE_VAR",
    "INDEX_VAR",
    "escape_java_string",
    "pojo_imports",
    "dao_imports",
    "field_declarations",
    "constructor_params",
    "constructor_assignments",
    "getters_setters",
    "to_string_content",
    "parameter_setting_lines",
    "parameter_setting_block",
    "update_parameter_block",
    "row_mapping_block",
    "index_columns_list",
    "update_skipped_comment",
    "pojo_values",
]
