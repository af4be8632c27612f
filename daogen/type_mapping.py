# File: daogen/type_mapping.py
"""
daogen - SQL Type Code → Java Type Mapping
===========================================

Column types travel through the pipeline as integer codes with the values of
``java.sql.Types`` (``SqlType``), whatever driver or SQLAlchemy dialect they
came from.  ``to_target_type`` turns such a code into the Java type name used
in generated fields, getters and row mappers.

Generated code always uses boxed / reference types (``Integer``, never
``int``): a column value may be SQL ``NULL`` and ``ResultSet.getObject``
returns ``null`` for it.

Unknown codes are not an error.  They map to ``Object`` and log one warning
on the ``daogen.type_mapping`` logger.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Dict, List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.type_mapping")


class SqlType(IntEnum):
    """Type codes, numerically identical to ``java.sql.Types``."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009
    REF_CURSOR = 2012
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014


# Fallback for codes missing from _TYPE_MAP.
FALLBACK_TYPE: str = "Object"

_TYPE_MAP: Dict[int, str] = {
    # Character / text
    SqlType.CHAR: "String",
    SqlType.VARCHAR: "String",
    SqlType.LONGVARCHAR: "String",
    SqlType.NCHAR: "String",
    SqlType.NVARCHAR: "String",
    SqlType.LONGNVARCHAR: "String",
    SqlType.CLOB: "String",
    SqlType.NCLOB: "String",
    SqlType.SQLXML: "String",
    # Integers (TINYINT / SMALLINT widened to Integer)
    SqlType.TINYINT: "Integer",
    SqlType.SMALLINT: "Integer",
    SqlType.INTEGER: "Integer",
    SqlType.BIGINT: "Long",
    # Approximate numerics
    SqlType.FLOAT: "Float",
    SqlType.REAL: "Float",
    SqlType.DOUBLE: "Double",
    # Exact numerics
    SqlType.DECIMAL: "java.math.BigDecimal",
    SqlType.NUMERIC: "java.math.BigDecimal",
    # Boolean (BIT(1) flags included)
    SqlType.BOOLEAN: "Boolean",
    SqlType.BIT: "Boolean",
    # Temporal; time-zone variants collapse onto the plain type
    SqlType.DATE: "java.sql.Date",
    SqlType.TIME: "java.sql.Time",
    SqlType.TIME_WITH_TIMEZONE: "java.sql.Time",
    SqlType.TIMESTAMP: "java.sql.Timestamp",
    SqlType.TIMESTAMP_WITH_TIMEZONE: "java.sql.Timestamp",
    # Binary
    SqlType.BINARY: "byte[]",
    SqlType.VARBINARY: "byte[]",
    SqlType.LONGVARBINARY: "byte[]",
    SqlType.BLOB: "byte[]",
}


def to_target_type(sql_type_code: int) -> str:
    """
    Return the Java type name for a ``java.sql.Types`` code.

    Examples:
        >>> to_target_type(SqlType.VARCHAR)
        'String'
        >>> to_target_type(SqlType.DECIMAL)
        'java.math.BigDecimal'
        >>> to_target_type(99999)
        'Object'
    """
    java_type: Optional[str] = _TYPE_MAP.get(sql_type_code)
    if java_type is not None:
        return java_type

    logger.warning(
        "Unmapped SQL type code %d (%s). Defaulting to '%s'.",
        sql_type_code,
        sql_type_name(sql_type_code),
        FALLBACK_TYPE,
    )
    return FALLBACK_TYPE


def sql_type_name(sql_type_code: int) -> str:
    """``12`` → ``"VARCHAR"``; codes outside ``SqlType`` give ``"UNKNOWN"``."""
    try:
        return SqlType(sql_type_code).name
    except ValueError:
        return "UNKNOWN"


def simple_type_name(java_type: str) -> str:
    """Strip the package: ``java.sql.Date`` → ``Date``."""
    return java_type.rsplit(".", 1)[-1]


def required_import(java_type: str) -> Optional[str]:
    """Fully-qualified name to import for *java_type*, or ``None``."""
    if "." not in java_type or java_type.startswith("java.lang."):
        return None
    return java_type


__all__: List[str] = [
    "SqlType",
    "FALLBACK_TYPE",
    "to_target_type",
    "sql_type_name",
    "simple_type_name",
    "required_import",
]
