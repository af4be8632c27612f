"""
tests/test_type_mapping.py
Unit tests for daogen.type_mapping.
"""

from __future__ import annotations

import logging

import pytest

from daogen.type_mapping import (
    FALLBACK_TYPE,
    SqlType,
    required_import,
    simple_type_name,
    sql_type_name,
    to_target_type,
)


class TestToTargetType:
    @pytest.mark.parametrize(
        "code, expected",
        [
            (SqlType.VARCHAR, "String"),
            (SqlType.CHAR, "String"),
            (SqlType.LONGNVARCHAR, "String"),
            (SqlType.CLOB, "String"),
            (SqlType.TINYINT, "Integer"),
            (SqlType.SMALLINT, "Integer"),
            (SqlType.INTEGER, "Integer"),
            (SqlType.BIGINT, "Long"),
            (SqlType.REAL, "Float"),
            (SqlType.FLOAT, "Float"),
            (SqlType.DOUBLE, "Double"),
            (SqlType.DECIMAL, "java.math.BigDecimal"),
            (SqlType.NUMERIC, "java.math.BigDecimal"),
            (SqlType.BOOLEAN, "Boolean"),
            (SqlType.BIT, "Boolean"),
            (SqlType.DATE, "java.sql.Date"),
            (SqlType.TIME, "java.sql.Time"),
            (SqlType.TIMESTAMP, "java.sql.Timestamp"),
            (SqlType.BLOB, "byte[]"),
            (SqlType.VARBINARY, "byte[]"),
        ],
    )
    def test_known_codes(self, code: int, expected: str) -> None:
        assert to_target_type(code) == expected

    def test_plain_int_codes_accepted(self) -> None:
        assert to_target_type(12) == "String"
        assert to_target_type(4) == "Integer"

    def test_timezone_variants_collapse(self) -> None:
        assert to_target_type(SqlType.TIMESTAMP_WITH_TIMEZONE) == to_target_type(SqlType.TIMESTAMP)
        assert to_target_type(SqlType.TIME_WITH_TIMEZONE) == to_target_type(SqlType.TIME)

    def test_never_primitive(self) -> None:
        primitives = {"int", "long", "float", "double", "boolean", "short", "byte"}
        for code in SqlType:
            assert to_target_type(code) not in primitives

    def test_deterministic(self) -> None:
        assert to_target_type(SqlType.DECIMAL) == to_target_type(SqlType.DECIMAL)

    def test_unknown_code_falls_back_with_one_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="daogen.type_mapping"):
            result = to_target_type(99999)

        assert result == FALLBACK_TYPE == "Object"
        records = [r for r in caplog.records if r.name == "daogen.type_mapping"]
        assert len(records) == 1
        assert "99999" in records[0].getMessage()

    def test_known_code_emits_no_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="daogen.type_mapping"):
            to_target_type(SqlType.INTEGER)
        assert not [r for r in caplog.records if r.name == "daogen.type_mapping"]


class TestHelpers:
    def test_sql_type_name(self) -> None:
        assert sql_type_name(12) == "VARCHAR"
        assert sql_type_name(424242) == "UNKNOWN"

    def test_simple_type_name(self) -> None:
        assert simple_type_name("java.sql.Date") == "Date"
        assert simple_type_name("String") == "String"

    def test_required_import(self) -> None:
        assert required_import("java.math.BigDecimal") == "java.math.BigDecimal"
        assert required_import("String") is None
        assert required_import("byte[]") is None
        assert required_import("java.lang.Object") is None
