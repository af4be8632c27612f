"""
tests/test_fragments.py
Unit tests for daogen.fragments (Java source snippets).
"""

from __future__ import annotations

from typing import List

import pytest

from daogen.fragments import (
    constructor_assignments,
    constructor_params,
    dao_imports,
    escape_java_string,
    field_declarations,
    getters_setters,
    index_columns_list,
    parameter_setting_block,
    parameter_setting_lines,
    pojo_imports,
    pojo_values,
    row_mapping_block,
    to_string_content,
    update_parameter_block,
    update_skipped_comment,
)
from daogen.models import ColumnInfo
from daogen.type_mapping import SqlType


@pytest.fixture()
def columns() -> List[ColumnInfo]:
    return [
        ColumnInfo.from_database("customer_id", SqlType.INTEGER, True),
        ColumnInfo.from_database("balance", SqlType.DECIMAL),
        ColumnInfo.from_database("born_on", SqlType.DATE),
        ColumnInfo.from_database("last_seen", SqlType.TIMESTAMP),
    ]


class TestImports:
    def test_pojo_imports_sorted_and_unique(self, columns: List[ColumnInfo]) -> None:
        assert pojo_imports(columns + columns) == (
            "import java.math.BigDecimal;\n"
            "import java.sql.Date;\n"
            "import java.sql.Timestamp;\n"
        )

    def test_dao_imports_skip_java_sql(self, columns: List[ColumnInfo]) -> None:
        assert dao_imports(columns) == "import java.math.BigDecimal;\n"

    def test_no_imports(self) -> None:
        assert pojo_imports([ColumnInfo.from_database("name", SqlType.VARCHAR)]) == ""


class TestPojoMembers:
    def test_fields_use_simple_names(self, columns: List[ColumnInfo]) -> None:
        lines = field_declarations(columns).split("\n\t")
        assert lines == [
            "private Integer customerId;",
            "private BigDecimal balance;",
            "private Date bornOn;",
            "private Timestamp lastSeen;",
        ]

    def test_constructor(self, columns: List[ColumnInfo]) -> None:
        assert constructor_params(columns[:2]) == "Integer customerId, BigDecimal balance"
        assert constructor_assignments(columns[:2]) == (
            "this.customerId = customerId;\n\t\tthis.balance = balance;"
        )

    def test_getters_setters(self, columns: List[ColumnInfo]) -> None:
        text = getters_setters(columns[:1])
        assert "public Integer getCustomerid() {" in text
        assert "public void setCustomerid(Integer customerId) {" in text

    def test_to_string(self, columns: List[ColumnInfo]) -> None:
        text = to_string_content(columns[:2])
        assert "\"customerId='\" + customerId + '\\''" in text
        assert '+ ", " +' in text

    def test_pojo_values_keys(self, columns: List[ColumnInfo]) -> None:
        values = pojo_values("com.shop.model", "CustomerData", columns)
        assert values["packageName"] == "com.shop.model"
        assert values["className"] == "CustomerData"
        assert set(values) == {
            "packageName", "className", "imports_block", "field_declarations",
            "constructor_params", "constructor_assignments", "getters_setters",
            "toString_content",
        }


class TestBindingBlocks:
    def test_positions_start_at_one(self, columns: List[ColumnInfo]) -> None:
        assert parameter_setting_lines(columns[:2], "data") == [
            "pstmt.setObject(1, data.getCustomerid());",
            "pstmt.setObject(2, data.getBalance());",
        ]

    def test_block_indentation(self, columns: List[ColumnInfo]) -> None:
        assert parameter_setting_block(columns[:2], "pkData") == (
            "pstmt.setObject(1, pkData.getCustomerid());\n"
            "\t\t\tpstmt.setObject(2, pkData.getBalance());"
        )

    def test_update_numbering_continues(self, columns: List[ColumnInfo]) -> None:
        block = update_parameter_block(columns[1:3], columns[:1])
        lines = [line.strip() for line in block.split("\n") if line.strip()]
        assert lines == [
            "pstmt.setObject(1, data.getBalance());",
            "pstmt.setObject(2, data.getBornon());",
            "pstmt.setObject(3, data.getCustomerid());",
        ]
        assert "());\n\n\t\t\tpstmt.setObject(3," in block

    def test_row_mapping(self, columns: List[ColumnInfo]) -> None:
        lines = row_mapping_block(columns[:2]).split("\n\t\t")
        assert lines == [
            'data.setCustomerid(rs.getObject("customer_id", Integer.class)); // INTEGER (4)',
            'data.setBalance(rs.getObject("balance", BigDecimal.class)); // DECIMAL (3)',
        ]


class TestMisc:
    def test_escape_java_string(self) -> None:
        assert escape_java_string('a "b" \\ c\n') == 'a \\"b\\" \\\\ c\\n'

    def test_index_columns_list(self, columns: List[ColumnInfo]) -> None:
        assert index_columns_list(columns[:2]) == "customer_id, balance"

    def test_update_skipped_comment(self) -> None:
        comment = update_skipped_comment("link")
        assert "// Note: Update method was not generated" in comment
        assert "'link'" in comment
