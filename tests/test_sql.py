"""
tests/test_sql.py
Unit tests for daogen.sql (generated SQL statements).
"""

from __future__ import annotations

import pytest

from daogen.sql import (
    delete_statement,
    exists_statement,
    insert_statement,
    quote_identifier,
    select_statement,
    update_statement,
    where_clause,
)


class TestQuoting:
    def test_backticks_by_default(self) -> None:
        assert quote_identifier("order") == "`order`"

    def test_double_quotes(self) -> None:
        assert quote_identifier("user", '"') == '"user"'

    def test_embedded_quote_doubled(self) -> None:
        assert quote_identifier("we`ird") == "`we``ird`"
        assert quote_identifier('say "hi"', '"') == '"say ""hi"""'


class TestWhereClause:
    def test_and_joined_in_order(self) -> None:
        assert where_clause(["b", "a"]) == "`b` = ? AND `a` = ?"

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            where_clause([])


class TestStatements:
    def test_insert(self) -> None:
        assert (
            insert_statement("customer", ["customerId", "lastName"])
            == "INSERT INTO `customer` (`customerId`, `lastName`) VALUES (?, ?)"
        )

    def test_update_set_then_where(self) -> None:
        assert (
            update_statement("order_line", ["qty", "note"], ["order_id", "line_no"])
            == "UPDATE `order_line` SET `qty` = ?, `note` = ? "
            "WHERE `order_id` = ? AND `line_no` = ?"
        )

    def test_update_without_set_columns_rejected(self) -> None:
        with pytest.raises(ValueError):
            update_statement("t", [], ["id"])

    def test_delete(self) -> None:
        assert delete_statement("customer", ["customerId"]) == (
            "DELETE FROM `customer` WHERE `customerId` = ?"
        )

    def test_select_is_wildcard(self) -> None:
        assert select_statement("customer", ["lastName"]) == (
            "SELECT * FROM `customer` WHERE `lastName` = ?"
        )

    def test_exists_limits_to_one(self) -> None:
        assert exists_statement("customer", ["lastName"]) == (
            "SELECT 1 FROM `customer` WHERE `lastName` = ? LIMIT 1"
        )

    def test_ansi_quotes(self) -> None:
        assert select_statement("t", ["id"], '"') == 'SELECT * FROM "t" WHERE "id" = ?'
