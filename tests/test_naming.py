"""
tests/test_naming.py
Unit tests for daogen.naming (class / field / method-suffix derivation).
"""

from __future__ import annotations

import pytest

from daogen.naming import (
    JAVA_RESERVED_WORDS,
    java_identifier,
    method_suffix,
    to_class_name,
    to_field_name,
)


class TestToClassName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("user_profile", "UserProfile"),
            ("COLUMN_NAME", "ColumnName"),
            ("customer", "Customer"),
            ("lastName", "Lastname"),
            ("a__b", "AB"),
            ("_leading", "Leading"),
            ("trailing_", "Trailing"),
        ],
    )
    def test_conversion(self, raw: str, expected: str) -> None:
        assert to_class_name(raw) == expected

    def test_empty_and_none_returned_unchanged(self) -> None:
        assert to_class_name("") == ""
        assert to_class_name(None) is None

    @pytest.mark.parametrize("raw", ["x", "user_id", "ORDER_LINE", "already"])
    def test_first_character_is_uppercase(self, raw: str) -> None:
        assert to_class_name(raw)[0].isupper()


class TestToFieldName:
    def test_lowercases_first_character(self) -> None:
        assert to_field_name("user_profile") == "userProfile"
        assert to_field_name("CUSTOMER_ID") == "customerId"

    def test_empty_and_none_returned_unchanged(self) -> None:
        assert to_field_name("") == ""
        assert to_field_name(None) is None

    @pytest.mark.parametrize("raw", ["X", "user_id", "ORDER_LINE"])
    def test_first_character_is_lowercase(self, raw: str) -> None:
        assert to_field_name(raw)[0].islower()


class TestMethodSuffix:
    def test_concatenates_in_order(self) -> None:
        assert method_suffix(["user_id", "email_address"]) == "UserIdEmailAddress"

    def test_order_matters(self) -> None:
        assert method_suffix(["b", "a"]) == "BA"

    def test_empty_sequence(self) -> None:
        assert method_suffix([]) == ""

    def test_none_and_none_entries(self) -> None:
        assert method_suffix(None) == ""
        assert method_suffix(["a", None, "b"]) == "AB"


class TestJavaIdentifier:
    def test_plain_column(self) -> None:
        assert java_identifier("order_date") == "orderDate"

    def test_reserved_word_gets_suffix(self) -> None:
        assert "class" in JAVA_RESERVED_WORDS
        assert java_identifier("class") == "classValue"
        assert java_identifier("PACKAGE") == "packageValue"

    def test_invalid_characters_dropped(self) -> None:
        assert java_identifier("unit price") == "unitprice"
        assert java_identifier("weight-kg") == "weightkg"

    def test_leading_digit_prefixed(self) -> None:
        assert java_identifier("2nd line") == "_2ndline"

    def test_nothing_left_falls_back(self) -> None:
        assert java_identifier("%%%") == "column"
