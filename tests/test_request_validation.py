"""Tests for request value parsing helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from utils.request_validation import normalize_email, parse_decimal, parse_float, parse_str


@pytest.mark.parametrize(
    "value, expected",
    [(None, ""), ("  Silk  ", "Silk"), ("", ""), (5, None), (["a"], None), ({"a": 1}, None)],
)
def test_parse_str(value, expected):
    assert parse_str(value) == expected


def test_parse_str_default_applies_only_when_absent():
    assert parse_str(None, default="Other") == "Other"
    assert parse_str("   ", default="Other") == ""


@pytest.mark.parametrize("value", ["1e400", "-1e400", "NaN", "Infinity", True, "abc", None])
def test_parse_float_rejects_non_finite_and_invalid(value):
    assert parse_float(value) is None


def test_parse_float_accepts_numbers_and_numeric_strings():
    assert parse_float("2.5") == 2.5
    assert parse_float(3) == 3.0


def test_parse_decimal_keeps_large_finite_values():
    assert parse_decimal("1e400") == Decimal("1e400")


def test_normalize_email_ignores_non_strings():
    assert normalize_email(123) == ""
    assert normalize_email("  Asha@Example.COM ") == "asha@example.com"
