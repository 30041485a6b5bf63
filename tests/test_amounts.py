"""Tests for amount extraction and currency parsing."""

from decimal import Decimal

import pytest

from poupazap.nlu import extract_amount, parse_currency_value


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        ("50", Decimal("50")),
        ("50,5", Decimal("50.5")),
        ("10.50", Decimal("10.50")),
        ("1.500", Decimal("1500")),
        ("1.234,56", Decimal("1234.56")),
        ("1,234.56", Decimal("1234.56")),
        ("12.345.678", Decimal("12345678")),
        ("2024", Decimal("2024")),
    ],
)
def test_separator_policy(literal, expected):
    match = extract_amount(f"paguei {literal} hoje")

    assert match is not None
    assert match.matched_string == literal
    assert match.amount == expected


@pytest.mark.parametrize(
    ("prefix", "literal", "suffix"),
    [
        ("gastei ", "35,90", " no almoco"),
        ("r$", "12", ""),
        ("", "99.99", " de mercado"),
        ("uma compra de ", "3.000", "."),
    ],
)
def test_matched_string_is_literal_substring(prefix, literal, suffix):
    text = f"{prefix}{literal}{suffix}"

    match = extract_amount(text)

    assert match is not None
    assert match.matched_string == literal
    assert match.matched_string in text


def test_first_amount_wins():
    match = extract_amount("paguei 10 pela comida e 5 de gorjeta")

    assert match is not None
    assert match.amount == Decimal("10")


@pytest.mark.parametrize("text", ["", "sem valor nenhum", "r$ ,"])
def test_no_amount(text):
    assert extract_amount(text) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("3000", Decimal("3000")),
        ("R$ 1.500,00", Decimal("1500.00")),
        (" 25,5 ", Decimal("25.5")),
        ("-10", Decimal("-10")),
        ("0", Decimal("0")),
    ],
)
def test_parse_currency_value(value, expected):
    assert parse_currency_value(value) == expected


@pytest.mark.parametrize("value", ["abc", "", "10 reais e 5", "12abc"])
def test_parse_currency_value_rejects_text(value):
    with pytest.raises(ValueError):
        parse_currency_value(value)


@pytest.mark.parametrize(
    "text",
    ["gastei " + "9" * 5000, "paguei " + "1" * 13 + " hoje"],
)
def test_oversized_numbers_are_not_amounts(text):
    assert extract_amount(text) is None


def test_oversized_reply_is_not_a_currency_value():
    with pytest.raises(ValueError):
        parse_currency_value("9" * 5000)
