"""Utilities for locating and parsing currency amounts in user messages."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from poupazap.nlu.normalizer import normalize

# Grouped thousands are tried first so that ``1.500`` reads as 1500 and not 1.50.
# Digit runs are bounded so every amount quantizes within the default decimal context.
NUMBER_PATTERN = r"\d{1,3}(?:[.,]\d{3}){1,4}(?:[.,]\d{1,2})?|\d{1,12}(?:[.,]\d{1,2})?"
AMOUNT_PATTERN = re.compile(rf"(?<!\d)(?P<amount>{NUMBER_PATTERN})(?!\d)")
CURRENCY_VALUE_PATTERN = re.compile(rf"(?P<sign>[+-]?)\s*(?P<amount>{NUMBER_PATTERN})")
CURRENCY_SYMBOL = "r$"


@dataclass(slots=True, frozen=True)
class AmountMatch:
    """Amount found in a text together with the literal substring it came from."""

    amount: Decimal
    matched_string: str


def literal_to_decimal(literal: str) -> Decimal:
    """Convert a numeric literal using the trailing-fraction separator policy.

    The final ``.`` or ``,`` is a decimal point only when it is followed by one
    or two digits; every other separator groups thousands.
    """

    last_separator = max(literal.rfind("."), literal.rfind(","))
    if last_separator == -1:
        return Decimal(literal)

    integer_part = re.sub(r"[.,]", "", literal[:last_separator])
    tail = literal[last_separator + 1 :]
    if 1 <= len(tail) <= 2:
        return Decimal(f"{integer_part or '0'}.{tail}")
    return Decimal(f"{integer_part}{tail}")


def extract_amount(text: str) -> AmountMatch | None:
    """Return the first amount found in ``text`` or ``None``.

    Only the first numeric token is considered, so ``"paguei 10 e 5"`` yields
    10 regardless of context.
    """

    match = AMOUNT_PATTERN.search(text or "")
    if match is None:
        return None

    literal = match.group("amount")
    try:
        amount = literal_to_decimal(literal)
    except InvalidOperation:  # pragma: no cover - pattern only admits digits
        return None
    return AmountMatch(amount=amount, matched_string=literal)


def parse_currency_value(value: str) -> Decimal:
    """Parse a whole reply such as ``"R$ 1.500,00"`` into a Decimal.

    Raises
    ------
    ValueError
        If the reply is not a single numeric value.
    """

    cleaned = normalize(value).replace(CURRENCY_SYMBOL, " ").strip()
    match = CURRENCY_VALUE_PATTERN.fullmatch(cleaned)
    if match is None:
        raise ValueError(f"{value!r} is not a currency value")

    amount = literal_to_decimal(match.group("amount"))
    if match.group("sign") == "-":
        amount = -amount
    return amount


__all__ = [
    "AmountMatch",
    "AMOUNT_PATTERN",
    "NUMBER_PATTERN",
    "extract_amount",
    "literal_to_decimal",
    "parse_currency_value",
]
