"""Intent extraction for free-text finance messages."""

from .amounts import AmountMatch, extract_amount, parse_currency_value
from .categories import classify
from .intents import (
    IntentType,
    ParsedIntent,
    parse_create_goal,
    parse_intent,
    parse_quick_expense,
    parse_quick_income,
)
from .locale import LOCALES, PT_BR, Locale, get_locale
from .normalizer import normalize

__all__ = [
    "AmountMatch",
    "IntentType",
    "LOCALES",
    "Locale",
    "PT_BR",
    "ParsedIntent",
    "classify",
    "extract_amount",
    "get_locale",
    "normalize",
    "parse_create_goal",
    "parse_currency_value",
    "parse_intent",
    "parse_quick_expense",
    "parse_quick_income",
]
