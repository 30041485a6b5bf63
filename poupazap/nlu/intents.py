"""Recognizers for quick expense, quick income and goal creation messages.

Each parser is a pure function: it receives the raw text plus whatever user
context it needs (categories, registered cards) and returns a
:class:`ParsedIntent`. Parsers never raise on unrecognized input; they return
``ParsedIntent.failed()`` instead.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from poupazap.nlu.amounts import NUMBER_PATTERN, extract_amount, literal_to_decimal
from poupazap.nlu.categories import classify
from poupazap.nlu.locale import PT_BR, Locale
from poupazap.nlu.normalizer import normalize

if TYPE_CHECKING:  # pragma: no cover - typing only
    from poupazap.services.storage import CreditCard

EDGE_PUNCTUATION = re.compile(r"^[.,!?;:]+|[.,!?;:]+$")


class IntentType(str, enum.Enum):
    """Kinds of financial intent recognized in free text."""

    QUICK_EXPENSE = "quick_expense"
    QUICK_INCOME = "quick_income"
    CREATE_GOAL = "create_goal_intent"


@dataclass(slots=True)
class ParsedIntent:
    """Structured interpretation of one message."""

    success: bool
    type: IntentType | None = None
    amount: Decimal = Decimal(0)
    category: str | None = None
    description: str = ""
    card_id: int | None = None
    goal_name: str | None = None
    goal_months: int | None = None

    @classmethod
    def failed(cls) -> "ParsedIntent":
        return cls(success=False)


def _contains_keyword(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def _remove_words(text: str, words: Sequence[str]) -> str:
    for word in words:
        text = re.sub(rf"(?<!\w){re.escape(word)}(?!\w)", " ", text)
    return text


def _clean_remainder(text: str) -> str:
    """Collapse whitespace and strip leading/trailing punctuation."""

    collapsed = " ".join(text.split())
    return EDGE_PUNCTUATION.sub("", collapsed).strip()


def _strip_card(
    text: str, cards: Sequence["CreditCard"], locale: Locale
) -> tuple[str, int | None]:
    """Remove the first card mention found and return the card id."""

    prepositions = "|".join(re.escape(item) for item in locale.card_prepositions)
    for card in cards:
        nickname = normalize(card.nickname)
        if not nickname:
            continue
        pattern = re.compile(rf"(?<!\w)(?:{prepositions})\s+{re.escape(nickname)}(?!\w)")
        if pattern.search(text):
            return pattern.sub(" ", text, count=1), card.id
    return text, None


def parse_quick_expense(
    text: str,
    *,
    categories: Sequence[str],
    cards: Sequence["CreditCard"] = (),
    locale: Locale = PT_BR,
) -> ParsedIntent:
    """Recognize messages such as ``"gastei 50 reais no mercado"``."""

    normalized = normalize(text)
    if not _contains_keyword(normalized, locale.expense_keywords):
        return ParsedIntent.failed()

    amount_match = extract_amount(normalized)
    if amount_match is None or amount_match.amount <= 0:
        return ParsedIntent.failed()

    remaining = normalized.replace(amount_match.matched_string, " ", 1)
    remaining, card_id = _strip_card(remaining, cards, locale)

    description = _remove_words(
        remaining,
        (*locale.expense_keywords, *locale.filler_words, *locale.currency_words),
    )
    description = _clean_remainder(description)

    category = locale.default_category
    for word in description.split(" "):
        found = classify(word, categories, aliases=locale.category_aliases)
        if found:
            category = found
            break

    return ParsedIntent(
        success=True,
        type=IntentType.QUICK_EXPENSE,
        amount=amount_match.amount,
        category=category,
        description=description or category,
        card_id=card_id,
    )


def parse_quick_income(text: str, *, locale: Locale = PT_BR) -> ParsedIntent:
    """Recognize messages such as ``"recebi 1500 do salario"``."""

    normalized = normalize(text)
    if not _contains_keyword(normalized, locale.income_keywords):
        return ParsedIntent.failed()

    amount_match = extract_amount(normalized)
    if amount_match is None or amount_match.amount <= 0:
        return ParsedIntent.failed()

    remaining = normalized.replace(amount_match.matched_string, " ", 1)
    description = _remove_words(
        remaining, (*locale.income_keywords, *locale.currency_words)
    )
    description = _clean_remainder(description)

    return ParsedIntent(
        success=True,
        type=IntentType.QUICK_INCOME,
        amount=amount_match.amount,
        category=locale.income_category,
        description=description or locale.voice_income_label,
    )


def parse_create_goal(text: str, *, locale: Locale = PT_BR) -> ParsedIntent:
    """Recognize ``"criar meta viagem de 3000 em 6 meses"``.

    The duration clause is mandatory; the value clause defaults to zero so the
    dialogue can ask for it afterwards.
    """

    normalized = normalize(text)
    if not normalized.startswith(locale.goal_trigger):
        return ParsedIntent.failed()

    months_match = re.search(locale.goal_duration_pattern, normalized)
    if months_match is None:
        return ParsedIntent.failed()
    months = int(months_match.group(1))
    if months <= 0:
        return ParsedIntent.failed()

    prefixes = "|".join(re.escape(item) for item in locale.goal_value_prefixes)
    value_match = re.search(
        rf"(?<!\w)(?:{prefixes})\s*(?P<value>{NUMBER_PATTERN})(?!\d)", normalized
    )
    value = literal_to_decimal(value_match.group("value")) if value_match else Decimal(0)

    name = normalized[len(locale.goal_trigger) :]
    if value_match is not None:
        name = name.replace(value_match.group(0), " ", 1)
    name = _clean_remainder(name.replace(months_match.group(0), " ", 1))

    return ParsedIntent(
        success=True,
        type=IntentType.CREATE_GOAL,
        amount=value,
        goal_name=name or locale.default_goal_name,
        goal_months=months,
    )


def parse_intent(
    text: str,
    *,
    categories: Sequence[str],
    cards: Sequence["CreditCard"] = (),
    locale: Locale = PT_BR,
) -> ParsedIntent | None:
    """Run the parsers in priority order and return the first success.

    Expense is tried before income, and income before goal creation; messages
    carrying keywords of several kinds resolve by this order.
    """

    expense = parse_quick_expense(text, categories=categories, cards=cards, locale=locale)
    if expense.success:
        return expense

    income = parse_quick_income(text, locale=locale)
    if income.success:
        return income

    goal = parse_create_goal(text, locale=locale)
    if goal.success:
        return goal
    return None


__all__ = [
    "IntentType",
    "ParsedIntent",
    "parse_create_goal",
    "parse_intent",
    "parse_quick_expense",
    "parse_quick_income",
]
