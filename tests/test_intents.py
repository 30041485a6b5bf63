"""Tests for the quick expense, quick income and goal parsers."""

from dataclasses import replace
from decimal import Decimal

import pytest

from poupazap.config import DEFAULT_CATEGORIES
from poupazap.nlu import (
    PT_BR,
    IntentType,
    extract_amount,
    normalize,
    parse_create_goal,
    parse_intent,
    parse_quick_expense,
    parse_quick_income,
)
from poupazap.services import CreditCard

CATEGORIES = list(DEFAULT_CATEGORIES)


class TestQuickExpense:
    """Tests for :func:`parse_quick_expense`."""

    def test_market_purchase(self):
        intent = parse_quick_expense("gastei 50 reais no mercado", categories=CATEGORIES)

        assert intent.success
        assert intent.type is IntentType.QUICK_EXPENSE
        assert intent.amount == Decimal("50")
        assert intent.category == "Alimentação"
        assert intent.description == "mercado"
        assert intent.card_id is None

    @pytest.mark.parametrize(
        "text",
        [
            "Gastei 35,90 no almoço",
            "paguei 1.200 de aluguel",
            "comprei um livro por 42.50",
            "uma compra de 7 na farmacia",
        ],
    )
    def test_amount_equals_matched_literal(self, text):
        intent = parse_quick_expense(text, categories=CATEGORIES)
        match = extract_amount(normalize(text))

        assert intent.success
        assert intent.amount == match.amount

    def test_classifies_first_matching_word(self):
        intent = parse_quick_expense("paguei 30 no uber para o cinema", categories=CATEGORIES)

        assert intent.category == "Transporte"
        assert intent.description == "uber o cinema"

    def test_default_category_and_description_fallback(self):
        intent = parse_quick_expense("gastei 50", categories=CATEGORIES)

        assert intent.category == PT_BR.default_category
        assert intent.description == PT_BR.default_category

    def test_card_nickname_is_matched_and_removed(self):
        cards = [CreditCard(id=3, nickname="Inter"), CreditCard(id=9, nickname="Nubank")]

        intent = parse_quick_expense(
            "paguei 120 no cartão nubank no mercado", categories=CATEGORIES, cards=cards
        )

        assert intent.card_id == 9
        assert intent.description == "mercado"

    def test_first_matching_card_wins(self):
        cards = [CreditCard(id=1, nickname="nu"), CreditCard(id=2, nickname="nu")]

        intent = parse_quick_expense("paguei 80 no nu", categories=CATEGORIES, cards=cards)

        assert intent.card_id == 1

    def test_requires_keyword(self):
        assert not parse_quick_expense("50 no mercado", categories=CATEGORIES).success

    def test_requires_amount(self):
        assert not parse_quick_expense("gastei muito no mercado", categories=CATEGORIES).success

    @pytest.mark.parametrize("text", ["gastei 0 no mercado", "paguei 0,00 no uber", "comprei 0.0 de pao"])
    def test_rejects_zero_amount(self, text):
        assert not parse_quick_expense(text, categories=CATEGORIES).success

    def test_empty_categories(self):
        intent = parse_quick_expense("gastei 10 no mercado", categories=[])

        assert intent.success
        assert intent.category == "Outros"


class TestQuickIncome:
    """Tests for :func:`parse_quick_income`."""

    def test_salary(self):
        intent = parse_quick_income("Recebi 1.500 de salário")

        assert intent.success
        assert intent.type is IntentType.QUICK_INCOME
        assert intent.amount == Decimal("1500")
        assert intent.description == "de salario"

    def test_fallback_label(self):
        intent = parse_quick_income("recebi 200 reais")

        assert intent.description == PT_BR.voice_income_label

    def test_pix(self):
        intent = parse_quick_income("pix de 75,50 do joao")

        assert intent.amount == Decimal("75.50")
        assert intent.description == "do joao"

    def test_requires_amount(self):
        assert not parse_quick_income("recebi um presente").success

    @pytest.mark.parametrize("text", ["recebi 0 reais", "ganhei 0,00 de bonus"])
    def test_rejects_zero_amount(self, text):
        assert not parse_quick_income(text).success


class TestCreateGoal:
    """Tests for :func:`parse_create_goal`."""

    def test_full_sentence(self):
        intent = parse_create_goal("Criar meta Viagem de 3.000 em 6 meses")

        assert intent.success
        assert intent.type is IntentType.CREATE_GOAL
        assert intent.goal_name == "viagem"
        assert intent.amount == Decimal("3000")
        assert intent.goal_months == 6

    def test_value_defaults_to_zero(self):
        intent = parse_create_goal("criar meta carro em 12 meses")

        assert intent.success
        assert intent.amount == Decimal("0")
        assert intent.goal_name == "carro"

    def test_default_name(self):
        intent = parse_create_goal("criar meta em 1 mes")

        assert intent.goal_name == PT_BR.default_goal_name
        assert intent.goal_months == 1

    @pytest.mark.parametrize(
        "text",
        [
            "criar meta",
            "criar meta viagem de 3000",
            "criar meta viagem com 5000 reais",
            "criar meta casa de 1000 em 0 meses",
        ],
    )
    def test_duration_is_required(self, text):
        assert not parse_create_goal(text).success

    def test_oversized_duration_is_ignored(self):
        assert not parse_create_goal("criar meta casa em " + "9" * 5000 + " meses").success

    def test_must_start_with_trigger(self):
        assert not parse_create_goal("quero criar meta viagem em 5 meses").success


class TestParseIntent:
    """Tests for parser ordering."""

    def test_expense_wins_over_income(self):
        intent = parse_intent("paguei 100 e recebi 50", categories=CATEGORIES)

        assert intent.type is IntentType.QUICK_EXPENSE
        assert intent.amount == Decimal("100")

    def test_income_wins_over_goal(self):
        intent = parse_intent("criar meta recebi 300 em 3 meses", categories=CATEGORIES)

        assert intent.type is IntentType.QUICK_INCOME

    def test_goal(self):
        intent = parse_intent("criar meta moto de 9000 em 18 meses", categories=CATEGORIES)

        assert intent.type is IntentType.CREATE_GOAL

    @pytest.mark.parametrize("text", ["", "oi, tudo bem?", "quanto sobrou esse mes", "50"])
    def test_all_parsers_fail_without_keywords(self, text):
        assert parse_intent(text, categories=CATEGORIES) is None
        assert not parse_quick_expense(text, categories=CATEGORIES).success
        assert not parse_quick_income(text).success
        assert not parse_create_goal(text).success

    def test_custom_locale(self):
        english = replace(
            PT_BR,
            name="en_US",
            expense_keywords=("spent", "paid"),
            filler_words=("on", "at", "for"),
            currency_words=("dollars", "bucks"),
            default_category="Other",
        )

        intent = parse_intent("Spent 12.50 dollars on lunch", categories=["Lunch"], locale=english)

        assert intent.type is IntentType.QUICK_EXPENSE
        assert intent.amount == Decimal("12.50")
        assert intent.category == "Lunch"
        assert intent.description == "lunch"
