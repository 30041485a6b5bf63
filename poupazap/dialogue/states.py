"""Finite set of dialogue states a session can be in."""

from __future__ import annotations

import enum
from typing import Final

# Callback data of the "main menu" button; always returns to the menu.
MAIN_MENU_SENTINEL: Final[str] = "nav_menu_principal"


class DialogueState(str, enum.Enum):
    """States of the per-user conversation. The value is what gets persisted."""

    MENU = "menu"
    SELECTING_REPORT = "selecting_report"
    MANAGING_FINANCES = "managing_finances"
    MANUAL_ENTRY = "manual_entry"
    AWAITING_NEXT_ENTRY = "awaiting_next_entry"
    ADDING_INCOME = "adding_income"
    AWAITING_EXPENSE_DESCRIPTION = "awaiting_expense_description"
    SETTING_BUDGET = "setting_budget"
    ADDING_GOAL = "adding_goal"
    CONFIRM_QUICK_EXPENSE = "confirm_quick_expense"
    CONFIRM_QUICK_INCOME = "confirm_quick_income"
    ADDING_GOAL_ASK_VALUE_FROM_VOICE = "adding_goal_ask_value_from_voice"
    CONFIRM_VOICE_GOAL = "confirm_voice_goal"
    SELECTING_CATEGORY = "selecting_category"
    ADDING_EXPENSE = "adding_expense"
    AWAITING_SCHEDULED_DAY = "awaiting_scheduled_day"
    MANAGING_CARDS = "managing_cards"
    ADDING_CARD = "adding_card"
    REMOVING_CARD = "removing_card"

    @classmethod
    def parse(cls, value: str | None) -> "DialogueState | None":
        """Return the state called ``value`` or ``None`` for unknown names."""

        try:
            return cls(value)
        except ValueError:
            return None


INITIAL_STATE: Final[DialogueState] = DialogueState.MENU

__all__ = ["DialogueState", "INITIAL_STATE", "MAIN_MENU_SENTINEL"]
