"""Common inline keyboards for handlers."""

from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from poupazap.dialogue.states import MAIN_MENU_SENTINEL


def build_main_menu_keyboard() -> InlineKeyboardMarkup:
    """Return inline keyboard with a single button back to the main menu."""

    builder = InlineKeyboardBuilder()
    builder.button(text="🏠 Menu principal", callback_data=MAIN_MENU_SENTINEL)
    builder.adjust(1)
    return builder.as_markup()


__all__ = ["build_main_menu_keyboard"]
