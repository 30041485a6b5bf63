"""Handler for the /start command."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message

from poupazap.dialogue import MAIN_MENU_SENTINEL, Assistant

router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message, assistant: Assistant) -> None:
    """Greet the user and show the main menu."""

    if message.from_user is None:
        await message.answer("Não foi possível identificar o usuário.")
        return

    menu = await assistant.handle_text(message.from_user.id, MAIN_MENU_SENTINEL)
    await message.answer(f"Olá! Eu sou o PoupaZap, seu assistente financeiro. 👋\n\n{menu}")
