"""Handlers passing text, voice and menu buttons to the assistant."""

from __future__ import annotations

import logging

from aiogram import Bot, F, Router
from aiogram.types import CallbackQuery, Message

from poupazap.dialogue import MAIN_MENU_SENTINEL, Assistant
from poupazap.handlers.common import build_main_menu_keyboard
from poupazap.services import Transcriber

logger = logging.getLogger(__name__)

router = Router()

VOICE_UNAVAILABLE_TEXT = "🎙️ Mensagens de voz não estão disponíveis no momento."


@router.callback_query(F.data == MAIN_MENU_SENTINEL)
async def main_menu_requested(callback: CallbackQuery, assistant: Assistant) -> None:
    """Return to the main menu from any state."""

    if callback.message is None:
        await callback.answer()
        return

    reply = await assistant.handle_text(callback.from_user.id, MAIN_MENU_SENTINEL)
    await callback.message.answer(reply)
    await callback.answer()


@router.message(F.voice)
async def voice_received(
    message: Message,
    bot: Bot,
    assistant: Assistant,
    transcriber: Transcriber | None,
) -> None:
    """Transcribe a voice message and feed the text to the assistant."""

    if message.from_user is None or message.voice is None:
        return

    if transcriber is None:
        await message.answer(VOICE_UNAVAILABLE_TEXT)
        return

    transcript = await transcriber.transcribe(bot, message.voice)
    if transcript:
        logger.debug("Voice from %s transcribed: %s", message.from_user.id, transcript)
        await message.answer(f"🗣️ Entendi: {transcript}")

    reply = await assistant.handle_voice(message.from_user.id, transcript)
    await message.answer(reply, reply_markup=build_main_menu_keyboard())


@router.message(F.text)
async def text_received(message: Message, assistant: Assistant) -> None:
    """Handle any typed message according to the user's dialogue state."""

    if message.from_user is None:
        return

    reply = await assistant.handle_text(message.from_user.id, message.text or "")
    await message.answer(reply, reply_markup=build_main_menu_keyboard())
