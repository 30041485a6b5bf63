"""Speech-to-text collaborator contract."""

from __future__ import annotations

from typing import Protocol

from aiogram import Bot
from aiogram.types import Voice


class Transcriber(Protocol):
    """Turns a voice message into text.

    Implementations return ``None`` when recognition fails or times out; the
    dialogue only ever sees the resulting text.
    """

    async def transcribe(self, bot: Bot, voice: Voice) -> str | None:
        ...


__all__ = ["Transcriber"]
