"""Entry point of the conversational core for any transport.

:class:`Assistant` loads the user's session from an aiogram FSM storage,
runs one message through the :class:`~poupazap.dialogue.machine.DialogueMachine`
and saves the session again. Messages of the same user are processed one at a
time; different users proceed concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Sequence

from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import BaseStorage, StorageKey

from poupazap.dialogue.machine import DialogueMachine
from poupazap.dialogue.session import Session
from poupazap.dialogue.states import MAIN_MENU_SENTINEL
from poupazap.nlu.normalizer import normalize

logger = logging.getLogger(__name__)

VOICE_NOT_UNDERSTOOD_TEXT = "🎙️ Não consegui entender o áudio. Pode repetir ou escrever?"


class Assistant:
    """Serializes turns per session and persists session state between them."""

    def __init__(
        self,
        machine: DialogueMachine,
        storage: BaseStorage,
        *,
        default_categories: Sequence[str],
        bot_id: int = 0,
    ) -> None:
        self._machine = machine
        self._storage = storage
        self._default_categories = tuple(default_categories)
        self._bot_id = bot_id
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def handle_text(self, session_id: int, text: str) -> str:
        """Process a typed message or button payload and return the reply."""

        command = self._to_command(text)
        async with self._locks[session_id]:
            session = await self.load_session(session_id)
            reply = await self._machine.process_command(session, command)
            await self.save_session(session)
        return reply

    async def handle_voice(self, session_id: int, transcript: str | None) -> str:
        """Process the text recognized from a voice message.

        ``None`` or blank transcripts mean transcription failed; the session
        is left untouched in that case.
        """

        if not transcript or not transcript.strip():
            logger.info("Empty transcription for session %s", session_id)
            return VOICE_NOT_UNDERSTOOD_TEXT

        async with self._locks[session_id]:
            session = await self.load_session(session_id)
            reply = await self._machine.process_voice(session, transcript)
            await self.save_session(session)
        return reply

    async def load_session(self, session_id: int) -> Session:
        """Return the stored session, creating a fresh one on first contact."""

        context = self._context(session_id)
        state = await context.get_state()
        data = await context.get_data()
        return Session.from_data(
            session_id,
            state=state,
            data=data,
            default_categories=self._default_categories,
        )

    async def save_session(self, session: Session) -> None:
        context = self._context(session.id)
        await context.set_state(session.current_state)
        await context.set_data(session.to_data())

    def _context(self, session_id: int) -> FSMContext:
        key = StorageKey(bot_id=self._bot_id, chat_id=session_id, user_id=session_id)
        return FSMContext(storage=self._storage, key=key)

    def _to_command(self, text: str) -> str:
        """Translate typed "menu" style words into the main-menu sentinel."""

        if normalize(text) in self._machine.locale.menu_words:
            return MAIN_MENU_SENTINEL
        return text or ""


__all__ = ["Assistant", "VOICE_NOT_UNDERSTOOD_TEXT"]
