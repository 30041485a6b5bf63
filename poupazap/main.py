"""Application entry point for the PoupaZap Telegram bot."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage

from poupazap.config import ConfigurationError, get_settings, load_bot_config
from poupazap.dialogue import Assistant, DialogueMachine
from poupazap.handlers import setup_routers
from poupazap.nlu import get_locale
from poupazap.services import InMemoryStorage

logger = logging.getLogger(__name__)


async def on_startup() -> tuple[Dispatcher, Bot]:
    """Configure application components and return dispatcher and bot."""

    settings = get_settings()

    logging.basicConfig(
        level=settings.logging.level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        locale = get_locale(settings.assistant.locale)
    except ValueError as error:
        raise ConfigurationError(str(error)) from error

    bot = Bot(token=load_bot_config().token)
    storage = MemoryStorage()
    dispatcher = Dispatcher(storage=storage)
    dispatcher.include_router(setup_routers())

    logger.warning("Using in-memory storage, records are lost on restart")
    machine = DialogueMachine(InMemoryStorage(), locale=locale)
    assistant = Assistant(
        machine,
        storage,
        default_categories=settings.assistant.default_categories,
        bot_id=bot.id,
    )

    dispatcher["settings"] = settings
    dispatcher["assistant"] = assistant
    dispatcher["transcriber"] = None

    return dispatcher, bot


async def main() -> None:
    """Run polling using the configured dispatcher and bot."""

    dispatcher, bot = await on_startup()

    try:
        logger.info("Starting PoupaZap bot polling")
        await dispatcher.start_polling(bot)
    finally:
        await dispatcher.storage.close()
        await bot.session.close()


def run() -> None:
    """Console script entry point."""

    try:
        asyncio.run(main())
    except ConfigurationError as error:
        logging.basicConfig(level=logging.ERROR)
        logging.error("Configuration error: %s", error)


if __name__ == "__main__":
    run()
