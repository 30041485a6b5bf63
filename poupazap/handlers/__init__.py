"""Telegram bot handlers forwarding messages into the assistant."""

from aiogram import Router

from . import messages, start


def setup_routers() -> Router:
    """Return a root router with all sub-routers included."""

    router = Router()
    router.include_router(start.router)
    router.include_router(messages.router)
    return router


__all__ = ["setup_routers"]
