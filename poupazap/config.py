"""Application configuration utilities.

This module loads and validates application configuration from environment
variables. It exposes a :func:`get_settings` helper that returns a cached
instance of :class:`Settings` with typed access to bot, assistant and logging
options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when mandatory configuration values are missing or invalid."""


@dataclass(slots=True)
class BotConfig:
    """Telegram bot related configuration."""

    token: str


@dataclass(slots=True)
class AssistantConfig:
    """Dialogue and language settings shared by every session."""

    locale: str
    default_categories: tuple[str, ...]


@dataclass(slots=True)
class LoggingConfig:
    """Logging related configuration settings."""

    level: str


@dataclass(slots=True)
class Settings:
    """Container for all application settings."""

    assistant: AssistantConfig
    logging: LoggingConfig


DEFAULT_LOCALE: Final[str] = "pt_BR"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CATEGORIES: Final[tuple[str, ...]] = (
    "Alimentação",
    "Transporte",
    "Moradia",
    "Lazer",
    "Saúde",
    "Educação",
    "Outros",
)


def load_bot_config() -> BotConfig:
    """Return Telegram settings, required only when the bot is started."""

    token = os.getenv("BOT_TOKEN")
    if not token:
        raise ConfigurationError("BOT_TOKEN environment variable is required")
    return BotConfig(token=token)


def _load_assistant_config() -> AssistantConfig:
    locale = os.getenv("LOCALE", DEFAULT_LOCALE)
    raw_categories = os.getenv("DEFAULT_CATEGORIES")
    if raw_categories is None:
        return AssistantConfig(locale=locale, default_categories=DEFAULT_CATEGORIES)

    categories = tuple(
        name.strip() for name in raw_categories.split(",") if name.strip()
    )
    if not categories:
        raise ConfigurationError("DEFAULT_CATEGORIES must list at least one category")
    return AssistantConfig(locale=locale, default_categories=categories)


def _load_logging_config() -> LoggingConfig:
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    return LoggingConfig(level=level)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings loaded from environment variables."""

    return Settings(
        assistant=_load_assistant_config(),
        logging=_load_logging_config(),
    )


__all__ = [
    "AssistantConfig",
    "BotConfig",
    "LoggingConfig",
    "Settings",
    "ConfigurationError",
    "DEFAULT_CATEGORIES",
    "get_settings",
    "load_bot_config",
]
