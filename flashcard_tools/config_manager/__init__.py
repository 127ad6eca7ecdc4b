"""High-level configuration management for flashcard-tools."""
from __future__ import annotations

from .constants import (
    CONF_DIR,
    DEFAULT_CACHE_KEY,
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DICTIONARY_KEY,
    DEFAULT_FLASHCARDS_KEY,
    DEFAULT_JISHO_API_BASE,
    DEFAULT_LOCAL_CONFIG_PATH,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from .loader import ConfigurationError, load_configuration
from .settings import EnvironmentOverrides, FlashcardToolsSettings, apply_settings_updates

__all__ = [
    "CONF_DIR",
    "ConfigurationError",
    "DEFAULT_CACHE_KEY",
    "DEFAULT_CACHE_TTL_MS",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DICTIONARY_KEY",
    "DEFAULT_FLASHCARDS_KEY",
    "DEFAULT_JISHO_API_BASE",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "EnvironmentOverrides",
    "FlashcardToolsSettings",
    "apply_settings_updates",
    "load_configuration",
]
