"""Shared constants for the configuration manager package."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
SCRIPT_DIR = MODULE_DIR.parents[1].resolve()
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

DEFAULT_JISHO_API_BASE = "https://jisho.org/api/v1/search/words"
DEFAULT_USER_AGENT = "flashcard-tools/1.0 (term lookup)"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0

# 30 days, expressed in milliseconds.
DEFAULT_CACHE_TTL_MS = 1000 * 60 * 60 * 24 * 30

DEFAULT_CACHE_KEY = "jisho_cache"
DEFAULT_DICTIONARY_KEY = "dictionary"
DEFAULT_FLASHCARDS_KEY = "flashcards"
DEFAULT_STORAGE_RELATIVE = Path("storage") / "flashcards.json"

__all__ = [
    "MODULE_DIR",
    "SCRIPT_DIR",
    "CONF_DIR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_JISHO_API_BASE",
    "DEFAULT_USER_AGENT",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_CACHE_TTL_MS",
    "DEFAULT_CACHE_KEY",
    "DEFAULT_DICTIONARY_KEY",
    "DEFAULT_FLASHCARDS_KEY",
    "DEFAULT_STORAGE_RELATIVE",
]
