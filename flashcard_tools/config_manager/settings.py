"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from flashcard_tools import logging_manager

from .constants import (
    DEFAULT_CACHE_KEY,
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_DICTIONARY_KEY,
    DEFAULT_FLASHCARDS_KEY,
    DEFAULT_JISHO_API_BASE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_STORAGE_RELATIVE,
    DEFAULT_USER_AGENT,
)

logger = logging_manager.get_logger().getChild("config")


class FlashcardToolsSettings(BaseModel):
    """Typed representation of the application configuration."""

    model_config = ConfigDict(extra="ignore")

    jisho_api_base: str = DEFAULT_JISHO_API_BASE
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    cache_ttl_ms: int = Field(default=DEFAULT_CACHE_TTL_MS, gt=0)
    cache_key: str = DEFAULT_CACHE_KEY
    dictionary_key: str = DEFAULT_DICTIONARY_KEY
    flashcards_key: str = DEFAULT_FLASHCARDS_KEY
    storage_path: str = str(DEFAULT_STORAGE_RELATIVE)
    serve_stale_on_error: bool = True
    log_file: Optional[str] = None
    debug: bool = False


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    jisho_api_base: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("JISHO_API_BASE", "FLASHCARD_JISHO_API_BASE"),
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("FLASHCARD_REQUEST_TIMEOUT", "FLASHCARD_REQUEST_TIMEOUT_SECONDS"),
    )
    cache_ttl_ms: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("FLASHCARD_CACHE_TTL_MS")
    )
    storage_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FLASHCARD_STORAGE_PATH", "FLASHCARD_STORAGE"),
    )
    serve_stale_on_error: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("FLASHCARD_SERVE_STALE_ON_ERROR")
    )
    log_file: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("FLASHCARD_LOG_FILE")
    )
    debug: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("FLASHCARD_DEBUG")
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def apply_settings_updates(
    settings: FlashcardToolsSettings, updates: Dict[str, Any]
) -> FlashcardToolsSettings:
    """Return a copy of ``settings`` updated with ``updates`` if any values exist."""

    if not updates:
        return settings
    return FlashcardToolsSettings.model_validate({**settings.model_dump(), **updates})


__all__ = [
    "EnvironmentOverrides",
    "FlashcardToolsSettings",
    "apply_settings_updates",
    "load_environment_overrides",
]
