"""Configuration loading utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from flashcard_tools import logging_manager
from flashcard_tools.environment import load_environment

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_CONFIG_PATH
from .settings import (
    FlashcardToolsSettings,
    apply_settings_updates,
    load_environment_overrides,
)

logger = logging_manager.get_logger().getChild("config")


class ConfigurationError(RuntimeError):
    """Raised when a configuration file cannot be turned into settings."""


def _read_config_json(path: Optional[Path], label: str = "configuration") -> Dict[str, Any]:
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        logger.debug("No %s found at %s.", label, path)
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Error loading %s from %s: %s. Proceeding without it.", label, path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s at %s: expected a JSON object.", label, path)
        return {}
    logger.debug("Loaded %s from %s", label, path)
    return data


def _deep_merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def load_configuration(
    config_file: Optional[Union[str, Path]] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> FlashcardToolsSettings:
    """Load the layered configuration.

    Layers, lowest precedence first: built-in defaults, ``conf/config.json``,
    ``config_file`` (or ``conf/config.local.json``), environment variables,
    then explicit ``overrides``.
    """

    load_environment()

    payload = _read_config_json(DEFAULT_CONFIG_PATH, label="default configuration")

    if config_file:
        override_path = Path(config_file).expanduser()
        if not override_path.is_absolute():
            override_path = (Path.cwd() / override_path).resolve()
    else:
        override_path = DEFAULT_LOCAL_CONFIG_PATH
    payload = _deep_merge_dict(payload, _read_config_json(override_path, label="local configuration"))

    try:
        settings = FlashcardToolsSettings.model_validate(payload)
        settings = apply_settings_updates(settings, load_environment_overrides())
        settings = apply_settings_updates(
            settings, {k: v for k, v in (overrides or {}).items() if v is not None}
        )
    except ValidationError as exc:
        raise ConfigurationError("Invalid configuration detected") from exc

    return settings


__all__ = [
    "ConfigurationError",
    "load_configuration",
]
