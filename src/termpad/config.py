"""Persistent JSON settings.

Reads ``config.json`` from the platform user config directory. A missing or
malformed file, or a value of the wrong type, falls back to the defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .constants import TERMPAD_MESSAGE_TIMEOUT, TERMPAD_QUIT_TIMES

APP_NAME = "termpad"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_LEVEL_ENV = "TERMPAD_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "OFF")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    quit_times: int = TERMPAD_QUIT_TIMES
    message_timeout: float = TERMPAD_MESSAGE_TIMEOUT
    log_level: str = "WARNING"
    log_file: str | None = None


class ConfigError(ValueError):
    """The config file exists but cannot be read or parsed."""


def read_config(path: Path | None = None) -> dict[str, object]:
    """Read the config object; ``{}`` when the file is missing or not an object.

    Raises ``ConfigError`` for an unreadable or malformed file, so callers
    can report it once logging is in place.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the config object, or ``{}`` when it is missing or unreadable."""
    try:
        return read_config(path)
    except ConfigError as exc:
        logger.warning("ignoring unreadable config %s", exc)
        return {}


def _load_quit_times(data: dict[str, object]) -> int:
    value = data.get("quit_times")
    if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
        return value
    return TERMPAD_QUIT_TIMES


def _load_message_timeout(data: dict[str, object]) -> float:
    value = data.get("message_timeout")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return TERMPAD_MESSAGE_TIMEOUT


def _load_log_level(data: dict[str, object]) -> str:
    value = os.environ.get(LOG_LEVEL_ENV) or data.get("log_level")
    if isinstance(value, str) and value.upper() in LOG_LEVELS:
        return value.upper()
    return "WARNING"


def load_settings(data: dict[str, object] | None = None) -> Settings:
    if data is None:
        data = load_config()
    log_file = data.get("log_file")
    return Settings(
        quit_times=_load_quit_times(data),
        message_timeout=_load_message_timeout(data),
        log_level=_load_log_level(data),
        log_file=log_file if isinstance(log_file, str) and log_file else None,
    )
