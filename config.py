# config.py
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path.home() / ".habits-data.json"
DEFAULT_LOG_FILE = Path("logs") / "habit_tracker.log"
DEFAULT_REMINDER_INTERVAL = 10

_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the habit tracker"""
    data_file: Path = DEFAULT_DATA_FILE
    user_name: str = "User"
    reminder_interval: int = DEFAULT_REMINDER_INTERVAL
    demo_data: bool = True
    log_file: Path = DEFAULT_LOG_FILE
    log_level: str = "INFO"


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s=%r is not a number, using %d", key, raw, default)
        return default
    if value < 1:
        logger.warning("%s must be at least 1, using %d", key, default)
        return default
    return value


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def _env_log_level(key: str, default: str) -> str:
    raw = (os.environ.get(key) or default).strip().upper()
    if raw not in _LOG_LEVELS:
        logger.warning("%s=%r is not a log level, using %s", key, raw, default)
        return default
    return raw


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment, after loading a .env file if present."""
    load_dotenv(env_file)

    return Settings(
        data_file=Path(os.environ.get("HABIT_DATA_FILE") or DEFAULT_DATA_FILE).expanduser(),
        user_name=os.environ.get("HABIT_USER_NAME") or "User",
        reminder_interval=_env_int("HABIT_REMINDER_INTERVAL", DEFAULT_REMINDER_INTERVAL),
        demo_data=_env_bool("HABIT_DEMO_DATA", True),
        log_file=Path(os.environ.get("HABIT_LOG_FILE") or DEFAULT_LOG_FILE).expanduser(),
        log_level=_env_log_level("HABIT_LOG_LEVEL", "INFO"),
    )
