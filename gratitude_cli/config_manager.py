"""Configuration manager for Gratitude CLI using TOML files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

import toml

from . import config

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    records_endpoint: str = ""
    color_theme: str = config.DEFAULT_COLOR_THEME
    inactivity_seconds: float = config.DEFAULT_INACTIVITY_SECONDS
    dismiss_seconds: float = config.DEFAULT_DISMISS_SECONDS


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    Returns an empty dict when the file is missing or unreadable.
    """
    if not config.CONFIG_FILE.exists():
        return {}
    try:
        with open(config.CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Could not read %s: %s", config.CONFIG_FILE, exc)
        return {}


def _save_full_config(data: Dict[str, Any]) -> bool:
    """Write entire config dict to TOML file, preserving all sections."""
    config.ensure_base_dirs()
    try:
        with open(config.CONFIG_FILE, "w", encoding="utf-8") as f:
            toml.dump(data, f)
        return True
    except OSError as exc:
        logger.warning("Could not write %s: %s", config.CONFIG_FILE, exc)
        return False


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def load_settings() -> Settings:
    """Load settings, falling back to defaults for anything missing."""
    full = load_full_config()
    records = full.get("records", {})
    ui = full.get("ui", {})
    timers = full.get("timers", {})
    return Settings(
        records_endpoint=str(records.get("endpoint", "")),
        color_theme=str(ui.get("color_theme", config.DEFAULT_COLOR_THEME)),
        inactivity_seconds=_as_float(
            timers.get("inactivity_seconds"), config.DEFAULT_INACTIVITY_SECONDS
        ),
        dismiss_seconds=_as_float(timers.get("dismiss_seconds"), config.DEFAULT_DISMISS_SECONDS),
    )


def save_records_endpoint(endpoint: str) -> bool:
    """Save the HTTP endpoint records are posted to.

    An empty endpoint removes the ``[records]`` section, so records go to
    the local JSONL file again.
    """
    data = load_full_config()
    if endpoint:
        data["records"] = {"endpoint": endpoint}
    else:
        data.pop("records", None)
    return _save_full_config(data)


def save_color_theme(theme_name: str) -> bool:
    data = load_full_config()
    data.setdefault("ui", {})["color_theme"] = theme_name
    return _save_full_config(data)
