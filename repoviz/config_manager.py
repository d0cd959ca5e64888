"""Configuration manager for repoviz using a TOML file."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

import toml

from .config import BASE_DIR, DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV
from .errors import ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE = BASE_DIR / "config.toml"

DEFAULT_ANALYSIS_CONFIG: Dict[str, Any] = {
    "exclude": [],
    "max_workers": 0,
    "log_level": DEFAULT_LOG_LEVEL,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_FILE, exc)
        return {}


def _save_full_config(config: Dict[str, Any]) -> None:
    """Write entire config dict to TOML file, preserving all sections."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        toml.dump(config, f)


def load_analysis_config() -> Dict[str, Any]:
    """Load the ``[analysis]`` section merged over the defaults.

    A value of the wrong type is logged and replaced by its default. The
    ``REPOVIZ_LOG_LEVEL`` environment variable overrides ``log_level``.
    """
    merged = dict(DEFAULT_ANALYSIS_CONFIG)
    section = load_full_config().get("analysis", {})
    if isinstance(section, dict):
        for key, value in section.items():
            if key not in DEFAULT_ANALYSIS_CONFIG:
                continue
            try:
                merged[key] = _checked_file_value(key, value)
            except ValidationError as exc:
                logger.warning(
                    "Ignoring [analysis] %s in %s: %s", key, CONFIG_FILE, exc.message,
                )
    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        merged["log_level"] = env_level
    merged["log_level"] = str(merged["log_level"]).upper()
    return merged


def _checked_file_value(key: str, value: Any) -> Any:
    if key == "exclude":
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            raise ValidationError(f"exclude must be a list of strings, got {value!r}")
        return list(value)
    if key == "max_workers":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"max_workers must be a non-negative integer, got {value!r}")
        return value
    if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
        raise ValidationError(f"Unknown log level {value!r}")
    return value.upper()


def coerce_setting(key: str, raw: str) -> Any:
    """Convert a command-line string into the type expected for *key*."""
    if key not in DEFAULT_ANALYSIS_CONFIG:
        raise ValidationError(
            f"Unknown setting '{key}'",
            details={"allowed": sorted(DEFAULT_ANALYSIS_CONFIG)},
        )
    if key == "exclude":
        patterns: List[str] = [p.strip() for p in raw.split(",") if p.strip()]
        return patterns
    if key == "max_workers":
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(f"max_workers must be an integer, got '{raw}'")
        if value < 0:
            raise ValidationError("max_workers must not be negative")
        return value
    level = raw.upper()
    if level not in LOG_LEVELS:
        raise ValidationError(f"Unknown log level '{raw}'", details={"allowed": list(LOG_LEVELS)})
    return level


def save_analysis_setting(key: str, raw: str) -> Any:
    """Persist one ``[analysis]`` setting, preserving other sections.

    Returns:
        The coerced value that was written.
    """
    value = coerce_setting(key, raw)
    config = load_full_config()
    section = config.get("analysis")
    if not isinstance(section, dict):
        section = {}
    section[key] = value
    config["analysis"] = section
    _save_full_config(config)
    return value
