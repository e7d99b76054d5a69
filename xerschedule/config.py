"""Configuration utilities for XER parsing and import."""
from __future__ import annotations

import codecs
import json
from pathlib import Path
from typing import Any, Dict

import yaml

from .codes import HOURS_PER_DAY


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be processed."""


_DEFAULTS: Dict[str, Any] = {
    "hours_per_day": HOURS_PER_DAY,
    "strict": False,
    "encoding": "utf-8",
    "max_upload_bytes": 50 * 1024 * 1024,
}


def default_config() -> Dict[str, Any]:
    return dict(_DEFAULTS)


def load_config(path: Path) -> Dict[str, Any]:
    """Load and validate a YAML or JSON configuration file."""
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigError("Unsupported configuration format. Use YAML or JSON.")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Configuration file could not be parsed: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping of keys to values.")

    unknown = sorted(key for key in data if key not in _DEFAULTS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    config = default_config()
    config.update(data)
    return validate_config(config)


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    try:
        hours = float(config["hours_per_day"])
        max_upload = int(config["max_upload_bytes"])
    except (TypeError, ValueError) as exc:
        raise ConfigError("hours_per_day and max_upload_bytes must be numeric.") from exc
    if hours <= 0:
        raise ConfigError("hours_per_day must be positive.")
    if max_upload <= 0:
        raise ConfigError("max_upload_bytes must be positive.")
    if not isinstance(config["strict"], bool):
        raise ConfigError("strict must be true or false.")

    encoding = str(config["encoding"])
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown text encoding: {encoding}") from exc

    config["hours_per_day"] = hours
    config["max_upload_bytes"] = max_upload
    config["encoding"] = encoding
    return config


__all__ = ["load_config", "default_config", "validate_config", "ConfigError"]
