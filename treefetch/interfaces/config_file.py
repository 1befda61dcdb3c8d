"""
JSON config file providing fallback values for command line options.

Example ``~/.treefetch.json``::

    {"auth": "octocat:ghp_xxx", "alwaysUseAuth": false, "timeout": 10000}
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..infrastructure.error_handler import ConfigError
from ..infrastructure.logger import logger


DEFAULT_CONFIG_PATH = Path.home() / ".treefetch.json"

# config key -> (FetchOptions field, expected type)
CONFIG_KEYS = {
    "auth": ("auth", str),
    "alwaysUseAuth": ("always_use_auth", bool),
    "timeout": ("timeout", int),
}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the config file and return FetchOptions field values.

    A missing default file is not an error; a missing explicit file is.
    """

    explicit = path is not None
    path = Path(path).expanduser() if explicit else DEFAULT_CONFIG_PATH

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}", e) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    values: Dict[str, Any] = {}
    for key, (field_name, expected) in CONFIG_KEYS.items():
        value = data.get(key)
        if value is None:
            continue
        # bool is a subclass of int
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(f"'{key}' in {path} must be of type {expected.__name__}")
        values[field_name] = value

    logger.debug(f"Loaded {sorted(values)} from {path}")
    return values


def merge_options(cli_values: Dict[str, Any], config_values: Dict[str, Any]) -> Dict[str, Any]:
    """Command line values win; config values fill what was not given."""

    merged = dict(config_values)
    for key, value in cli_values.items():
        if value is None:
            continue
        if value is False and key in config_values:
            continue
        merged[key] = value
    return merged


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "merge_options",
]
