"""
Configuration loader for commit_suggester.

Settings for the generative provider are read from an optional JSON file
named ``config.json`` in the ``~/.ccommit/`` directory. Every key is
optional; missing keys take the defaults in :data:`DEFAULTS`. The API key
may also come from the ``ANTHROPIC_API_KEY`` environment variable, which
takes precedence over the file.

If the file exists but is malformed or has fields of the wrong type, a
:class:`ConfigError` is raised. A missing file is not an error, since the
heuristic mode needs no configuration at all.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where the root logger is not configured. The CLI configures logging
# explicitly when it runs.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


API_KEY_ENV = "ANTHROPIC_API_KEY"
CONFIG_FILE_NAME = "config.json"

DEFAULTS: Dict[str, Any] = {
    "api_key": None,
    "model": "claude-3-7-sonnet-20250219",
    "base_url": "https://api.anthropic.com",
    "request_timeout": 60.0,
    "max_tokens": 200,
    "max_diff_chars": 8000,
}


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the user configuration, ``~/.ccommit/``."""
    return Path.home() / ".ccommit"


def _validate(data: Dict[str, Any]) -> None:
    for key in ("api_key", "model", "base_url"):
        if key in data and data[key] is not None and not isinstance(data[key], str):
            raise ConfigError(f"'{key}' must be a string")
    if "request_timeout" in data and (
        isinstance(data["request_timeout"], bool)
        or not isinstance(data["request_timeout"], (int, float))
    ):
        raise ConfigError("'request_timeout' must be a number")
    if "request_timeout" in data and data["request_timeout"] <= 0:
        raise ConfigError("'request_timeout' must be positive")
    for key in ("max_tokens", "max_diff_chars"):
        if key in data and (isinstance(data[key], bool) or not isinstance(data[key], int)):
            raise ConfigError(f"'{key}' must be an integer")
        if key in data and data[key] <= 0:
            raise ConfigError(f"'{key}' must be positive")


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the configuration and return it merged over the defaults.

    Args:
        config_path: Explicit path to a JSON configuration file. Defaults
                     to ``~/.ccommit/config.json``.

    Returns:
        A dictionary with the keys of :data:`DEFAULTS`:
        - api_key (str or None): Anthropic API key
        - model (str): Model name
        - base_url (str): Base URL of the Anthropic API
        - request_timeout (float): Request timeout in seconds
        - max_tokens (int): Maximum tokens for the reply
        - max_diff_chars (int): Diff characters embedded in the prompt

    Raises:
        ConfigError: If the file exists but is malformed or invalid.
    """
    if config_path is None:
        config_path = _get_config_directory() / CONFIG_FILE_NAME

    data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            content = config_path.read_text(encoding="utf-8")
            data = json.loads(content)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to read or parse configuration file: %s", exc)
            raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path.name} must contain a JSON object")
        _validate(data)
        logger.debug("Loaded configuration from: %s", config_path)
    else:
        logger.debug("No configuration file at %s; using defaults", config_path)

    config = dict(DEFAULTS)
    config.update({key: value for key, value in data.items() if key in DEFAULTS})
    config["request_timeout"] = float(config["request_timeout"])

    env_key = os.environ.get(API_KEY_ENV)
    if env_key:
        config["api_key"] = env_key
    return config
