"""
Configuration loading for commit_suggester.

Provides a loader for the optional user configuration file and the
``ANTHROPIC_API_KEY`` environment variable. See
:mod:`commit_suggester.config.loader` for implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
