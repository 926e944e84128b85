"""
Language model integration for commit_suggester.

This package contains the :class:`AnthropicClient` for calling the
Anthropic Messages API and the :class:`GenerativeSuggestionAdapter`
which turns a change summary into a prompt and the model's reply back
into a commit suggestion.
"""

from .anthropic_client import AnthropicClient, GenerativeUnavailable  # noqa: F401
from .suggestion_adapter import GenerativeSuggestionAdapter  # noqa: F401
