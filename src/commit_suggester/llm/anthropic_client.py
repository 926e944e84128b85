"""
Client for the Anthropic Messages API.

This client wraps a single HTTP request to the ``/v1/messages``
endpoint. It never retries. If no API key is configured, or the request
fails at the transport level, or the server answers with an error, a
:class:`GenerativeUnavailable` is raised.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


ANTHROPIC_VERSION = "2023-06-01"


class GenerativeUnavailable(Exception):
    """Raised when the generative provider cannot be called."""

    pass


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks such as ``<think>...</think>`` from a reply.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    """
    for tag in ("think", "thinking", "thought", "reasoning"):
        text = re.sub(rf"<{tag}>.*?</{tag}>", "", text, flags=re.DOTALL | re.IGNORECASE)
    return text.strip()


@dataclass
class AnthropicClient:
    """Client for the Anthropic Messages API.

    Parameters
    ----------
    api_key : str, optional
        The Anthropic API key. When missing, :meth:`generate` fails
        before any network traffic.
    model : str
        Model name, e.g. ``"claude-3-7-sonnet-20250219"``.
    base_url : str, optional
        Base URL of the API. Defaults to ``"https://api.anthropic.com"``.
    request_timeout : float, optional
        Timeout in seconds for the HTTP request. Defaults to 60 seconds.
    max_tokens : int, optional
        Maximum number of tokens in the reply.
    """

    api_key: Optional[str]
    model: str
    base_url: str = "https://api.anthropic.com"
    request_timeout: float = 60.0
    max_tokens: int = 200

    def _endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/v1/messages"

    def generate(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text.

        Raises
        ------
        GenerativeUnavailable
            If the API key is missing, the request fails, or the server
            returns an error or an unreadable envelope.
        """
        if not self.api_key:
            raise GenerativeUnavailable(
                "ANTHROPIC_API_KEY not found. Set it with: export ANTHROPIC_API_KEY=your_key_here"
            )

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        url = self._endpoint()
        logger.debug("Sending request to %s with model %s", url, self.model)
        try:
            response = requests.post(
                url,
                headers=headers,
                json=payload,
                timeout=self.request_timeout,
            )
        except (requests.RequestException, ValueError) as exc:
            logger.error("Failed to connect to Anthropic API: %s", exc)
            raise GenerativeUnavailable(str(exc)) from exc
        if response.status_code != 200:
            logger.error(
                "Anthropic API returned non-200 status %s: %s", response.status_code, response.text
            )
            raise GenerativeUnavailable(
                f"Anthropic API returned status {response.status_code}: {response.text}"
            )
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse Anthropic API response: %s", exc)
            raise GenerativeUnavailable("Failed to parse Anthropic API response") from exc

        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, list):
            raise GenerativeUnavailable("Unexpected response structure from Anthropic API")
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                return strip_thinking_tags(block.get("text") or "")
        # A reply without text is still a reply; the adapter recovers from it.
        return ""
