"""
Generative commit suggestions.

This module provides the :class:`GenerativeSuggestionAdapter`, which
builds a prompt from a :class:`ChangeSummary`, asks the language model
for a JSON commit description, and parses the reply into a
:class:`CommitSuggestion`.

Model replies are not trusted to be well formed. Parsing runs an ordered
list of strategies and keeps the first that succeeds:

1. a reply wrapped entirely in a fenced code block is unwrapped and its
   first ``{...}`` object decoded;
2. the first ``{...}`` object anywhere in the reply is decoded;
3. each field is extracted with regular expressions, and any field that
   is still missing is taken from the heuristic suggestion.

Only a failure to reach the provider escapes this module, as
:class:`GenerativeUnavailable`.
"""

from __future__ import annotations

import json
import logging
import re
from textwrap import dedent
from typing import Any, Callable, Dict, List, Optional

from commit_suggester.classify.change_classifier import classify_change
from commit_suggester.classify.suggestion_model import COMMIT_TYPES, CommitSuggestion
from commit_suggester.diff.intake import ChangeSummary
from commit_suggester.llm.anthropic_client import AnthropicClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


MAX_DIFF_CHARS = 8000
TRUNCATION_MARKER = "\n... (truncated)"

# Defaults for fields missing or blank in an otherwise valid JSON reply.
FIELD_DEFAULTS = {"type": "feat", "scope": "", "message": "update code"}

FENCED_RE = re.compile(r"^\s*```[\w-]*[ \t]*\n?(.*?)\n?[ \t]*```\s*$", re.DOTALL)
FIELD_RES = {
    name: re.compile(
        rf"""["']?\b{name}\b["']?\s*[:=]\s*(?:"([^"\n]*)"|'([^'\n]*)'|{bare})""",
        re.IGNORECASE,
    )
    for name, bare in (
        ("type", r"([\w-]+)"),
        ("scope", r"([\w./-]+)"),
        ("message", r"([^\n,}]+)"),
    )
}
HEADER_RE = re.compile(
    r"^\s*[\"']?(" + "|".join(COMMIT_TYPES) + r")(?:\(([^)\n]*)\))?!?:\s*(\S.*?)[\"']?\s*$",
    re.MULTILINE,
)


def truncate_diff(diff_text: str, limit: int = MAX_DIFF_CHARS) -> str:
    """Cut ``diff_text`` to ``limit`` characters, marking the cut."""
    if len(diff_text) <= limit:
        return diff_text
    return diff_text[:limit] + TRUNCATION_MARKER


def first_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text``, or None.

    Braces inside JSON string literals are ignored when balancing.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        # Unbalanced from this brace on; try the next opening brace.
        start = text.find("{", start + 1)
    return None


def _field_value(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value).strip() or default


def _decode_suggestion(text: str) -> Optional[CommitSuggestion]:
    span = first_json_object(text)
    if span is None:
        return None
    try:
        data = json.loads(span)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return CommitSuggestion(
        **{name: _field_value(data.get(name), default) for name, default in FIELD_DEFAULTS.items()}
    )


class GenerativeSuggestionAdapter:
    """Produce commit suggestions with a language model."""

    def __init__(self, client: AnthropicClient, max_diff_chars: int = MAX_DIFF_CHARS) -> None:
        self.client = client
        self.max_diff_chars = max_diff_chars

    def build_prompt(self, summary: ChangeSummary) -> str:
        """Construct the prompt for ``summary``.

        The diff is truncated to ``max_diff_chars`` so that the same summary
        always yields the same prompt.
        """
        files = "\n".join(f"- {path}" for path in summary.files) or "(none)"
        diff = truncate_diff(summary.diff_text, self.max_diff_chars)
        header = dedent(
            f"""
            You are a commit message generator. Analyze the staged changes below
            and describe them as a conventional commit.

            Respond with ONLY a JSON object, no prose and no code fence:
            {{"type": "<type>", "scope": "<scope>", "message": "<message>"}}

            Rules:
            - "type" must be one of: {", ".join(COMMIT_TYPES)}
            - "scope" is a short lowercase module or component name, or "" if none fits
            - "message" uses the imperative mood, is lowercase, and stays under 60 characters
            - Focus on WHAT changed and WHY, not HOW

            Files changed:
            """
        ).strip()
        return (
            f"{header}\n{files}\n\n"
            f"Stats: +{summary.stats.additions} -{summary.stats.deletions}\n\n"
            f"Git diff:\n{diff}"
        )

    # ------------------------------------------------------------------
    # Response recovery
    # ------------------------------------------------------------------
    def _parse_fenced(self, raw: str, summary: ChangeSummary) -> Optional[CommitSuggestion]:
        match = FENCED_RE.match(raw)
        if not match:
            return None
        return _decode_suggestion(match.group(1))

    def _parse_embedded(self, raw: str, summary: ChangeSummary) -> Optional[CommitSuggestion]:
        return _decode_suggestion(raw)

    def _parse_fields(self, raw: str, summary: ChangeSummary) -> Optional[CommitSuggestion]:
        fields: Dict[str, str] = {}
        for name, pattern in FIELD_RES.items():
            match = pattern.search(raw)
            if match:
                value = next(group for group in match.groups() if group is not None)
                fields[name] = value.strip()
        header = HEADER_RE.search(raw)
        if header:
            fields.setdefault("type", header.group(1))
            if header.group(2) is not None:
                fields.setdefault("scope", header.group(2).strip())
            fields.setdefault("message", header.group(3))

        heuristic = classify_change(summary)
        if not fields:
            logger.warning("Could not parse model reply; using heuristic suggestion")
        return CommitSuggestion(
            type=fields.get("type") or heuristic.type,
            scope=fields.get("scope", heuristic.scope),
            message=fields.get("message") or heuristic.message,
        )

    def _strategies(self) -> List[Callable[[str, ChangeSummary], Optional[CommitSuggestion]]]:
        return [self._parse_fenced, self._parse_embedded, self._parse_fields]

    def parse_response(self, raw: str, summary: ChangeSummary) -> CommitSuggestion:
        """Parse a model reply, falling back to heuristics field by field.

        Never raises for malformed replies.
        """
        for strategy in self._strategies():
            suggestion = strategy(raw, summary)
            if suggestion is not None:
                logger.debug("Parsed model reply with %s", strategy.__name__)
                return suggestion
        # _parse_fields always answers; kept for type checkers.
        return classify_change(summary)

    def suggest(self, summary: ChangeSummary) -> CommitSuggestion:
        """Ask the model for a suggestion for ``summary``.

        Raises
        ------
        GenerativeUnavailable
            If the provider cannot be called.
        """
        prompt = self.build_prompt(summary)
        raw = self.client.generate(prompt)
        logger.debug("Model reply: %s", raw)
        return self.parse_response(raw, summary)
