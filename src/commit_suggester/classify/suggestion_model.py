"""
Data model for commit suggestions.

A :class:`CommitSuggestion` is the ``(type, scope, message)`` triple that
both the heuristic classifier and the generative adapter produce, and
that the confirmation flow eventually accepts.
"""

from __future__ import annotations

from dataclasses import dataclass


COMMIT_TYPES = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
)


def is_standard_type(commit_type: str) -> bool:
    """Return True if ``commit_type`` is one of :data:`COMMIT_TYPES`."""
    return commit_type in COMMIT_TYPES


def format_commit_message(commit_type: str, scope: str, message: str) -> str:
    """Render ``type(scope): message``, or ``type: message`` without a scope."""
    if scope:
        return f"{commit_type}({scope}): {message}"
    return f"{commit_type}: {message}"


@dataclass(frozen=True)
class CommitSuggestion:
    """A proposed conventional commit.

    Attributes
    ----------
    type : str
        The conventional commit type. Values outside
        :data:`COMMIT_TYPES` are allowed.
    scope : str
        Optional scope; the empty string means no scope.
    message : str
        Short description of the change.
    """

    type: str
    scope: str
    message: str

    def format(self) -> str:
        return format_commit_message(self.type, self.scope, self.message)
