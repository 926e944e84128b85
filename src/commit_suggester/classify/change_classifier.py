"""
Heuristics for turning a staged change set into a commit suggestion.

The classifier infers a Conventional Commit type, scope and message from
the file names and diff text of a :class:`ChangeSummary`. It is
deterministic and makes no external calls, so it is always available as
the fallback when no language model is used or the model fails.

The type and message rules are ordered tables of ``(predicate, result)``
pairs evaluated top to bottom; the first matching rule wins.
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

from commit_suggester.classify.suggestion_model import CommitSuggestion
from commit_suggester.diff.intake import ChangeSummary


SOURCE_EXTENSION_RE = re.compile(r"(?:\.(?:ts|tsx|js|jsx|vue|py|go|rs|java))+$", re.IGNORECASE)
DECLARATION_RE = re.compile(r"^\+.*?(?:function|const|let|class|def|func)\s+(\w+)", re.MULTILINE)
CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")


def _any_path_contains(*needles: str) -> Callable[[ChangeSummary], bool]:
    def predicate(summary: ChangeSummary) -> bool:
        return any(needle in path for path in summary.files for needle in needles)

    return predicate


def _diff_mentions(*words: str) -> Callable[[ChangeSummary], bool]:
    def predicate(summary: ChangeSummary) -> bool:
        lowered = summary.diff_text.lower()
        return any(word in lowered for word in words)

    return predicate


def _diff_contains(marker: str) -> Callable[[ChangeSummary], bool]:
    def predicate(summary: ChangeSummary) -> bool:
        return marker in summary.diff_text

    return predicate


# File path signals outrank diff keywords, which outrank new/deleted file
# markers.
TYPE_RULES: Tuple[Tuple[Callable[[ChangeSummary], bool], str], ...] = (
    (_any_path_contains("test", "spec"), "test"),
    (_any_path_contains("README", ".md", "doc"), "docs"),
    (_any_path_contains("config", ".json", ".yml", ".yaml"), "chore"),
    (_diff_mentions("fix", "bug"), "fix"),
    (_diff_mentions("refactor", "rename"), "refactor"),
    (_diff_contains("new file mode"), "feat"),
    (_diff_contains("deleted file mode"), "refactor"),
)

DEFAULT_TYPE = "feat"


def infer_type(summary: ChangeSummary) -> str:
    """Return the commit type of the first matching rule in :data:`TYPE_RULES`."""
    for predicate, commit_type in TYPE_RULES:
        if predicate(summary):
            return commit_type
    return DEFAULT_TYPE


def strip_source_extension(name: str) -> str:
    return SOURCE_EXTENSION_RE.sub("", name)


def basename(path: str) -> str:
    """Last path segment without a known source extension."""
    return strip_source_extension(path.split("/")[-1])


def kebab_case(name: str) -> str:
    """Convert ``UserAuth.ts`` style names to ``user-auth``.

    Applying it to its own output returns the output unchanged.
    """
    return CAMEL_BOUNDARY_RE.sub(r"\1-\2", strip_source_extension(name)).lower()


def infer_scope(summary: ChangeSummary) -> str:
    """Derive the scope from the first staged file only.

    Files at the repository root (a single path segment) have no scope.
    """
    if not summary.files:
        return ""
    parts = summary.files[0].split("/")
    if len(parts) > 1:
        return kebab_case(parts[-1])
    return ""


def _declared_names(summary: ChangeSummary) -> List[str]:
    return DECLARATION_RE.findall(summary.diff_text)


def _single_file(summary: ChangeSummary) -> bool:
    return len(summary.files) == 1


def _first_basename(summary: ChangeSummary) -> str:
    return basename(summary.files[0]) if summary.files else ""


def _add_declaration(summary: ChangeSummary) -> str:
    name = _declared_names(summary)[0]
    target = _first_basename(summary)
    return f"add {name} to {target}" if target else f"add {name}"


MESSAGE_RULES: Tuple[Tuple[Callable[[ChangeSummary], bool], Callable[[ChangeSummary], str]], ...] = (
    (lambda s: bool(_declared_names(s)), _add_declaration),
    (
        lambda s: s.stats.additions > s.stats.deletions and _single_file(s),
        lambda s: f"add {_first_basename(s)}",
    ),
    (
        lambda s: s.stats.deletions > s.stats.additions and _single_file(s),
        lambda s: f"remove {_first_basename(s)}",
    ),
    (
        lambda s: s.stats.additions > 0 and s.stats.deletions > 0 and _single_file(s),
        lambda s: f"update {_first_basename(s)}",
    ),
    (_single_file, lambda s: f"update {_first_basename(s)}"),
)


def infer_message(summary: ChangeSummary) -> str:
    """Return the message built by the first matching rule in :data:`MESSAGE_RULES`."""
    for predicate, build in MESSAGE_RULES:
        if predicate(summary):
            return build(summary)
    return f"update {len(summary.files)} files"


def classify_change(summary: ChangeSummary) -> CommitSuggestion:
    """Classify a staged change set into a :class:`CommitSuggestion`.

    Parameters
    ----------
    summary : ChangeSummary
        The staged change set.

    Returns
    -------
    CommitSuggestion
        Heuristic type, scope and message. The same summary always yields
        the same suggestion.
    """
    return CommitSuggestion(
        type=infer_type(summary),
        scope=infer_scope(summary),
        message=infer_message(summary),
    )

