"""
Aggregate the staged change set into a :class:`ChangeSummary`.

The summary is built from three facts reported by the version control
collaborator: the full staged diff, the staged file list and the
per-file numstat. It is created once per invocation and handed by value
to both the heuristic classifier and the generative adapter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Tuple

from commit_suggester.vcs.git_client import GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class IntakeError(Exception):
    """Raised when the staged change set cannot be read."""

    pass


class StagedChangeSource(Protocol):
    def get_staged_diff(self) -> str: ...

    def get_staged_files(self) -> str: ...

    def get_staged_numstat(self) -> str: ...


@dataclass(frozen=True)
class ChangeStats:
    """Line counts summed across all staged files."""

    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class ChangeSummary:
    """Snapshot of the staged change set.

    Attributes
    ----------
    files : Tuple[str, ...]
        Staged paths in the order reported by Git.
    diff_text : str
        The complete unified diff. Consumers may truncate their own copy.
    stats : ChangeStats
        Added and deleted line counts.
    """

    files: Tuple[str, ...] = ()
    diff_text: str = ""
    stats: ChangeStats = field(default_factory=ChangeStats)


def parse_file_list(text: str) -> List[str]:
    """Split newline-delimited paths, dropping blank entries."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _to_count(value: str) -> int:
    # Binary files report "-" for both counts.
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return 0


def parse_numstat(text: str) -> ChangeStats:
    """Sum ``git diff --numstat`` output into a :class:`ChangeStats`.

    Fields that are not integers count as zero; a malformed line never
    aborts the aggregation.
    """
    additions = 0
    deletions = 0
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        additions += _to_count(parts[0])
        if len(parts) > 1:
            deletions += _to_count(parts[1])
    return ChangeStats(additions=additions, deletions=deletions)


def collect_change_summary(source: StagedChangeSource) -> ChangeSummary:
    """Read the staged change set from ``source`` into one summary.

    The three collaborator calls are made one after another so that the
    result reflects a single snapshot.

    Raises
    ------
    IntakeError
        If any collaborator call fails.
    """
    try:
        diff_text = source.get_staged_diff()
        files_text = source.get_staged_files()
        numstat_text = source.get_staged_numstat()
    except (GitError, OSError) as exc:
        logger.error("Failed to read staged changes: %s", exc)
        raise IntakeError(str(exc)) from exc

    summary = ChangeSummary(
        files=tuple(parse_file_list(files_text)),
        diff_text=diff_text,
        stats=parse_numstat(numstat_text),
    )
    logger.debug(
        "Collected %d staged file(s), +%d -%d",
        len(summary.files),
        summary.stats.additions,
        summary.stats.deletions,
    )
    return summary
