"""
Diff intake for commit_suggester.

Collects the staged diff, file list and numstat from a Git client into a
single immutable :class:`ChangeSummary`. See
:mod:`commit_suggester.diff.intake` for details.
"""

from .intake import (  # noqa: F401
    ChangeStats,
    ChangeSummary,
    IntakeError,
    collect_change_summary,
    parse_file_list,
    parse_numstat,
)
