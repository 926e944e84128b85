"""
Heuristic classification of staged changes.

This package maps a :class:`~commit_suggester.diff.intake.ChangeSummary`
to a conventional commit suggestion without any external calls. See
:mod:`commit_suggester.classify.change_classifier` and
:mod:`commit_suggester.classify.suggestion_model` for details.
"""

from .change_classifier import (  # noqa: F401
    classify_change,
    infer_message,
    infer_scope,
    infer_type,
    kebab_case,
)
from .suggestion_model import (  # noqa: F401
    COMMIT_TYPES,
    CommitSuggestion,
    format_commit_message,
    is_standard_type,
)
