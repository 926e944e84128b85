"""
Interactive review of commit suggestions.

See :mod:`commit_suggester.review.confirmation_flow` for the state
machine that reconciles heuristic and generative suggestions into the
accepted commit.
"""

from .confirmation_flow import ConfirmationFlow, FlowOutcome, FlowState  # noqa: F401
