"""
Reconcile heuristic and generative suggestions into one accepted commit.

The :class:`ConfirmationFlow` is a small state machine::

    INIT -> MAYBE_GENERATE -> PRESENT -> CUSTOMIZE -> CONFIRM -> ACCEPTED
                                 |                       |
                                 +--> ACCEPTED           +--> CANCELLED

The heuristic suggestion is always computed first and is the fallback
whenever the generative adapter is not requested or cannot be reached.
A generated suggestion may be accepted as is; otherwise the user can
override type, scope and message one at a time, and finally confirm or
cancel. Producer suggestions are never modified; overrides build a new
working copy.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

import click

from commit_suggester.classify.change_classifier import classify_change
from commit_suggester.classify.suggestion_model import (
    COMMIT_TYPES,
    CommitSuggestion,
    is_standard_type,
)
from commit_suggester.diff.intake import ChangeSummary
from commit_suggester.llm.anthropic_client import GenerativeUnavailable
from commit_suggester.llm.suggestion_adapter import GenerativeSuggestionAdapter


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class FlowState(enum.Enum):
    INIT = "init"
    MAYBE_GENERATE = "maybe_generate"
    PRESENT = "present"
    CUSTOMIZE = "customize"
    CONFIRM = "confirm"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"


TERMINAL_STATES = (FlowState.ACCEPTED, FlowState.CANCELLED)


@dataclass(frozen=True)
class FlowOutcome:
    """Result of a confirmation flow.

    ``suggestion`` is the accepted triple, or None when cancelled.
    ``generated`` tells whether the model produced the presented suggestion.
    """

    state: FlowState
    suggestion: Optional[CommitSuggestion]
    generated: bool = False

    @property
    def accepted(self) -> bool:
        return self.state is FlowState.ACCEPTED


def _declined(answer: str) -> bool:
    return answer.strip().lower() == "n"


class ConfirmationFlow:
    """Drive the suggestion review for one change summary.

    Parameters
    ----------
    adapter : GenerativeSuggestionAdapter, optional
        Source of generative suggestions. Without one, generative mode
        falls back to the heuristic suggestion.
    prompt : callable, optional
        Reads one line of user input; defaults to :func:`click.prompt`.
    echo : callable, optional
        Writes one line of output; defaults to :func:`click.echo`.
    auto_accept : bool, optional
        Accept the presented suggestion without asking.
    """

    def __init__(
        self,
        adapter: Optional[GenerativeSuggestionAdapter] = None,
        prompt: Callable[..., str] = click.prompt,
        echo: Callable[[str], None] = click.echo,
        auto_accept: bool = False,
    ) -> None:
        self.adapter = adapter
        self.prompt = prompt
        self.echo = echo
        self.auto_accept = auto_accept
        self._handlers: Dict[FlowState, Callable[[], FlowState]] = {
            FlowState.INIT: self._init,
            FlowState.MAYBE_GENERATE: self._maybe_generate,
            FlowState.PRESENT: self._present,
            FlowState.CUSTOMIZE: self._customize,
            FlowState.CONFIRM: self._confirm,
        }
        self._reset(ChangeSummary(), False)

    def _reset(self, summary: ChangeSummary, use_generative: bool) -> None:
        self.summary = summary
        self.use_generative = use_generative
        self.heuristic: Optional[CommitSuggestion] = None
        self.generated: Optional[CommitSuggestion] = None
        self.current: Optional[CommitSuggestion] = None
        self.working: Optional[CommitSuggestion] = None

    def _ask(self, text: str) -> str:
        return self.prompt(text, default="", show_default=False)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------
    def _init(self) -> FlowState:
        self.heuristic = classify_change(self.summary)
        self.current = self.heuristic
        logger.debug("Heuristic suggestion: %s", self.heuristic.format())
        if self.use_generative:
            return FlowState.MAYBE_GENERATE
        return FlowState.PRESENT

    def _maybe_generate(self) -> FlowState:
        if self.adapter is None:
            self.echo("⚠ AI generation is not configured")
            self.echo("Falling back to local suggestions")
            return FlowState.PRESENT
        self.echo("🤖 Analyzing changes with AI...")
        try:
            self.generated = self.adapter.suggest(self.summary)
        except GenerativeUnavailable as exc:
            logger.warning("AI generation failed: %s", exc)
            self.echo(f"⚠ AI generation failed: {exc}")
            self.echo("Falling back to local suggestions")
            return FlowState.PRESENT
        self.current = self.generated
        return FlowState.PRESENT

    def _present(self) -> FlowState:
        assert self.current is not None
        if self.auto_accept:
            self.echo(f"✨ Suggested: {self.current.format()}")
            self.working = self.current
            return FlowState.ACCEPTED
        if self.generated is None:
            return FlowState.CUSTOMIZE
        self.echo(f"✨ Suggested: {self.current.format()}")
        if _declined(self._ask("Accept this commit? (Y/n)")):
            self.echo("✏️  Let's customize the commit...")
            return FlowState.CUSTOMIZE
        self.working = self.current
        return FlowState.ACCEPTED

    def _customize(self) -> FlowState:
        base = self.current
        assert base is not None
        self.echo(f"Suggested type: {base.type}")
        self.echo(f"Available: {', '.join(COMMIT_TYPES)}")
        commit_type = self._ask("Commit type (press Enter for suggestion)").strip() or base.type
        if not is_standard_type(commit_type):
            logger.warning("Non-standard commit type: %s", commit_type)
            self.echo(f"⚠ Warning: '{commit_type}' is not a standard conventional commit type")

        scope_hint = f" (suggested: {base.scope})" if base.scope else ""
        scope = self._ask(f"Scope{scope_hint} (optional)").strip() or base.scope

        if self.generated is None:
            self.echo(f"Suggested message: {base.message}")
        message = self._ask("Commit message (press Enter for suggestion)").strip() or base.message

        self.working = replace(base, type=commit_type, scope=scope, message=message)
        return FlowState.CONFIRM

    def _confirm(self) -> FlowState:
        assert self.working is not None
        self.echo(f"📋 Preview: {self.working.format()}")
        if _declined(self._ask("Proceed? (Y/n)")):
            return FlowState.CANCELLED
        return FlowState.ACCEPTED

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------
    def run(self, summary: ChangeSummary, use_generative: bool = False) -> FlowOutcome:
        """Run the flow to a terminal state.

        Parameters
        ----------
        summary : ChangeSummary
            The staged change set to describe.
        use_generative : bool
            Ask the generative adapter for a suggestion first.

        Returns
        -------
        FlowOutcome
            ``ACCEPTED`` with the final triple, or ``CANCELLED`` with none.
        """
        self._reset(summary, use_generative)
        state = FlowState.INIT
        while state not in TERMINAL_STATES:
            logger.debug("Confirmation flow state: %s", state.value)
            state = self._handlers[state]()
        suggestion = self.working if state is FlowState.ACCEPTED else None
        return FlowOutcome(state=state, suggestion=suggestion, generated=self.generated is not None)
