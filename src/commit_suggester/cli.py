"""
Command line interface for the commit_suggester tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``ccommit`` command. It detects the repository,
loads configuration, reads the staged change set, runs the confirmation
flow, and finally creates the commit. Each failure class maps to its own
exit code.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import click

from commit_suggester import __version__
from commit_suggester.classify.suggestion_model import CommitSuggestion
from commit_suggester.config.loader import ConfigError, load_config
from commit_suggester.diff.intake import ChangeSummary, IntakeError, collect_change_summary
from commit_suggester.llm.anthropic_client import AnthropicClient
from commit_suggester.llm.suggestion_adapter import GenerativeSuggestionAdapter
from commit_suggester.review.confirmation_flow import ConfirmationFlow
from commit_suggester.vcs.git_client import CommitExecutionError, GitClient

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests). When logging is configured by
# the CLI, root handlers will be added and messages will propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_CANCELLED = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6

MAX_LISTED_FILES = 5


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Print a message on entry and the elapsed time on exit."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_change_summary(summary: ChangeSummary) -> None:
    """Show the staged files (at most five) and the line counts."""
    click.echo(f"\n📁 Files changed ({len(summary.files)}):")
    for path in summary.files[:MAX_LISTED_FILES]:
        click.echo(f"   {path}")
    if len(summary.files) > MAX_LISTED_FILES:
        click.echo(f"   ... and {len(summary.files) - MAX_LISTED_FILES} more")
    click.echo(f"   +{summary.stats.additions} -{summary.stats.deletions}\n")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def build_adapter(config: Dict[str, Any]) -> GenerativeSuggestionAdapter:
    """Create the generative adapter from a loaded configuration."""
    client = AnthropicClient(
        api_key=config.get("api_key"),
        model=config["model"],
        base_url=config["base_url"],
        request_timeout=float(config["request_timeout"]),
        max_tokens=config["max_tokens"],
    )
    return GenerativeSuggestionAdapter(client, max_diff_chars=config["max_diff_chars"])


def commit_suggestion(client: GitClient, suggestion: CommitSuggestion) -> None:
    """Commit the staged changes with the formatted suggestion.

    Raises
    ------
    CommitExecutionError
        With Git's error output if the commit fails.
    """
    message = suggestion.format()
    logger.debug("Committing with message: %s", message)
    client.commit(message)


@click.command()
@click.option("--ai", "use_ai", is_flag=True, help="Ask the Anthropic API for a suggestion first.")
@click.option("--yes", "yes", is_flag=True, help="Accept the suggestion without prompting.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Read settings from this JSON file instead of ~/.ccommit/config.json.",
)
@click.version_option(version=__version__, prog_name="ccommit")
def main(use_ai: bool, yes: bool, verbose: bool, config_path: Optional[Path]) -> None:
    """📝 Conventional commit assistant for staged Git changes.

    Suggests a type, scope and message from the staged diff, optionally
    asks an AI model, lets you adjust the result, and commits it.
    """
    # force=True so handlers are reconfigured on repeated invocations.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    try:
        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("Not a git repository")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        try:
            config = load_config(config_path)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        client = GitClient(repo_root)
        try:
            with ProgressIndicator("Reading staged changes"):
                summary = collect_change_summary(client)
        except IntakeError as exc:
            print_error(f"Could not read staged changes: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        if not summary.files:
            print_error("No staged changes. Use `git add` first.")
            raise click.exceptions.Exit(EXIT_NO_CHANGES)

        click.echo("\n📝 Creating conventional commit...")
        print_change_summary(summary)

        adapter = build_adapter(config) if use_ai else None
        flow = ConfirmationFlow(adapter=adapter, auto_accept=yes)
        outcome = flow.run(summary, use_generative=use_ai)

        if not outcome.accepted or outcome.suggestion is None:
            print_warning("Commit cancelled")
            raise click.exceptions.Exit(EXIT_CANCELLED)

        try:
            commit_suggestion(client, outcome.suggestion)
        except CommitExecutionError as exc:
            print_error(f"Git commit failed: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        print_success(f"Commit created successfully: {outcome.suggestion.format()}")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except click.exceptions.Abort:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
