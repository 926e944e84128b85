"""
Git client implementation for commit_suggester.

This module wraps the handful of Git operations the commit suggester
needs: reading the staged diff, the staged file list and the staged
numstat, and creating the final commit. All subprocess calls go through
``GitClient._run`` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class CommitExecutionError(GitError):
    """Raised when ``git commit`` itself fails.

    The message is Git's raw error output so that it can be shown to the
    user unchanged.
    """

    pass


class GitClient:
    """Client for reading staged changes from and committing to a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If Git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Failed to run Git: %s", exc)
            raise GitError(f"Failed to run git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Staged change set
    # ------------------------------------------------------------------
    def get_staged_diff(self) -> str:
        """Return the unified diff of everything currently staged."""
        return self._run(["diff", "--cached"]).stdout

    def get_staged_files(self) -> str:
        """Return the staged file paths, one per line."""
        return self._run(["diff", "--cached", "--name-only"]).stdout

    def get_staged_numstat(self) -> str:
        """Return ``<adds>\\t<deletes>\\t<path>`` lines for the staged files."""
        return self._run(["diff", "--cached", "--numstat"]).stdout

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------
    def commit(self, message: str) -> None:
        """Create a commit with the given message.

        Raises
        ------
        CommitExecutionError
            If Git cannot be started or ``git commit`` exits non-zero. The
            exception text is Git's own error output.
        """
        try:
            result = self._run(["commit", "-m", message], check=False)
        except GitError as exc:
            raise CommitExecutionError(str(exc)) from exc
        if result.returncode != 0:
            error = result.stderr.strip() or result.stdout.strip()
            logger.error("Git commit failed: %s", error)
            raise CommitExecutionError(error)
