"""
Version control system (VCS) integration.

This package contains the Git client used to read the staged change set
(diff text, file list, numstat) and to execute the final commit.
"""

from .git_client import CommitExecutionError, GitClient, GitError  # noqa: F401
