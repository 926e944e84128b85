"""
Top-level package for commit_suggester.

This package exposes the main CLI entry point via the
``commit_suggester.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
