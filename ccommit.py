#!/usr/bin/env python
"""
Thin wrapper script to invoke the commit_suggester CLI.

Running ``python ccommit.py`` is equivalent to running the ``ccommit``
console script installed via ``pyproject.toml``.
"""

from commit_suggester.cli import main


if __name__ == "__main__":
    main(prog_name="ccommit")
