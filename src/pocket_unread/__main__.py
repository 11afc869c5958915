"""Allow ``python -m pocket_unread`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m pocket_unread`` behaves identically to the
``pocket-unread`` console script.
"""

from __future__ import annotations

from pocket_unread.cli.app import cli

if __name__ == "__main__":
    cli()
