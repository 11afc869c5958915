"""CLI application entry point for pocket-unread.

This module is the **sole error boundary** for the entire application.
It catches :class:`~pocket_unread.exceptions.PocketUnreadError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  service and the infrastructure adapters.
* Flags are parsed once into an :class:`~pocket_unread.core.models.AppConfig`
  which is passed explicitly to the service.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from collections.abc import Callable
from pathlib import Path

from pocket_unread.cli import exit_codes
from pocket_unread.cli.console import configure_logging, console, escape
from pocket_unread.core.models import AppConfig
from pocket_unread.core.settings import DEFAULT_PORT
from pocket_unread.exceptions import PocketUnreadError
from pocket_unread.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="pocket-unread",
        description="Authenticate with Pocket and count your saved items.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Local port for the OAuth callback, must be > 1024 (default: {DEFAULT_PORT}).",
    )
    parser.add_argument(
        "--consumer-key",
        default=None,
        help="Consumer key of your Pocket app. Required unless already stored.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path of the credential file (default: per-user config directory).",
    )
    parser.add_argument(
        "--open-browser",
        action="store_true",
        help="Open the authorization page in the default browser.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging.",
    )
    return parser


def _build_config(args: argparse.Namespace) -> AppConfig:
    from pocket_unread.infra.credential_store import default_credentials_path

    return AppConfig(
        port=args.port,
        consumer_key=args.consumer_key,
        config_path=args.config or default_credentials_path(),
        open_browser=args.open_browser,
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _show_progress(message: str) -> None:
    console.print(message)


def _authorize_url_presenter(open_browser: bool) -> Callable[[str], None]:
    """Return the callback that shows the authorization URL to the user."""

    def present(url: str) -> None:
        console.print(f"Open {escape(url)}", soft_wrap=True)
        if open_browser:
            try:
                webbrowser.open(url)
            except webbrowser.Error as exc:
                logger.warning("Could not open a browser: %s", exc)

    return present


def _handle_count(config: AppConfig) -> int:
    """Run the handshake (if needed) and print the item count."""
    from pocket_unread.core.unread_service import UnreadCountService
    from pocket_unread.infra.callback_listener import CallbackListener
    from pocket_unread.infra.credential_store import JsonCredentialStore
    from pocket_unread.infra.pocket_client import PocketClient

    service = UnreadCountService(
        PocketClient(),
        JsonCredentialStore(config.config_path),
        CallbackListener,
        on_progress=_show_progress,
        on_authorize_url=_authorize_url_presenter(config.open_browser),
    )
    report = service.run(config)

    console.print(f"Total number of unread articles: {report.count}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the pocket-unread CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)
    return _handle_count(_build_config(args))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except PocketUnreadError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
