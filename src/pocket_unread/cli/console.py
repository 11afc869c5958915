"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of Rich so
bootstrap paths (``--help``, ``--version``) remain functional even when
Rich is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any


def _load_rich_console_class() -> type[Any] | None:
	"""Return ``rich.console.Console`` or ``None`` when Rich is missing."""
	try:
		from rich.console import Console
	except ModuleNotFoundError:
		return None
	return Console


def get_rich_console(*, stderr: bool = False) -> Any | None:
	"""Create a Rich console targeting stdout (or stderr)."""
	console_class = _load_rich_console_class()
	if console_class is None:
		return None
	return console_class(stderr=stderr, highlight=False)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object, soft_wrap: bool = False) -> None:
		"""Render with Rich when available, else plain stdout print.

		``soft_wrap`` keeps long lines (URLs) unbroken.
		"""
		rich_console = get_rich_console()
		if rich_console is None:
			print(*objects)
			return
		rich_console.print(*objects, soft_wrap=soft_wrap)


console = _ConsoleProxy()


def escape(text: str) -> str:
	"""Escape Rich markup in *text* so it is shown exactly as given."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		# Plain print does not interpret markup.
		return text
	return rich_escape(text)


def configure_logging(*, verbose: bool = False) -> None:
	"""Install a stderr log handler on the root logger.

	Uses :class:`rich.logging.RichHandler` when Rich is importable.
	"""
	level = logging.DEBUG if verbose else logging.WARNING
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError:
		logging.basicConfig(
			level=level,
			format="%(levelname)s %(name)s: %(message)s",
			stream=sys.stderr,
			force=True,
		)
		return

	logging.basicConfig(
		level=level,
		format="%(message)s",
		datefmt="[%X]",
		handlers=[
			RichHandler(
				console=get_rich_console(stderr=True),
				show_path=False,
				markup=False,
			),
		],
		force=True,
	)
