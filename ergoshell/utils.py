"""Shared console helpers for ergoshell.

All user-facing output goes through the module-level Rich ``console`` so that
tests can capture it and the CLI renders consistently.
"""

from __future__ import annotations

import traceback

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(version: str, debug: bool = False) -> None:
    """Print the CLI greeting, flagging debug mode in the title."""
    title_suffix = " (Debug Mode)" if debug else ""
    console.print(f"[bold]Ergoshell v{version} CLI{title_suffix}[/bold]")
    console.print()


def print_info(message: str) -> None:
    """Print a plain progress message."""
    console.print(message, markup=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_exception(exc: BaseException) -> None:
    """Print an exception with its full traceback, dimmed below the message."""
    print_error(f"{type(exc).__name__}: {exc}")
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    console.print(tb, style="dim", markup=False)
