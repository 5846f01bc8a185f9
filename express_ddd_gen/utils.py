"""Shared console helpers for express-ddd-gen.

All user-facing output goes through one module-level Rich ``console``.
Debug messages are printed only after :func:`set_verbose` has been called
with ``True`` (the ``--verbose`` flag).
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

_verbose = False


def set_verbose(enabled: bool) -> None:
    """Turn debug output on or off for the rest of the process."""
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(message)


def print_debug(message: str) -> None:
    """Print a dim message, only in verbose mode."""
    if _verbose:
        console.print(f"[dim]{message}[/dim]")


def print_file_table(
    generated: Iterable[str],
    skipped: Iterable[str] = (),
    updated: Iterable[str] = (),
    title: str = "Files",
) -> None:
    """Print a two-column table of file paths and what happened to them.

    Args:
        generated: Paths written by this run.
        skipped: Paths that already existed and were left alone.
        updated: Shared wiring files that were patched.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Status", style="dim", no_wrap=True)
    table.add_column("Path")

    for path in generated:
        table.add_row("[green]created[/green]", path)
    for path in updated:
        table.add_row("[cyan]updated[/cyan]", path)
    for path in skipped:
        table.add_row("[yellow]skipped[/yellow]", path)

    if table.row_count:
        console.print(table)


def print_banner(message: str, success: bool) -> None:
    """Print the closing green (success) or red (failure) panel."""
    style = "green" if success else "red"
    console.print(Panel(f"[bold]{message}[/bold]", style=style))
