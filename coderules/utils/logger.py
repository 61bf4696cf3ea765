"""Rich-based logging setup and terminal output helpers for CodeRules."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

__all__ = [
    "console",
    "setup_logging",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "create_table",
]

_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "info": "bold cyan",
        "muted": "dim",
        "accent": "bold magenta",
    }
)

console = Console(theme=_THEME)


def setup_logging(verbose: bool = False) -> None:
    """Route ``coderules`` log records through a RichHandler on the shared console."""
    logger = logging.getLogger("coderules")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=console, show_path=verbose, rich_tracebacks=verbose, markup=False)
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def print_success(message: str) -> None:
    """Print a success message with a checkmark."""
    console.print(f"[success]✔[/success] {message}")


def print_warning(message: str) -> None:
    """Print a warning message with a caution sign."""
    console.print(f"[warning]⚠[/warning] {message}")


def print_error(message: str) -> None:
    """Print an error message with a cross."""
    console.print(f"[error]✖[/error] {message}")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[info]ℹ[/info] {message}")


def create_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
) -> Table:
    """Create a Rich table with the given columns and rows."""
    table = Table(title=title, show_lines=False, expand=True)
    for header, style in columns:
        table.add_column(header, style=style)
    for row in rows:
        table.add_row(*row)
    return table
