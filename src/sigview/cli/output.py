"""
CLI Output Utilities

Query results go to stdout as plain lines; errors go to stderr.
"""

import typer
from rich.console import Console
from rich.markup import escape

# Console for error output
_err_console = Console(stderr=True, highlight=False)


def echo(message: str = "") -> None:
    """Write one line of query output to stdout."""
    typer.echo(message)


def print_error(message: str) -> None:
    """Print a fatal error on stderr."""
    _err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
