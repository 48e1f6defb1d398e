"""
Console output helpers for heyi.

Results go to stdout untouched; errors, questions and logs go to a Rich
console on stderr.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


_err_console: Optional[Console] = None


def get_err_console() -> Console:
    """Get the shared stderr console."""
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True)
    return _err_console


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """
    Configure the root logger.

    Args:
        verbose: Log at DEBUG instead of WARNING
        console: Console to log to (defaults to the stderr console)
    """
    handler = RichHandler(
        console=console or get_err_console(),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def format_error(error: BaseException) -> list[str]:
    """
    Describe an exception and its chain of causes.

    Args:
        error: The exception raised

    Returns:
        One line for the error, then one per cause
    """
    lines = [str(error) or type(error).__name__]
    cause = error.__cause__
    while cause is not None:
        text = str(cause) or type(cause).__name__
        if text not in lines[-1]:
            lines.append(f"Caused by: {text}")
        cause = cause.__cause__
    return lines


def print_error(error: BaseException, console: Optional[Console] = None) -> None:
    """Print an error and its causes to the stderr console."""
    console = console or get_err_console()
    first, *causes = format_error(error)
    console.print(f"[bold red]Error:[/bold red] {escape(first)}", highlight=False)
    for line in causes:
        console.print(f"  [dim]{escape(line)}[/dim]", highlight=False)
