"""Centralized Rich Console management.

Provides a singleton Rich Console instance shared by the CLI commands.
"""

from rich.console import Console

_console: Console | None = None
_err_console: Console | None = None


def get_console() -> Console:
    """Get or create the global Rich Console instance.

    Returns:
        Console: The global Rich Console instance
    """
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_err_console() -> Console:
    """Get or create the Rich Console bound to stderr."""
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True)
    return _err_console


def safe_print(message: str, style: str | None = None) -> None:
    """Print using Rich Console with optional styling.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_console()
    if style:
        console.print(message, style=style)
    else:
        console.print(message)


def print_error(message: str) -> None:
    """Print an error message to stderr in red."""
    get_err_console().print(message, style="bold red")
