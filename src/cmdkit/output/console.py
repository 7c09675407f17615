"""Rich Console factory and theme for cmdkit output.

By default a Console renders to a StringIO buffer so tests and callers can
read it back with :func:`get_output`.  The entry point passes a real stream
(stdout) instead.  In non-TTY environments Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO
from typing import IO

from rich.console import Console
from rich.theme import Theme

CMDKIT_THEME = Theme(
    {
        "cmdkit.ok": "bold green",
        "cmdkit.error": "bold red",
        "cmdkit.warning": "bold yellow",
        "cmdkit.info": "default",
        "cmdkit.key": "bold cyan",
        "cmdkit.group": "bold blue",
        "cmdkit.title": "bold",
        "cmdkit.dim": "dim",
        "cmdkit.hint": "italic yellow",
    }
)

LEVEL_STYLES: dict[str, str] = {
    "info": "cmdkit.info",
    "warn": "cmdkit.warning",
    "error": "cmdkit.error",
    "success": "cmdkit.ok",
}


def create_console(
    *,
    no_color: bool = False,
    width: int | None = None,
    file: IO[str] | None = None,
) -> Console:
    """Create a themed Console.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for consistent test output).
        file: Stream to write to; a fresh StringIO buffer when omitted.
    """
    return Console(
        file=file if file is not None else StringIO(),
        theme=CMDKIT_THEME,
        no_color=no_color,
        highlight=False,
        soft_wrap=True,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_level(level: str) -> str:
    """Return the Rich style name for a log level."""
    return LEVEL_STYLES.get(level, "")
