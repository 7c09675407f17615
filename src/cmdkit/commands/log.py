"""CommandLog — the user-facing log sink handed to every command.

Four semantic levels only: info, warn, error and success.  There is no
debug level; verbosity is an ordinary flag a command declares itself.
Framework diagnostics go through ``logging`` instead.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.text import Text

from cmdkit.output.console import style_for_level

logger = logging.getLogger(__name__)

_SUCCESS_MARK = "✅"


def format_message(*values: Any) -> str:
    """Join values with a single space; non-strings are JSON-encoded."""
    parts: list[str] = []
    for value in values:
        if isinstance(value, str):
            parts.append(value)
        elif isinstance(value, BaseException):
            parts.append(str(value) or type(value).__name__)
        else:
            try:
                parts.append(json.dumps(value, default=str))
            except (TypeError, ValueError):
                parts.append(repr(value))
    return " ".join(parts)


class CommandLog:
    """Writes a command's output lines to a rich Console.

    Every line is also logged at DEBUG with the command key, so
    ``--verbose --log-json`` captures command output as well.
    """

    def __init__(self, console: Console, *, command_key: str = "") -> None:
        self.console = console
        self.command_key = command_key

    def info(self, *values: Any) -> None:
        self._write("info", values)

    def warn(self, *values: Any) -> None:
        self._write("warn", values)

    def error(self, *values: Any) -> None:
        self._write("error", values)

    def success(self, *values: Any) -> None:
        self._write("success", values)

    def _write(self, level: str, values: tuple[Any, ...]) -> None:
        message = format_message(*values)
        if level == "success":
            message = f"{_SUCCESS_MARK} {message}"
        self.console.print(Text(message, style=style_for_level(level)))
        logger.debug("command.log [%s] %s: %s", self.command_key, level, message)
