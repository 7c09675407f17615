"""CommandParams — typed access to a command's validated args and flags.

Subclass it and add properties for a command's own parameters::

    class HelloParams(CommandParams):
        @property
        def name(self) -> str:
            return self.arg(0) or "world"
"""

from __future__ import annotations

from typing import Any

DRY_RUN_FLAGS = ("dry-run", "dry_run")


class CommandParams:
    def __init__(self, args: list[Any] | None = None, flags: dict[str, Any] | None = None) -> None:
        self._args = list(args or [])
        self._flags = dict(flags or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(args={self._args!r}, flags={self._flags!r})"

    @property
    def args(self) -> list[Any]:
        return list(self._args)

    @property
    def flags(self) -> dict[str, Any]:
        return dict(self._flags)

    def arg(self, index: int, default: Any = None) -> Any:
        """Positional argument at *index*, or *default* when absent or None."""
        if 0 <= index < len(self._args) and self._args[index] is not None:
            return self._args[index]
        return default

    def flag(self, name: str, default: Any = None) -> Any:
        """Flag value by name, or *default* when absent or None."""
        value = self._flags.get(name)
        return default if value is None else value

    @property
    def dry_run(self) -> bool:
        return any(bool(self._flags.get(name)) for name in DRY_RUN_FLAGS)
