"""Error taxonomy for cmdkit.

Configuration errors are fatal and raised at merge/build time.  Resolution
and validation problems never raise here: the resolver and validator return
structured results instead.  Exceptions from a command's own phases are
caught once, at the lifecycle boundary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdkit.validation.types import ValidationResult


class CommandKitError(Exception):
    """Base class for every error cmdkit raises itself."""


class ConfigurationError(CommandKitError):
    """The CLI or a command is configured in a way that cannot run."""


class DuplicateCommandKeyError(ConfigurationError):
    """Two filesystem command sources contribute the same key."""

    def __init__(self, key: str, first: str, second: str) -> None:
        self.key = key
        self.first = first
        self.second = second
        super().__init__(
            f"Duplicate command key '{key}' detected.\n"
            f"  - First defined in: {first}\n"
            f"  - Also defined in: {second}\n"
            "\nPlease ensure each command key is unique across all command sources."
        )


class CommandBuildError(ConfigurationError):
    """A fluent command builder is missing required configuration."""


class ConfigNotFoundError(ConfigurationError):
    """No CLI config file could be located."""


class InvalidConfigError(ConfigurationError):
    """A CLI config file exists but cannot be parsed or validated."""


class CommandLoadError(CommandKitError):
    """A command module file could not be imported or exposes no module."""


class ValidationFailedError(CommandKitError):
    """Raised when validation rejects an invocation before any phase runs."""

    def __init__(self, result: ValidationResult, message: str) -> None:
        self.result = result
        super().__init__(message)


class CommandProcessError(CommandKitError):
    """An external process started by a command exited non-zero."""

    def __init__(self, argv: list[str], returncode: int) -> None:
        self.argv = argv
        self.returncode = returncode
        super().__init__(f"{argv[0] if argv else 'process'} failed with exit code {returncode}")
