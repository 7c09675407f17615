"""Pydantic models for the CLI config file (``.cli.toml`` / ``.cli.json``).

Sparse contract: only ``name`` and ``tokens`` are required; everything else
has a code-baked default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_COMMANDS_PATH = "./commands"


class CommandSource(BaseModel):
    """Where to find command files, and an optional key prefix."""

    model_config = {"frozen": True}

    path: str
    root: str | None = None

    def describe(self) -> str:
        """Label used in duplicate-key errors."""
        return f"{self.path} (root: {self.root})" if self.root else self.path

    def resolved(self, base: Path | None) -> CommandSource:
        """Resolve a relative path against *base* (the config file's directory)."""
        p = Path(self.path).expanduser()
        if base is not None and not p.is_absolute():
            p = base / p
        return self.model_copy(update={"path": str(p)})


class RuntimeConfig(BaseModel):
    """``[runtime]`` table: defaults for the runtime settings."""

    model_config = {"frozen": True}

    verbose: bool = False
    log_json: bool = False
    no_color: bool = False


class CLIConfig(BaseModel):
    """Root CLI configuration.

    Attributes:
        name: Friendly CLI name shown in logs and help.
        tokens: Executable names/aliases; the first one is used in usage lines.
        version: Version shown in help.
        description: Intro text for root help.
        commands: One path, a list of paths, or a list of ``{path, root}``
            tables.  Defaults to ``./commands``.
        plugins: Directory scanned for single-file local plugins.
        runtime: Defaults for verbose/log_json/no_color.
    """

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    tokens: list[str] = Field(min_length=1)
    version: str = "0.0.0"
    description: str | None = None
    commands: str | list[str | CommandSource] | None = None
    plugins: str | None = None
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    @field_validator("tokens")
    @classmethod
    def _tokens_not_blank(cls, tokens: list[str]) -> list[str]:
        if any(not t.strip() for t in tokens):
            raise ValueError("tokens must not be blank")
        return tokens

    @property
    def token(self) -> str:
        return self.tokens[0]

    def command_sources(self) -> list[CommandSource]:
        return normalize_command_sources(self.commands)


def normalize_command_sources(commands: Any) -> list[CommandSource]:
    """Normalize the ``commands`` setting into a list of CommandSource."""
    if commands is None:
        return [CommandSource(path=DEFAULT_COMMANDS_PATH)]
    if isinstance(commands, str):
        return [CommandSource(path=commands)]

    sources: list[CommandSource] = []
    for item in commands:
        if isinstance(item, CommandSource):
            sources.append(item)
        elif isinstance(item, str):
            sources.append(CommandSource(path=item))
        else:
            sources.append(CommandSource.model_validate(item))
    return sources
