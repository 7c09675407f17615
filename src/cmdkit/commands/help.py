"""HelpCommand — renders root, group, command and unknown-key help.

The runtime builds a :class:`HelpContext` when a key resolves to a group,
when a help flag is present, or when the key is unknown, and executes a
HelpCommand through the normal lifecycle.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from cmdkit.commands.metadata import CommandMetadata, GroupMetadata
from cmdkit.commands.runtime import CommandContext, CommandRuntime
from cmdkit.output.renderers import render_help


class HelpEntry(BaseModel):
    """A child command or group listed in help output."""

    model_config = {"frozen": True}

    key: str
    name: str | None = None
    description: str | None = None


class HelpContext(BaseModel):
    """Everything needed to render one help screen."""

    model_config = {"frozen": True}

    cli_name: str
    token: str
    version: str | None = None
    description: str | None = None
    key: str = ""
    command: CommandMetadata | None = None
    group: GroupMetadata | None = None
    commands: list[HelpEntry] = Field(default_factory=list)
    groups: list[HelpEntry] = Field(default_factory=list)
    unknown_key: str | None = None
    suggestion: str | None = None


class HelpCommand(CommandRuntime):
    def __init__(self, help_context: HelpContext) -> None:
        self.help_context = help_context

    def build_metadata(self) -> CommandMetadata:
        return CommandMetadata(name="help", description="Show help for commands and groups")

    def run(self, ctx: CommandContext) -> int:
        render_help(ctx.log.console, self.help_context)
        return 1 if self.help_context.unknown_key is not None else 0
