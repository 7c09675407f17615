"""Pluggy hook specifications for cmdkit.

Both hooks run once per invocation, before the command tree is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from cmdkit.config.models import CLIConfig
    from cmdkit.routing.registry import CommandRegistry

hookspec = pluggy.HookspecMarker("cmdkit")
hookimpl = pluggy.HookimplMarker("cmdkit")


class CmdkitHookSpec:
    """Hook specifications for the cmdkit plugin system."""

    @hookspec
    def register_commands(self, registry: CommandRegistry, config: CLIConfig) -> None:
        """Register in-process commands and groups on *registry*."""

    @hookspec
    def provide_services(self, config: CLIConfig) -> dict[str, Any] | None:
        """Return services made available to every command's service injection."""
