"""CommandMatcher — classify a requested key and prepare what to execute.

:func:`classify` is pure and total over the tree: every key maps to exactly
one of :class:`CommandMatch`, :class:`GroupMatch` or :class:`UnknownMatch`.
:class:`CommandMatcher` turns that outcome into an :class:`ExecutionRequest`,
loading the command module or building a help screen.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from cmdkit.commands.help import HelpCommand, HelpContext, HelpEntry
from cmdkit.commands.metadata import CommandMetadata, GroupMetadata
from cmdkit.commands.module import CommandModule, resolve_command_module
from cmdkit.domain.errors import CommandKitError
from cmdkit.domain.keys import join_key, normalize_key, split_key
from cmdkit.execution.executor import ExecutionRequest
from cmdkit.routing.suggestions import closest_match

if TYPE_CHECKING:
    from cmdkit.config.models import CLIConfig
    from cmdkit.domain.entries import CommandEntry
    from cmdkit.infrastructure.filesystem import FileSystemHooks
    from cmdkit.routing.parser import ResolvedInvocation
    from cmdkit.routing.tree import CommandTree

logger = logging.getLogger(__name__)

HELP_FLAGS = ("help", "h")


@dataclass(frozen=True)
class CommandMatch:
    key: str
    entry: CommandEntry


@dataclass(frozen=True)
class GroupMatch:
    """A group, a command with a help flag, or the root (``key == ""``)."""

    key: str
    entry: CommandEntry | None = None


@dataclass(frozen=True)
class UnknownMatch:
    key: str
    suggestion: str | None = None


MatchResolution = CommandMatch | GroupMatch | UnknownMatch


def has_help_flag(flags: Mapping[str, Any]) -> bool:
    return any(bool(flags.get(name)) for name in HELP_FLAGS)


def classify(
    tree: CommandTree, key: str | None, flags: Mapping[str, Any] | None = None
) -> MatchResolution:
    """Classify *key* against *tree*; unknown keys get a best-effort suggestion."""
    key = normalize_key(key)
    if not key:
        return GroupMatch(key="")

    entry = tree.get(key)
    if entry is None:
        if tree.is_implicit_group(key):
            return GroupMatch(key=key)
        return UnknownMatch(key=key, suggestion=closest_match(key, tree.keys()))

    if entry.is_command and not has_help_flag(flags or {}):
        return CommandMatch(key=key, entry=entry)
    return GroupMatch(key=key, entry=entry)


class CommandMatcher:
    """Resolves an invocation into an :class:`ExecutionRequest`."""

    def __init__(self, tree: CommandTree, hooks: FileSystemHooks) -> None:
        self.tree = tree
        self.hooks = hooks

    def match(self, invocation: ResolvedInvocation) -> MatchResolution:
        resolution = classify(self.tree, invocation.key, invocation.flags)
        # A pure group followed by extra tokens names something that does not exist.
        if isinstance(resolution, GroupMatch) and invocation.args:
            entry = resolution.entry
            if entry is None or not entry.is_command:
                unknown = join_key(resolution.key, *invocation.args)
                suggestion = closest_match(unknown, self.tree.keys())
                return UnknownMatch(key=unknown, suggestion=suggestion)
        return resolution

    def resolve(self, config: CLIConfig, invocation: ResolvedInvocation) -> ExecutionRequest:
        resolution = self.match(invocation)

        if isinstance(resolution, CommandMatch):
            return ExecutionRequest(
                key=resolution.key,
                module=self.load_module(resolution.key, resolution.entry),
                args=list(invocation.args),
                flags=dict(invocation.flags),
            )

        if isinstance(resolution, GroupMatch):
            help_ctx = self.build_help(config, resolution)
        else:
            help_ctx = self.build_help(config, GroupMatch(key=""), unknown=resolution)

        return ExecutionRequest(
            key=resolution.key,
            module=CommandModule(command=partial(HelpCommand, help_ctx)),
            args=list(invocation.args),
            flags=dict(invocation.flags),
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_module(self, key: str, entry: CommandEntry) -> CommandModule:
        if entry.module is not None:
            return resolve_command_module(entry.module, origin=f"Command '{key}'")
        assert entry.command_path is not None
        return self.hooks.load_command_module(entry.command_path)

    def load_group_metadata(self, key: str, entry: CommandEntry | None) -> GroupMetadata:
        fallback = GroupMetadata(name=split_key(key)[-1] if key else "commands")
        if entry is None:
            return fallback
        if isinstance(entry.group_metadata, GroupMetadata):
            return entry.group_metadata
        if entry.group_path is not None:
            return self.hooks.load_group_metadata(entry.group_path) or fallback
        return fallback

    def _command_metadata(self, key: str, entry: CommandEntry) -> CommandMetadata | None:
        try:
            return self.load_module(key, entry).command().build_metadata()
        except CommandKitError:
            logger.warning("Could not load command %r for help", key, exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def build_help(
        self,
        config: CLIConfig,
        resolution: GroupMatch,
        *,
        unknown: UnknownMatch | None = None,
    ) -> HelpContext:
        key = resolution.key
        entry = resolution.entry
        command_meta = None
        group_meta = None

        if entry is not None and entry.is_command:
            command_meta = self._command_metadata(key, entry)
        if key and (entry is None or entry.is_group):
            group_meta = self.load_group_metadata(key, entry)

        commands: list[HelpEntry] = []
        groups: list[HelpEntry] = []
        for child_key in self.tree.children(key):
            child = self.tree.get(child_key)
            if child is not None and child.is_command:
                meta = self._command_metadata(child_key, child)
                commands.append(
                    HelpEntry(
                        key=child_key,
                        name=meta.name if meta else None,
                        description=meta.description if meta else None,
                    )
                )
            if child is None or child.is_group:
                gmeta = self.load_group_metadata(child_key, child)
                groups.append(
                    HelpEntry(key=child_key, name=gmeta.name, description=gmeta.description)
                )

        return HelpContext(
            cli_name=config.name,
            token=config.token,
            version=config.version,
            description=config.description,
            key=key,
            command=command_meta,
            group=group_meta,
            commands=commands,
            groups=groups,
            unknown_key=unknown.key if unknown else None,
            suggestion=unknown.suggestion if unknown else None,
        )
