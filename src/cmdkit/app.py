"""CLI — one runtime instance per entry point.

``run_from_args`` resolves the config, then ``run_with_config``:

1. parse argv into positionals and flags
2. load plugins (in-process commands, shared services)
3. merge filesystem sources (duplicates are fatal)
4. overlay the in-process registry (duplicates warn, in-process wins)
5. match the key and execute the command or help

Every instance owns its registry, plugin manager and services, so several
instances (e.g. in tests) never interfere.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cmdkit.domain.entries import CommandEntry
from cmdkit.execution.executor import LifecycleExecutor
from cmdkit.infrastructure.filesystem import FileSystemHooks, LocalFileSystemHooks
from cmdkit.output.console import create_console
from cmdkit.plugins.manager import PluginManager
from cmdkit.routing.matcher import CommandMatcher
from cmdkit.routing.parser import parse_tokens, resolve_invocation
from cmdkit.routing.registry import CommandRegistry
from cmdkit.routing.tree import CommandTree, SourceEntries, merge_command_sources

if TYPE_CHECKING:
    from rich.console import Console

    from cmdkit.config.models import CLIConfig

logger = logging.getLogger(__name__)


class CLI:
    def __init__(
        self,
        *,
        hooks: FileSystemHooks | None = None,
        console: Console | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self.hooks: FileSystemHooks = hooks or LocalFileSystemHooks()
        self.console = console or create_console(file=sys.stdout)
        self.registry = CommandRegistry()
        self.plugins = plugin_manager or PluginManager()
        self.services: dict[str, Any] = {}

    def run_from_args(self, argv: list[str]) -> int:
        """Resolve the config from *argv*, then run.  Returns the exit code."""
        resolved = self.hooks.resolve_config(list(argv))
        return self.run_with_config(resolved.config, resolved.remaining_argv, resolved.config_path)

    def run_with_config(
        self, config: CLIConfig, argv: list[str], config_path: Path | str | None = None
    ) -> int:
        base = Path(config_path).resolve().parent if config_path else Path.cwd()
        parsed = parse_tokens(list(argv))

        self.load_plugins(config, base)
        tree = self.build_tree(config, base)

        invocation = resolve_invocation(parsed, tree)
        logger.debug("Resolved invocation key=%r args=%r", invocation.key, invocation.args)

        request = CommandMatcher(tree, self.hooks).resolve(config, invocation)
        executor = LifecycleExecutor(config, self.console, services=self.services)
        return executor.execute(request)

    def load_plugins(self, config: CLIConfig, base: Path) -> None:
        """Discover plugins once, then collect their commands and services."""
        if not self.plugins.is_loaded:
            local_dir = base / config.plugins if config.plugins else None
            names = self.plugins.discover_and_load(local_dir=local_dir)
            logger.debug("Loaded plugins: %s", names)
        self.plugins.register_commands(self.registry, config)
        self.services.update(self.plugins.collect_services(config))

    def resolve_all_command_sources(self, config: CLIConfig, base: Path) -> dict[str, CommandEntry]:
        """Merge every configured filesystem source; raises on duplicate keys."""
        resolved: list[SourceEntries] = []
        for source in config.command_sources():
            entries = self.hooks.resolve_command_entry_paths(source.resolved(base))
            resolved.append((source.describe(), entries))
        return merge_command_sources(resolved)

    def build_tree(self, config: CLIConfig, base: Path) -> CommandTree:
        filesystem = self.resolve_all_command_sources(config, base)
        return CommandTree.build([("filesystem", filesystem)], self.registry.snapshot())
