"""Filesystem hooks — find command files and load them as modules.

Layout of a command source directory::

    commands/
        hello.py            -> key "hello"
        scaffold/           -> group "scaffold"
            _group.py       -> optional ``metadata`` for the group
            cloud.py        -> key "scaffold/cloud" (command and group)
            cloud/
                aws.py      -> key "scaffold/cloud/aws"

Files and directories starting with ``_`` or ``.`` are never commands.  A
command file exposes ``command_module``: a CommandModule or a fluent builder.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from pydantic import ValidationError

from cmdkit.commands.metadata import GroupMetadata
from cmdkit.commands.module import CommandModule, resolve_command_module
from cmdkit.config.discovery import ResolvedConfig, resolve_config
from cmdkit.config.models import CommandSource
from cmdkit.domain.entries import CommandEntry
from cmdkit.domain.errors import CommandLoadError
from cmdkit.domain.keys import join_key

logger = logging.getLogger(__name__)

COMMAND_ATTR = "command_module"
GROUP_FILE = "_group.py"
GROUP_ATTR = "metadata"


class FileSystemHooks(Protocol):
    """What the runtime needs from the filesystem."""

    def resolve_command_entry_paths(self, source: CommandSource) -> dict[str, CommandEntry]: ...

    def load_command_module(self, path: Path) -> CommandModule: ...

    def load_group_metadata(self, path: Path) -> GroupMetadata | None: ...

    def resolve_config(self, argv: list[str]) -> ResolvedConfig: ...


def _is_hidden(name: str) -> bool:
    return name.startswith(("_", "."))


class LocalFileSystemHooks:
    """Default hooks backed by the local filesystem and importlib."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd
        self._modules: dict[Path, ModuleType] = {}

    def resolve_config(self, argv: list[str]) -> ResolvedConfig:
        return resolve_config(argv, cwd=self.cwd)

    def resolve_command_entry_paths(self, source: CommandSource) -> dict[str, CommandEntry]:
        """Map every command file and group directory under *source* to its key."""
        base = Path(source.path)
        label = source.describe()
        if not base.is_dir():
            logger.warning("Command source %s is not a directory; skipping", base)
            return {}

        entries: dict[str, CommandEntry] = {}

        def add(key: str, entry: CommandEntry) -> None:
            existing = entries.get(key)
            entries[key] = existing.merged_with(entry) if existing else entry

        for path in sorted(base.rglob("*")):
            rel = path.relative_to(base)
            if any(_is_hidden(part) for part in rel.parts):
                continue
            if path.is_dir():
                group_file = path / GROUP_FILE
                add(
                    join_key(source.root, rel.as_posix()),
                    CommandEntry(
                        group_path=group_file if group_file.is_file() else path,
                        source=label,
                    ),
                )
            elif path.suffix == ".py":
                add(
                    join_key(source.root, rel.with_suffix("").as_posix()),
                    CommandEntry(command_path=path, source=label),
                )

        logger.debug("Resolved %d entries from %s", len(entries), label)
        return entries

    def load_command_module(self, path: Path) -> CommandModule:
        module = self._import(path)
        source = getattr(module, COMMAND_ATTR, None)
        if source is None:
            raise CommandLoadError(f"{path} does not define '{COMMAND_ATTR}'")
        return resolve_command_module(source, origin=str(path))

    def load_group_metadata(self, path: Path) -> GroupMetadata | None:
        """Read ``metadata`` from a ``_group.py`` file; None for bare directories."""
        if path.is_dir():
            return None
        module = self._import(path)
        raw: Any = getattr(module, GROUP_ATTR, None)
        if raw is None:
            return None
        if isinstance(raw, GroupMetadata):
            return raw
        try:
            return GroupMetadata.model_validate(raw)
        except ValidationError as exc:
            raise CommandLoadError(f"Invalid group metadata in {path}: {exc}") from exc

    def _import(self, path: Path) -> ModuleType:
        path = path.resolve()
        if path in self._modules:
            return self._modules[path]

        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
        module_name = f"cmdkit_command_{path.stem}_{digest}"
        try:
            spec = importlib.util.spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                raise CommandLoadError(f"Could not create module spec for {path}")
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
        except CommandLoadError:
            raise
        except Exception as exc:
            # Clean up partial module registration
            sys.modules.pop(module_name, None)
            raise CommandLoadError(f"Failed to load command module {path}: {exc}") from exc

        self._modules[path] = module
        logger.debug("Loaded command module %s as %s", path, module_name)
        return module
