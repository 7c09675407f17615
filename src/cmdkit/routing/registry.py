"""CommandRegistry — commands registered in-process rather than on disk.

One registry per CLI instance, never a module-level singleton.  In-process
entries always shadow filesystem entries with the same key.  The runtime
takes a :meth:`snapshot` when it builds the command tree; registrations made
after that are not seen by the running invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from cmdkit.commands.metadata import GroupMetadata
from cmdkit.domain.entries import CommandEntry
from cmdkit.domain.keys import normalize_key

logger = logging.getLogger(__name__)

IN_PROCESS_SOURCE = "<in-process registry>"


class CommandRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, CommandEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._entries

    def register_command(self, key: str, module: Any) -> None:
        """Register a command module (or fluent builder) under *key*."""
        key = normalize_key(key)
        existing = self._entries.get(key)
        entry = CommandEntry(module=module, source=IN_PROCESS_SOURCE)
        self._entries[key] = entry.merged_with(existing) if existing else entry
        if existing is not None and existing.is_command:
            logger.debug("Replaced in-process command %r", key)
        logger.debug("Registered in-process command %r", key)

    def register_group(self, key: str, metadata: GroupMetadata | Mapping[str, Any]) -> None:
        """Register help metadata for the group *key*."""
        key = normalize_key(key)
        group = (
            metadata
            if isinstance(metadata, GroupMetadata)
            else GroupMetadata.model_validate(metadata)
        )
        existing = self._entries.get(key)
        if existing is not None:
            self._entries[key] = existing.model_copy(update={"group_metadata": group})
        else:
            self._entries[key] = CommandEntry(group_metadata=group, source=IN_PROCESS_SOURCE)
        logger.debug("Registered in-process group %r", key)

    def get_commands(self) -> dict[str, CommandEntry]:
        """Copy of all registered entries."""
        return dict(self._entries)

    def snapshot(self) -> dict[str, CommandEntry]:
        return self.get_commands()
