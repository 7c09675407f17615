"""CommandTree — the merged, read-only index from keys to entries.

Merging rules:

- Filesystem sources merge in declaration order.  A key contributed by two
  sources is fatal (:class:`DuplicateCommandKeyError` naming both).
- In-process registry entries merge last.  A collision only logs a warning;
  the in-process command wins and a filesystem group half is kept.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from cmdkit.domain.entries import CommandEntry
from cmdkit.domain.errors import DuplicateCommandKeyError
from cmdkit.domain.keys import KEY_SEPARATOR, normalize_key, parent_key, split_key

logger = logging.getLogger(__name__)

SourceEntries = tuple[str, Mapping[str, CommandEntry]]


def merge_command_sources(sources: Iterable[SourceEntries]) -> dict[str, CommandEntry]:
    """Merge ``(source_label, entries)`` pairs, rejecting duplicate keys."""
    merged: dict[str, CommandEntry] = {}
    origins: dict[str, str] = {}

    for label, entries in sources:
        for key, entry in entries.items():
            if key in merged:
                raise DuplicateCommandKeyError(key, origins[key], label)
            merged[key] = entry
            origins[key] = label

    return merged


def merge_registry(
    filesystem: Mapping[str, CommandEntry], registry: Mapping[str, CommandEntry]
) -> dict[str, CommandEntry]:
    """Overlay in-process entries onto filesystem entries."""
    merged = dict(filesystem)
    for key, entry in registry.items():
        if key in merged:
            logger.warning(
                "Duplicate command key '%s' detected. "
                "Using in-process command over filesystem command.",
                key,
            )
            entry = entry.merged_with(merged[key])
        merged[key] = entry
    return merged


class CommandTree:
    """Read-only view over merged entries.

    Ancestors of a registered key are navigable even without an entry of
    their own, so ``api/health`` alone makes ``api`` an implicit group.
    """

    def __init__(self, entries: Mapping[str, CommandEntry]) -> None:
        self._entries = {normalize_key(k): v for k, v in entries.items()}
        self._implicit_groups = {
            KEY_SEPARATOR.join(split_key(key)[:depth])
            for key in self._entries
            for depth in range(1, len(split_key(key)))
        } - set(self._entries)

    @classmethod
    def build(
        cls,
        sources: Iterable[SourceEntries],
        registry: Mapping[str, CommandEntry] | None = None,
    ) -> CommandTree:
        merged = merge_command_sources(sources)
        if registry:
            merged = merge_registry(merged, registry)
        return cls(merged)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key = normalize_key(key)
        return key in self._entries or key in self._implicit_groups

    def get(self, key: str | None) -> CommandEntry | None:
        return self._entries.get(normalize_key(key))

    def keys(self) -> list[str]:
        return sorted(self._entries)

    def entries(self) -> dict[str, CommandEntry]:
        return dict(self._entries)

    def is_implicit_group(self, key: str | None) -> bool:
        return normalize_key(key) in self._implicit_groups

    def children(self, key: str | None) -> list[str]:
        """Direct child keys of *key* (``""``/None for the root), sorted."""
        parent = normalize_key(key)
        found = {
            k
            for k in (*self._entries, *self._implicit_groups)
            if parent_key(k) == parent and k != parent
        }
        return sorted(found)

    def has_children(self, key: str | None) -> bool:
        return bool(self.children(key))
