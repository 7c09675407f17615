"""Command key helpers.

A command key is a slash-delimited, case-sensitive path such as
``scaffold/cloud/aws``.  The empty string is the root.
"""

from __future__ import annotations

KEY_SEPARATOR = "/"


def split_key(key: str | None) -> list[str]:
    """Split a key into its non-empty segments."""
    if not key:
        return []
    return [part for part in key.split(KEY_SEPARATOR) if part]


def join_key(*parts: str | None) -> str:
    """Join key parts, ignoring empty parts and redundant separators."""
    segments: list[str] = []
    for part in parts:
        segments.extend(split_key(part))
    return KEY_SEPARATOR.join(segments)


def normalize_key(key: str | None) -> str:
    """Normalize backslashes and duplicate separators."""
    if not key:
        return ""
    return join_key(key.replace("\\", KEY_SEPARATOR))


def parent_key(key: str) -> str:
    """Return the key of the enclosing group (``""`` for top-level keys)."""
    return join_key(*split_key(key)[:-1])


def is_child_key(parent: str, key: str) -> bool:
    """True when *key* sits directly under *parent*."""
    return parent_key(key) == normalize_key(parent) and key != normalize_key(parent)
