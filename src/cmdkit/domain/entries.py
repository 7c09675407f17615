"""CommandEntry — one node of the merged command tree."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel


class CommandEntry(BaseModel):
    """A key's executable command, its group, or both.

    Filesystem entries carry file paths; entries registered in-process carry
    the command module itself.

    Attributes:
        command_path: File implementing the command (filesystem sources).
        group_path: Directory or ``_group.py`` describing a group.
        module: In-process command module (registry entries).
        group_metadata: In-process group metadata (registry entries).
        source: Human-readable origin, used in duplicate-key errors.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    command_path: Path | None = None
    group_path: Path | None = None
    module: Any = None
    group_metadata: Any = None
    source: str = "<unknown>"

    @property
    def is_command(self) -> bool:
        return self.command_path is not None or self.module is not None

    @property
    def is_group(self) -> bool:
        return self.group_path is not None or self.group_metadata is not None

    @property
    def in_process(self) -> bool:
        return self.module is not None

    def merged_with(self, other: CommandEntry) -> CommandEntry:
        """Combine a command half with a group half for the same key."""
        return CommandEntry(
            command_path=self.command_path or other.command_path,
            group_path=self.group_path or other.group_path,
            module=self.module if self.module is not None else other.module,
            group_metadata=(
                self.group_metadata if self.group_metadata is not None else other.group_metadata
            ),
            source=self.source,
        )
