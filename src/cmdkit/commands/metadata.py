"""Help metadata for commands and groups."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ParamMetadata(BaseModel):
    """One positional argument or flag, as shown in help output."""

    model_config = {"frozen": True}

    name: str
    description: str | None = None
    optional: bool = False
    accepts_file: bool = False


class CommandMetadata(BaseModel):
    """Help metadata for a single command."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    description: str | None = None
    usage: str | None = None
    examples: list[str] = Field(default_factory=list)
    args: list[ParamMetadata] = Field(default_factory=list)
    flags: list[ParamMetadata] = Field(default_factory=list)


class GroupMetadata(BaseModel):
    """Help metadata for a command group (a ``_group.py`` ``metadata`` value)."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    description: str | None = None
