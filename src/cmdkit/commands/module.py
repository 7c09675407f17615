"""CommandModule — everything the runtime needs to execute one command."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cmdkit.domain.errors import CommandLoadError
from cmdkit.domain.params import CommandParams
from cmdkit.validation.schema import as_args_schema, as_flags_schema

if TYPE_CHECKING:
    from cmdkit.commands.runtime import CommandRuntime
    from cmdkit.validation.types import ValidateCallback


@dataclass(frozen=True)
class CommandModule:
    """A command's runtime factory plus its schemas, params class and validator.

    Attributes:
        command: Zero-argument factory (usually the class) for the runtime.
        args_schema: Positional-args schema, or None.
        flags_schema: Flags schema, or None.
        params: CommandParams subclass built over the validated values.
        validate: Custom validation callback, or None.
    """

    command: Callable[[], CommandRuntime]
    args_schema: Any = None
    flags_schema: Any = None
    params: type[CommandParams] = CommandParams
    validate: ValidateCallback | None = None

    @property
    def needs_validation(self) -> bool:
        return (
            self.args_schema is not None
            or self.flags_schema is not None
            or self.validate is not None
        )


def define_command_module(
    command: Callable[[], CommandRuntime],
    *,
    args_schema: Any = None,
    flags_schema: Any = None,
    params: type[CommandParams] | None = None,
    validate: ValidateCallback | None = None,
) -> CommandModule:
    """Define a class-authored command module.

    *args_schema* may be a :class:`TupleSchema` or a list of argument
    schemas; *flags_schema* may be a pydantic model class.
    """
    return CommandModule(
        command=command,
        args_schema=as_args_schema(args_schema),
        flags_schema=as_flags_schema(flags_schema),
        params=params or CommandParams,
        validate=validate,
    )


def resolve_command_module(source: Any, *, origin: str = "<in-process>") -> CommandModule:
    """Accept a built module or anything with ``build()`` (a fluent builder)."""
    if isinstance(source, CommandModule):
        return source
    build = getattr(source, "build", None)
    if callable(build):
        built = build()
        if isinstance(built, CommandModule):
            return built
    raise CommandLoadError(
        f"{origin} does not provide a command module (got {type(source).__name__})"
    )
