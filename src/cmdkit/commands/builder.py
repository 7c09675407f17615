"""Fluent command builder.

::

    hello = (
        command("hello", "Prints a friendly greeting")
        .args([argument(str | None, "world", display_name="name")])
        .flags(HelloFlags)
        .run(lambda ctx: ctx.log.info(f"Hello, {ctx.params.arg(0)}!"))
    )

``build()`` produces a :class:`CommandModule` whose runtime class only has
the optional phases that were configured, so a command built without
``dry_run(...)`` always executes ``run`` even when ``--dry-run`` is passed.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from cmdkit.commands.module import CommandModule, resolve_command_module
from cmdkit.commands.runtime import CommandContext, CommandInvoker, CommandRuntime
from cmdkit.domain.errors import CommandBuildError
from cmdkit.domain.params import CommandParams
from cmdkit.validation.schema import as_args_schema, as_flags_schema

if TYPE_CHECKING:
    from cmdkit.commands.metadata import CommandMetadata
    from cmdkit.validation.types import ValidateCallback

Phase = Callable[[CommandContext], Any]
ServicesFactory = Callable[[CommandContext, dict[str, Any]], Mapping[str, Any]]


class _BuiltCommand(CommandRuntime):
    command_name: str = ""
    command_description: str | None = None
    args_schema: Any = None
    flags_schema: Any = None

    def build_metadata(self) -> CommandMetadata:
        return self.build_metadata_from_schemas(
            self.command_name, self.command_description, self.args_schema, self.flags_schema
        )

    def run(self, ctx: CommandContext) -> int | None:  # replaced on every built class
        raise NotImplementedError


def _phase(fn: Phase) -> Callable[[Any, CommandContext], Any]:
    def phase(self: Any, ctx: CommandContext) -> Any:
        return fn(ctx)

    phase.__name__ = getattr(fn, "__name__", "phase")
    return phase


def _class_name(name: str) -> str:
    words = re.split(r"[^0-9a-zA-Z]+", name)
    return "".join(w[:1].upper() + w[1:] for w in words if w) + "Command"


def _make_invoker(
    name: str, source: Any, ctx: CommandContext, services: dict[str, Any]
) -> CommandInvoker:
    def invoke(args: list[Any] | None = None, flags: dict[str, Any] | None = None) -> int:
        from cmdkit.execution.executor import ExecutionRequest, LifecycleExecutor

        module = resolve_command_module(source, origin=f"Subcommand '{name}'")
        executor = LifecycleExecutor(ctx.config, ctx.log.console, services=services)
        return executor.execute(
            ExecutionRequest(
                key=name, module=module, args=list(args or []), flags=dict(flags or {})
            )
        )

    invoke.__name__ = f"invoke_{name}"
    return invoke


class CommandModuleBuilder:
    def __init__(self, name: str, description: str | None = None) -> None:
        self.name = name
        self.description = description
        self._args_schema: Any = None
        self._flags_schema: Any = None
        self._params: type[CommandParams] = CommandParams
        self._services: ServicesFactory | None = None
        self._subcommands: dict[str, Any] | None = None
        self._init: Phase | None = None
        self._run: Phase | None = None
        self._dry_run: Phase | None = None
        self._cleanup: Phase | None = None
        self._validate: ValidateCallback | None = None

    def args(self, schema: Any) -> CommandModuleBuilder:
        self._args_schema = as_args_schema(schema)
        return self

    def flags(self, schema: Any) -> CommandModuleBuilder:
        self._flags_schema = as_flags_schema(schema)
        return self

    def params(self, params_cls: type[CommandParams]) -> CommandModuleBuilder:
        self._params = params_cls
        return self

    def services(self, factory: ServicesFactory) -> CommandModuleBuilder:
        """Set a factory ``(ctx, provided_services) -> services`` for this command."""
        self._services = factory
        return self

    def commands(self, subcommands: Mapping[str, Any]) -> CommandModuleBuilder:
        """Expose other commands (modules or builders) as ``ctx.commands[name]``."""
        self._subcommands = dict(subcommands)
        return self

    def init(self, fn: Phase) -> CommandModuleBuilder:
        self._init = fn
        return self

    def run(self, fn: Phase) -> CommandModuleBuilder:
        self._run = fn
        return self

    def dry_run(self, fn: Phase) -> CommandModuleBuilder:
        self._dry_run = fn
        return self

    def cleanup(self, fn: Phase) -> CommandModuleBuilder:
        self._cleanup = fn
        return self

    def validate(self, fn: ValidateCallback) -> CommandModuleBuilder:
        self._validate = fn
        return self

    def build(self) -> CommandModule:
        if self._run is None:
            raise CommandBuildError(
                f"Command '{self.name}' is missing required run() configuration."
            )

        namespace: dict[str, Any] = {
            "command_name": self.name,
            "command_description": self.description,
            "args_schema": self._args_schema,
            "flags_schema": self._flags_schema,
            "run": _phase(self._run),
        }
        if self._init is not None:
            namespace["init"] = _phase(self._init)
        if self._dry_run is not None:
            namespace["dry_run"] = _phase(self._dry_run)
        if self._cleanup is not None:
            namespace["cleanup"] = _phase(self._cleanup)

        factory = self._services
        if factory is not None:

            def inject_services(
                self: CommandRuntime, ctx: CommandContext, services: dict[str, Any]
            ) -> dict[str, Any]:
                return dict(factory(ctx, services))

            namespace["inject_services"] = inject_services

        subcommands = self._subcommands
        if subcommands:

            def inject_commands(
                self: CommandRuntime, ctx: CommandContext, services: dict[str, Any]
            ) -> dict[str, CommandInvoker]:
                return {
                    name: _make_invoker(name, source, ctx, services)
                    for name, source in subcommands.items()
                }

            namespace["inject_commands"] = inject_commands

        runtime_cls = type(_class_name(self.name), (_BuiltCommand,), namespace)
        return CommandModule(
            command=runtime_cls,
            args_schema=self._args_schema,
            flags_schema=self._flags_schema,
            params=self._params,
            validate=self._validate,
        )


def command(name: str, description: str | None = None) -> CommandModuleBuilder:
    """Start a fluent command definition."""
    return CommandModuleBuilder(name, description)
