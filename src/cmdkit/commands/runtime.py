"""CommandRuntime — the lifecycle contract every command implements.

Only :meth:`CommandRuntime.run` and :meth:`CommandRuntime.build_metadata`
are required.  The optional phases are discovered by attribute:

- ``init(ctx)`` runs before Run/DryRun.
- ``dry_run(ctx)`` replaces ``run`` when a dry-run flag is passed.
- ``cleanup(ctx)`` runs after Run/DryRun, even when they raise.

A command that does not define ``dry_run`` always runs ``run``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cmdkit.commands.metadata import CommandMetadata, ParamMetadata
from cmdkit.domain.params import CommandParams
from cmdkit.validation.introspector import SchemaIntrospector

if TYPE_CHECKING:
    from cmdkit.commands.log import CommandLog
    from cmdkit.config.models import CLIConfig

CommandInvoker = Callable[..., int]


@dataclass
class CommandContext:
    """Per-invocation environment handed to every lifecycle phase.

    Built by the executor after validation.  Only the command's own
    :meth:`CommandRuntime.configure_context` mutates it, before any phase runs.
    """

    key: str
    config: CLIConfig
    params: CommandParams
    log: CommandLog
    metadata: CommandMetadata
    services: dict[str, Any] = field(default_factory=dict)
    commands: dict[str, CommandInvoker] | None = None
    args_schema: Any = None
    flags_schema: Any = None


class CommandRuntime(ABC):
    """Base class for class-authored and builder-built commands."""

    @abstractmethod
    def build_metadata(self) -> CommandMetadata: ...

    @abstractmethod
    def run(self, ctx: CommandContext) -> int | None: ...

    def configure_context(
        self, ctx: CommandContext, services: Mapping[str, Any] | None = None
    ) -> CommandContext:
        """Inject services and subcommand invokers before the first phase."""
        provided = dict(services or {})
        ctx.services = {**ctx.services, **self.inject_services(ctx, provided)}

        commands = self.inject_commands(ctx, provided)
        if commands is not None:
            ctx.commands = commands
        return ctx

    def inject_services(self, ctx: CommandContext, services: dict[str, Any]) -> dict[str, Any]:
        """Services visible to this command; all provided services by default."""
        return dict(services)

    def inject_commands(
        self, ctx: CommandContext, services: dict[str, Any]
    ) -> dict[str, CommandInvoker] | None:
        return None

    def build_metadata_from_schemas(
        self,
        name: str,
        description: str | None = None,
        args_schema: Any = None,
        flags_schema: Any = None,
    ) -> CommandMetadata:
        """Derive usage plus arg/flag help entries from the declared schemas."""
        introspector = SchemaIntrospector()
        args_meta: list[ParamMetadata] = []
        flags_meta: list[ParamMetadata] = []

        for index, item in enumerate(introspector.get_tuple_items(args_schema) or []):
            meta = introspector.get_meta(item)
            args_meta.append(
                ParamMetadata(
                    name=meta.display_name or f"arg{index + 1}",
                    description=getattr(item, "description", None),
                    optional=bool(getattr(item, "is_optional", False)),
                    accepts_file=introspector.should_file_check(item),
                )
            )

        for key, item in (introspector.get_object_shape(flags_schema) or {}).items():
            meta = introspector.get_meta(item)
            flags_meta.append(
                ParamMetadata(
                    name=meta.display_name or key,
                    description=getattr(item, "description", None),
                    optional=bool(getattr(item, "is_optional", False)),
                    accepts_file=introspector.should_file_check(item),
                )
            )

        usage_parts = [f"<{a.name}>" for a in args_meta] + [f"[--{f.name}]" for f in flags_meta]
        usage = " ".join(usage_parts)
        return CommandMetadata(
            name=name,
            description=description,
            usage=usage or None,
            examples=[usage] if usage else [],
            args=args_meta,
            flags=flags_meta,
        )
