"""LifecycleExecutor — drives one command through its phases.

Order: validation → ConfigureContext → Init → Run | DryRun → Cleanup.

- A validation failure logs the formatted errors and exits 1; no phase runs.
- DryRun replaces Run only when a dry-run flag was passed *and* the command
  defines ``dry_run``.
- Cleanup is attempted whenever Run/DryRun started, even if it raised.
- An int returned by Run/DryRun is the exit code; anything else means 0.
- Exceptions from the command's own code (construction, validate callback,
  services, phases) are caught here, once, logged and turned into exit
  code 1.

INVARIANT: a command never sees unvalidated data when it declares a schema
or a validate callback.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cmdkit.commands.help import HelpCommand
from cmdkit.commands.log import CommandLog
from cmdkit.commands.runtime import CommandContext, CommandRuntime
from cmdkit.domain.errors import ValidationFailedError
from cmdkit.domain.params import DRY_RUN_FLAGS
from cmdkit.execution.telemetry import root_span, trace_span
from cmdkit.validation.pipeline import ValidationPipeline

if TYPE_CHECKING:
    from rich.console import Console

    from cmdkit.commands.module import CommandModule
    from cmdkit.config.models import CLIConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionRequest:
    """One matched command plus the raw args and flags it was invoked with."""

    key: str
    module: CommandModule
    args: list[Any] = field(default_factory=list)
    flags: dict[str, Any] = field(default_factory=dict)

    @property
    def dry_run_requested(self) -> bool:
        return any(bool(self.flags.get(name)) for name in DRY_RUN_FLAGS)


def exit_code_from(result: Any) -> int:
    """Ints (not bools) and integral floats become the exit code; anything else means success."""
    if isinstance(result, bool):
        return 0
    if isinstance(result, int):
        return result
    if isinstance(result, float) and result.is_integer():
        return int(result)
    return 0


class LifecycleExecutor:
    def __init__(
        self,
        config: CLIConfig,
        console: Console,
        *,
        services: Mapping[str, Any] | None = None,
        service_overrides: Mapping[str, Any] | None = None,
        pipeline: ValidationPipeline | None = None,
    ) -> None:
        self.config = config
        self.console = console
        self.services = dict(services or {})
        # Applied after the command injects its own services.
        self.service_overrides = dict(service_overrides or {})
        self.pipeline = pipeline or ValidationPipeline()

    def execute(self, request: ExecutionRequest) -> int:
        """Run *request* to completion and return the process exit code."""
        log = CommandLog(self.console, command_key=request.key)
        with root_span(f"command:{request.key or '<root>'}") as span:
            code = self._execute(request, log)
            if span is not None:
                span.annotate("exit_code", code)
        return code

    def _execute(self, request: ExecutionRequest, log: CommandLog) -> int:
        try:
            command = request.module.command()
            is_help = isinstance(command, HelpCommand)
            with trace_span("validate"):
                context = self.build_context(command, request, log)
            with trace_span("configure_context"):
                context = command.configure_context(context, self.services)
                context.services.update(self.service_overrides)
            if not is_help:
                log.info(f'🚀 {self.config.name}: running "{request.key}"')
            code = exit_code_from(self.run_lifecycle(command, context, request))
        except ValidationFailedError:
            return 1
        except Exception as exc:
            logger.debug("Command %r raised", request.key, exc_info=True)
            log.error(f'💥 Error during "{request.key}" execution:', exc)
            return 1

        if code == 0 and not is_help:
            log.success(f'{self.config.name}: "{request.key}" completed')
        return code

    def build_context(
        self, command: CommandRuntime, request: ExecutionRequest, log: CommandLog
    ) -> CommandContext:
        """Validate the raw input and hydrate a CommandContext.

        Raises:
            ValidationFailedError: validation rejected the input.  The errors
                have already been written to *log*.
        """
        module = request.module
        args = list(request.args)
        flags = dict(request.flags)

        if module.needs_validation:
            result = self.pipeline.execute(
                args,
                flags,
                module.params(args, flags),
                log=log,
                args_schema=module.args_schema,
                flags_schema=module.flags_schema,
                validate=module.validate,
            )
            if not result.success:
                message = self.pipeline.format_errors(result)
                log.error(message)
                raise ValidationFailedError(result, message)
            if result.data is not None:
                args = list(result.data.args)
                # Dry-run switches survive schemas that do not declare them.
                flags = {
                    **{name: flags[name] for name in DRY_RUN_FLAGS if name in flags},
                    **result.data.flags,
                }

        return CommandContext(
            key=request.key,
            config=self.config,
            params=module.params(args, flags),
            log=log,
            metadata=command.build_metadata(),
            args_schema=module.args_schema,
            flags_schema=module.flags_schema,
        )

    def run_lifecycle(
        self, command: CommandRuntime, ctx: CommandContext, request: ExecutionRequest
    ) -> Any:
        init = getattr(command, "init", None)
        if callable(init):
            with trace_span("init"):
                init(ctx)

        dry_run = getattr(command, "dry_run", None)
        if request.dry_run_requested and callable(dry_run):
            phase_name, phase = "dry_run", dry_run
        else:
            phase_name, phase = "run", command.run

        try:
            with trace_span(phase_name):
                result = phase(ctx)
        except Exception:
            self._cleanup_after_failure(command, ctx)
            raise

        cleanup = getattr(command, "cleanup", None)
        if callable(cleanup):
            with trace_span("cleanup"):
                cleanup(ctx)
        return result

    @staticmethod
    def _cleanup_after_failure(command: CommandRuntime, ctx: CommandContext) -> None:
        cleanup = getattr(command, "cleanup", None)
        if not callable(cleanup):
            return
        try:
            with trace_span("cleanup"):
                cleanup(ctx)
        except Exception:
            # The original phase error is the one reported.
            logger.warning("Cleanup failed for %r", ctx.key, exc_info=True)
