"""Console entry point: ``cmdkit [OPTIONS] [CONFIG] [ARGS]...``.

Options are only recognised before the first positional token; everything
after it (including ``--help``) belongs to the hosted CLI.
"""

from __future__ import annotations

import sys

import click

from cmdkit import __version__
from cmdkit.app import CLI
from cmdkit.config.logging import configure_logging
from cmdkit.config.settings import RuntimeSettings
from cmdkit.domain.errors import CommandKitError
from cmdkit.execution.telemetry import enable_telemetry
from cmdkit.infrastructure.filesystem import LocalFileSystemHooks
from cmdkit.output.console import create_console
from cmdkit.output.renderers import render_error


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    }
)
@click.version_option(version=__version__, prog_name="cmdkit")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and lifecycle telemetry.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    no_color: bool,
    argv: tuple[str, ...],
) -> None:
    """cmdkit — run a file-based command-line application."""
    hooks = LocalFileSystemHooks()
    try:
        resolved = hooks.resolve_config(list(argv))
        settings = RuntimeSettings.from_cli(
            config_path=resolved.config_path,
            verbose=verbose,
            log_json=log_json,
            no_color=no_color,
        )
    except CommandKitError as exc:
        render_error(create_console(no_color=no_color, file=sys.stderr), str(exc))
        ctx.exit(1)

    configure_logging(
        verbose=settings.verbose, log_json=settings.log_json, no_color=settings.no_color
    )
    if settings.verbose:
        enable_telemetry()

    app = CLI(hooks=hooks, console=create_console(no_color=settings.no_color, file=sys.stdout))
    try:
        code = app.run_with_config(resolved.config, resolved.remaining_argv, resolved.config_path)
    except CommandKitError as exc:
        render_error(create_console(no_color=settings.no_color, file=sys.stderr), str(exc))
        ctx.exit(1)
    ctx.exit(code)
