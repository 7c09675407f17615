"""Rich renderers for help screens and runtime errors.

Each renderer writes to a Rich Console.  Tests back the console with a
StringIO buffer and read it via ``get_output(console)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

if TYPE_CHECKING:
    from rich.console import Console

    from cmdkit.commands.help import HelpContext, HelpEntry
    from cmdkit.commands.metadata import ParamMetadata


# ── Public API ────────────────────────────────────────────────────────


def render_help(console: Console, help_ctx: HelpContext) -> None:
    """Render a help screen: intro, unknown-key error, details, listings."""
    if help_ctx.command is None and help_ctx.group is None:
        _render_intro(console, help_ctx)

    if help_ctx.unknown_key is not None:
        render_unknown(console, help_ctx.unknown_key, help_ctx.suggestion)

    if help_ctx.command is None:
        usage_key = f"{help_ctx.key} " if help_ctx.key and help_ctx.unknown_key is None else ""
        _line(console, "Usage: ", f"{help_ctx.token} {usage_key}<command> [options]")

    if help_ctx.group is not None:
        console.print(Text(f"📘 Group: {help_ctx.group.name}", style="cmdkit.group"))
        if help_ctx.group.description:
            console.print(Text(help_ctx.group.description, style="cmdkit.dim"))

    if help_ctx.command is not None:
        _render_command(console, help_ctx)

    _render_listing(console, "Commands:", help_ctx.commands)
    _render_listing(console, "Groups:", help_ctx.groups)


def render_unknown(console: Console, key: str, suggestion: str | None) -> None:
    """Render the unknown-key error and an optional suggestion."""
    console.print(Text(f"❌ Unknown command: {key}", style="cmdkit.error"))
    if suggestion:
        console.print(Text(f"💡 Did you mean: {suggestion}?", style="cmdkit.hint"))


def render_error(console: Console, message: str) -> None:
    """Render a fatal runtime error (configuration, loading)."""
    console.print(Text(f"❌ {message}", style="cmdkit.error"))


# ── Helpers ───────────────────────────────────────────────────────────


def _line(console: Console, label: str, value: str) -> None:
    console.print(Text(label, style="cmdkit.title"), Text(value), sep="")


def _render_intro(console: Console, help_ctx: HelpContext) -> None:
    title = help_ctx.cli_name
    if help_ctx.version:
        title += f" v{help_ctx.version}"
    console.print(Text(f"📘 {title}", style="cmdkit.title"))
    if help_ctx.description:
        console.print(Text(help_ctx.description, style="cmdkit.dim"))


def _render_command(console: Console, help_ctx: HelpContext) -> None:
    meta = help_ctx.command
    assert meta is not None
    console.print(Text(f"📘 Command: {meta.name}", style="cmdkit.title"))
    if meta.description:
        console.print(Text(meta.description, style="cmdkit.dim"))

    invocation = f"{help_ctx.token} {help_ctx.key}".rstrip()
    _line(console, "Usage: ", f"{invocation} {meta.usage}" if meta.usage else invocation)

    if meta.examples:
        console.print(Text("Examples:", style="cmdkit.title"))
        for example in meta.examples:
            console.print(Text(f"  {invocation} {example}"))

    _render_params(console, "Args:", meta.args, "<{}>")
    _render_params(console, "Flags:", meta.flags, "--{}")


def _render_params(console: Console, title: str, params: list[ParamMetadata], fmt: str) -> None:
    if not params:
        return
    console.print(Text(title, style="cmdkit.title"))
    for param in params:
        line = Text(f"  {fmt.format(param.name)}", style="cmdkit.key")
        if param.description:
            line.append(f" - {param.description}")
        if param.optional:
            line.append(" (optional)", style="cmdkit.dim")
        if param.accepts_file:
            line.append(" [file/json]", style="cmdkit.dim")
        console.print(line)


def _render_listing(console: Console, title: str, entries: list[HelpEntry]) -> None:
    if not entries:
        return
    console.print(Text(title, style="cmdkit.title"))
    for entry in entries:
        line = Text(f"  {entry.key}", style="cmdkit.key")
        if entry.description:
            line.append(f" - {entry.description}")
        console.print(line)
