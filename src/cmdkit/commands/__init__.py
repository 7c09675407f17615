"""Command authoring surface — runtime contract, modules, builder, help, log."""

from cmdkit.commands.builder import CommandModuleBuilder, command
from cmdkit.commands.help import HelpCommand, HelpContext, HelpEntry
from cmdkit.commands.log import CommandLog
from cmdkit.commands.metadata import CommandMetadata, GroupMetadata, ParamMetadata
from cmdkit.commands.module import CommandModule, define_command_module, resolve_command_module
from cmdkit.commands.process import ProcessResult, run_command_with_logs
from cmdkit.commands.runtime import CommandContext, CommandInvoker, CommandRuntime

__all__ = [
    "CommandContext",
    "CommandInvoker",
    "CommandLog",
    "CommandMetadata",
    "CommandModule",
    "CommandModuleBuilder",
    "CommandRuntime",
    "GroupMetadata",
    "HelpCommand",
    "HelpContext",
    "HelpEntry",
    "ParamMetadata",
    "ProcessResult",
    "command",
    "define_command_module",
    "resolve_command_module",
    "run_command_with_logs",
]
