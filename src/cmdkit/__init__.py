"""cmdkit — a runtime for file-based command-line applications.

Commands live in a directory tree (or are registered in-process), declare
their args and flags as schemas, and run through a fixed lifecycle:
validate, configure context, init, run or dry-run, cleanup.
"""

__version__ = "0.1.0"

from cmdkit.app import CLI
from cmdkit.commands import (
    CommandContext,
    CommandLog,
    CommandMetadata,
    CommandModule,
    CommandModuleBuilder,
    CommandRuntime,
    GroupMetadata,
    command,
    define_command_module,
    run_command_with_logs,
)
from cmdkit.config.models import CLIConfig, CommandSource
from cmdkit.domain.errors import (
    CommandBuildError,
    CommandKitError,
    CommandLoadError,
    CommandProcessError,
    ConfigurationError,
    DuplicateCommandKeyError,
)
from cmdkit.domain.params import CommandParams
from cmdkit.plugins import hookimpl
from cmdkit.routing.registry import CommandRegistry
from cmdkit.validation import (
    FieldMeta,
    ObjectSchema,
    TupleSchema,
    ValidateContext,
    ValidationError,
    ValidationResult,
    argument,
)

__all__ = [
    "CLI",
    "CLIConfig",
    "CommandBuildError",
    "CommandContext",
    "CommandKitError",
    "CommandLoadError",
    "CommandLog",
    "CommandMetadata",
    "CommandModule",
    "CommandModuleBuilder",
    "CommandParams",
    "CommandProcessError",
    "CommandRegistry",
    "CommandRuntime",
    "CommandSource",
    "ConfigurationError",
    "DuplicateCommandKeyError",
    "FieldMeta",
    "GroupMetadata",
    "ObjectSchema",
    "TupleSchema",
    "ValidateContext",
    "ValidationError",
    "ValidationResult",
    "__version__",
    "argument",
    "command",
    "define_command_module",
    "hookimpl",
    "run_command_with_logs",
]
