"""Validation result types shared by the pipeline, commands and executor.

INVARIANT: a ``ValidationResult`` with ``success=False`` always stops the
command before Run/DryRun.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from cmdkit.commands.log import CommandLog
    from cmdkit.domain.params import CommandParams


class ValidationError(BaseModel):
    """One field-scoped problem.

    Attributes:
        path: Location of the field, e.g. ``("flags", "config", "port")``.
        message: Human-readable description.
        code: Machine-readable code (pydantic error type or a custom code).
    """

    model_config = {"frozen": True}

    path: tuple[str | int, ...] = ()
    message: str
    code: str | None = None

    @property
    def dotted_path(self) -> str:
        return ".".join(str(p) for p in self.path) if self.path else "value"


class ValidatedParams(BaseModel):
    """Resolved and validated positional args and flags."""

    model_config = {"frozen": True}

    args: list[Any] = Field(default_factory=list)
    flags: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(BaseModel):
    """Outcome of validating one invocation."""

    model_config = {"frozen": True}

    success: bool
    data: ValidatedParams | None = None
    errors: list[ValidationError] = Field(default_factory=list)

    @classmethod
    def ok(
        cls, args: list[Any] | None = None, flags: dict[str, Any] | None = None
    ) -> ValidationResult:
        if args is None and flags is None:
            return cls(success=True)
        return cls(success=True, data=ValidatedParams(args=args or [], flags=flags or {}))

    @classmethod
    def fail(cls, *errors: ValidationError | Mapping[str, Any] | str) -> ValidationResult:
        normalized = [
            ValidationError(message=e) if isinstance(e, str) else ValidationError.model_validate(e)
            for e in errors
        ]
        return cls(success=False, errors=normalized)


@dataclass(frozen=True)
class ValidateContext:
    """What a command's custom ``validate`` callback receives.

    ``root_validate`` runs the default resolve-then-validate pipeline over
    the raw input.  It may be called any number of times, or never.
    """

    args: list[Any]
    flags: dict[str, Any]
    params: CommandParams
    log: CommandLog
    root_validate: Callable[[], ValidationResult]


ValidateCallback = Callable[[ValidateContext], ValidationResult | Mapping[str, Any]]
