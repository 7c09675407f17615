"""ValidationPipeline — resolve, then validate, with an optional custom hook.

Without a custom validator the default pipeline runs directly:

1. Resolution: file paths and inline JSON become structured values.
2. Schema validation: resolved values are checked against the schemas.

With a custom validator, control passes entirely to the callback.  It gets
a :class:`ValidateContext` whose ``root_validate()`` runs the default
pipeline on demand (zero, one or several times).  If the callback never calls
it, no resolution or schema validation happens at all.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from cmdkit.validation.introspector import SchemaIntrospector
from cmdkit.validation.resolver import ValueResolver
from cmdkit.validation.types import (
    ValidateCallback,
    ValidateContext,
    ValidatedParams,
    ValidationError,
    ValidationResult,
)
from cmdkit.validation.validator import SchemaValidator

if TYPE_CHECKING:
    from cmdkit.commands.log import CommandLog
    from cmdkit.domain.params import CommandParams

logger = logging.getLogger(__name__)


class ValidationPipeline:
    def __init__(
        self,
        introspector: SchemaIntrospector | None = None,
        resolver: ValueResolver | None = None,
        validator: SchemaValidator | None = None,
    ) -> None:
        self.introspector = introspector or SchemaIntrospector()
        self.resolver = resolver or ValueResolver(self.introspector)
        self.validator = validator or SchemaValidator()

    def execute(
        self,
        args: list[Any],
        flags: dict[str, Any],
        params: CommandParams,
        *,
        log: CommandLog,
        args_schema: Any = None,
        flags_schema: Any = None,
        validate: ValidateCallback | None = None,
    ) -> ValidationResult:
        """Validate one invocation's raw args and flags."""
        raw_args = copy.deepcopy(list(args))
        raw_flags = copy.deepcopy(dict(flags))

        if validate is None:
            return self.root_validate(raw_args, raw_flags, args_schema, flags_schema)

        last_data: list[ValidatedParams] = []

        def root_validate() -> ValidationResult:
            result = self.root_validate(
                copy.deepcopy(raw_args), copy.deepcopy(raw_flags), args_schema, flags_schema
            )
            if result.success and result.data is not None:
                last_data.append(result.data)
            return result

        context = ValidateContext(
            args=copy.deepcopy(raw_args),
            flags=copy.deepcopy(raw_flags),
            params=params,
            log=log,
            root_validate=root_validate,
        )
        result = self._coerce(validate(context))

        if result.success and result.data is None:
            data = last_data[-1] if last_data else ValidatedParams(args=raw_args, flags=raw_flags)
            return result.model_copy(update={"data": data})
        return result

    def root_validate(
        self,
        args: list[Any],
        flags: dict[str, Any],
        args_schema: Any = None,
        flags_schema: Any = None,
    ) -> ValidationResult:
        """The default two-phase pipeline: resolution, then schema validation."""
        resolved_args = list(args)
        resolved_flags = dict(flags)
        resolution_errors: list[ValidationError] = []

        if args_schema is not None:
            resolution = self.resolver.resolve_args(resolved_args, args_schema)
            resolved_args = resolution.resolved
            resolution_errors.extend(resolution.errors)

        if flags_schema is not None:
            resolution = self.resolver.resolve_flags(resolved_flags, flags_schema)
            resolved_flags = resolution.resolved
            resolution_errors.extend(resolution.errors)

        if resolution_errors:
            return ValidationResult(success=False, errors=resolution_errors)

        return self.validator.validate_all(resolved_args, resolved_flags, args_schema, flags_schema)

    def format_errors(self, result: ValidationResult) -> str:
        if result.success:
            return ""
        return self.validator.format_errors(result.errors)

    @staticmethod
    def _coerce(result: Any) -> ValidationResult:
        if isinstance(result, ValidationResult):
            return result
        if isinstance(result, Mapping):
            return ValidationResult.model_validate(result)
        raise TypeError(
            "validate callback must return a ValidationResult or mapping, "
            f"got {type(result).__name__}"
        )
