"""SchemaValidator — checks resolved values against args/flags schemas.

Wraps the schema's own ``validate`` capability and converts its issues into
:class:`ValidationError` entries prefixed with ``args`` or ``flags``.  Args
and flags are validated independently so a single pass reports every problem.
"""

from __future__ import annotations

import logging
from typing import Any

from cmdkit.validation.types import ValidatedParams, ValidationError, ValidationResult

logger = logging.getLogger(__name__)


class SchemaValidator:
    def validate_args(self, args: list[Any], schema: Any) -> ValidationResult:
        return self._validate(args, schema, "args")

    def validate_flags(self, flags: dict[str, Any], schema: Any) -> ValidationResult:
        return self._validate(flags, schema, "flags")

    def validate_all(
        self,
        args: list[Any],
        flags: dict[str, Any],
        args_schema: Any = None,
        flags_schema: Any = None,
    ) -> ValidationResult:
        errors: list[ValidationError] = []
        validated_args = args
        validated_flags = flags

        if args_schema is not None:
            result = self.validate_args(args, args_schema)
            if result.success and result.data is not None:
                validated_args = result.data.args
            errors.extend(result.errors)

        if flags_schema is not None:
            result = self.validate_flags(flags, flags_schema)
            if result.success and result.data is not None:
                validated_flags = result.data.flags
            errors.extend(result.errors)

        if errors:
            return ValidationResult(success=False, errors=errors)
        return ValidationResult.ok(list(validated_args), dict(validated_flags))

    def format_errors(self, errors: list[ValidationError]) -> str:
        if not errors:
            return ""
        lines = [f"  • {err.dotted_path}: {err.message}" for err in errors]
        return "Validation errors:\n" + "\n".join(lines)

    def _validate(self, value: Any, schema: Any, prefix: str) -> ValidationResult:
        validate = getattr(schema, "validate", None)
        if not callable(validate):
            logger.debug("Schema %r has no validate capability; passing %s through", schema, prefix)
            return self._wrap(value, prefix)

        try:
            outcome = validate(value)
        except Exception as exc:
            # A schema that raises is reported like any other failure.
            logger.debug("Schema %r raised during validation", schema, exc_info=True)
            return ValidationResult(
                success=False,
                errors=[ValidationError(path=(prefix,), message=str(exc) or type(exc).__name__)],
            )

        if outcome.ok:
            return self._wrap(outcome.value, prefix)

        return ValidationResult(
            success=False,
            errors=[
                ValidationError(path=(prefix, *issue.path), message=issue.message, code=issue.code)
                for issue in outcome.issues
            ]
            or [ValidationError(path=(prefix,), message="Invalid value")],
        )

    @staticmethod
    def _wrap(value: Any, prefix: str) -> ValidationResult:
        if prefix == "args":
            return ValidationResult(success=True, data=ValidatedParams(args=list(value)))
        return ValidationResult(success=True, data=ValidatedParams(flags=dict(value)))
