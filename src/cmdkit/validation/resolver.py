"""ValueResolver — turns raw CLI strings into structured values.

For fields that allow it (see :meth:`SchemaIntrospector.should_file_check`)
a raw string is tried, in order, as a path to a data file, then as inline
JSON.  When neither works the raw string is returned unchanged so that
schema validation reports the mismatch.  A data file that exists but cannot
be parsed (including non-JSON YAML) is logged as a warning and treated the
same way.  Nothing here raises for bad input.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cmdkit.validation.introspector import SchemaIntrospector
from cmdkit.validation.types import ValidationError

logger = logging.getLogger(__name__)

_DRIVE_PATH = re.compile(r"^[a-zA-Z]:[\\/]")
_DATA_SUFFIX = re.compile(r"\.(json|ya?ml|toml)$", re.IGNORECASE)

YAML_UNSUPPORTED = "YAML parsing not fully supported. Use JSON format or pre-convert YAML to JSON."


@dataclass(frozen=True)
class ResolveResult:
    """Outcome of resolving a single value."""

    success: bool
    value: Any = None
    error: str | None = None
    from_file: bool = False


@dataclass
class FieldResolution:
    """Resolved values for a whole args list or flags mapping."""

    resolved: Any
    errors: list[ValidationError] = field(default_factory=list)


def _resolution_error(path: tuple[str, ...], result: ResolveResult) -> ValidationError:
    message = result.error or "Could not resolve value"
    return ValidationError(path=path, message=message, code="resolution")


class ValueResolver:
    def __init__(self, introspector: SchemaIntrospector | None = None) -> None:
        self.introspector = introspector or SchemaIntrospector()

    def resolve(self, value: Any, schema: Any) -> ResolveResult:
        """Resolve *value* for a field declared by *schema*."""
        if not isinstance(value, str):
            return ResolveResult(success=True, value=value)

        if not self.introspector.should_file_check(schema):
            return ResolveResult(success=True, value=value)

        if self.looks_like_file_path(value):
            file_result = self._resolve_from_file(value)
            if file_result.success:
                return file_result
            if Path(value).is_file():
                logger.warning("Could not load %s: %s", value, file_result.error)
            else:
                logger.debug("File resolution skipped for %r: %s", value, file_result.error)

        json_result = self._parse_as_json(value)
        if json_result.success:
            return json_result

        return ResolveResult(success=True, value=value)

    def resolve_flags(self, flags: dict[str, Any], flags_schema: Any) -> FieldResolution:
        """Resolve every declared flag that was supplied, in declaration order."""
        resolved = dict(flags)
        errors: list[ValidationError] = []

        shape = self.introspector.get_object_shape(flags_schema)
        if not shape:
            return FieldResolution(resolved)

        for name, field_schema in shape.items():
            if flags.get(name) is None:
                continue
            result = self.resolve(flags[name], field_schema)
            if result.success:
                resolved[name] = result.value
            else:
                errors.append(_resolution_error(("flags", name), result))

        return FieldResolution(resolved, errors)

    def resolve_args(self, args: list[Any], args_schema: Any) -> FieldResolution:
        """Resolve positional arguments against the tuple items they line up with."""
        resolved = list(args)
        errors: list[ValidationError] = []

        items = self.introspector.get_tuple_items(args_schema)
        if not items:
            return FieldResolution(resolved)

        for index, (raw, item_schema) in enumerate(zip(args, items, strict=False)):
            result = self.resolve(raw, item_schema)
            if result.success:
                resolved[index] = result.value
            else:
                errors.append(_resolution_error(("args", str(index)), result))

        return FieldResolution(resolved, errors)

    def looks_like_file_path(self, value: str) -> bool:
        if value.startswith(("./", "../", "/")):
            return True
        if _DRIVE_PATH.match(value):
            return True
        return bool(_DATA_SUFFIX.search(value))

    # ------------------------------------------------------------------

    def _resolve_from_file(self, raw_path: str) -> ResolveResult:
        path = Path(raw_path)
        if not path.is_file():
            return ResolveResult(success=False, error=f"File not found: {raw_path}")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return ResolveResult(success=False, error=f"Failed to read file {raw_path}: {exc}")

        suffix = path.suffix.lower()
        if suffix == ".json":
            try:
                return ResolveResult(success=True, value=json.loads(content), from_file=True)
            except json.JSONDecodeError as exc:
                return ResolveResult(success=False, error=f"Invalid JSON in {raw_path}: {exc}")

        if suffix in (".yaml", ".yml"):
            # Only the JSON subset of YAML is understood.
            try:
                return ResolveResult(success=True, value=json.loads(content), from_file=True)
            except json.JSONDecodeError:
                return ResolveResult(success=False, error=YAML_UNSUPPORTED)

        try:
            return ResolveResult(success=True, value=json.loads(content), from_file=True)
        except json.JSONDecodeError:
            return ResolveResult(success=True, value=content.strip(), from_file=True)

    def _parse_as_json(self, value: str) -> ResolveResult:
        trimmed = value.strip()
        if not trimmed.startswith(("{", "[")):
            return ResolveResult(success=False, error="Not a JSON structure")
        try:
            return ResolveResult(success=True, value=json.loads(trimmed))
        except json.JSONDecodeError:
            return ResolveResult(success=False, error="Invalid JSON syntax")
