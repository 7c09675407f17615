"""SchemaIntrospector — decides how a declared field should be resolved.

Complex fields (objects, arrays, records) default to file/inline-JSON
resolution because structured data is usually supplied that way; scalars
default to literal values.  An explicit ``file_check`` always wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from cmdkit.validation.schema import COMPLEX_TYPE_NAMES, WRAPPER_TYPE_NAMES, FieldMeta

logger = logging.getLogger(__name__)

_FILE_CHECK_KEYS = ("file_check", "fileCheck")
_DISPLAY_NAME_KEYS = ("display_name", "displayName")


def _coerce_meta(raw: Any) -> FieldMeta | None:
    """Normalize a metadata marker or mapping; None when nothing usable is found."""
    if isinstance(raw, FieldMeta):
        return raw
    if not isinstance(raw, Mapping):
        return None

    file_check = next((raw[k] for k in _FILE_CHECK_KEYS if k in raw), None)
    display_name = next((raw[k] for k in _DISPLAY_NAME_KEYS if k in raw), None)
    if file_check is None and display_name is None:
        return None
    return FieldMeta(
        file_check=bool(file_check) if file_check is not None else None,
        display_name=str(display_name) if display_name is not None else None,
    )


class SchemaIntrospector:
    """Reads type shape and metadata from schemas without validating anything."""

    def get_type_name(self, schema: Any) -> str:
        name = getattr(schema, "type_name", None)
        if isinstance(name, str):
            return name
        return type(schema).__name__

    def unwrap_schema(self, schema: Any) -> Any:
        """Strip optional/default/annotated layers down to the base schema."""
        while self.get_type_name(schema) in WRAPPER_TYPE_NAMES:
            inner = schema.unwrap()
            if inner is schema:
                break
            schema = inner
        return schema

    def is_complex_type(self, schema: Any) -> bool:
        return self.get_type_name(self.unwrap_schema(schema)) in COMPLEX_TYPE_NAMES

    def get_meta(self, schema: Any) -> FieldMeta:
        """Return declared metadata, whichever way the schema stores it.

        ``meta()`` (a marker or mapping) is consulted first, then a pydantic
        ``json_schema_extra`` mapping.  Defaults to an empty FieldMeta.
        """
        meta_fn = getattr(schema, "meta", None)
        if callable(meta_fn):
            try:
                found = _coerce_meta(meta_fn())
            except Exception:
                logger.debug("meta() failed on %r", schema, exc_info=True)
                found = None
            if found is not None:
                return found

        found = _coerce_meta(getattr(schema, "json_schema_extra", None))
        return found if found is not None else FieldMeta()

    def should_file_check(self, schema: Any) -> bool:
        meta = self.get_meta(schema)
        if meta.file_check is not None:
            return meta.file_check
        return self.is_complex_type(schema)

    def get_object_shape(self, schema: Any) -> dict[str, Any] | None:
        """Field schemas of an object schema, keyed by flag name."""
        shape = getattr(self.unwrap_schema(schema), "shape", None)
        if callable(shape):
            shape = shape()
        return dict(shape) if isinstance(shape, Mapping) else None

    def get_tuple_items(self, schema: Any) -> list[Any] | None:
        """Item schemas of a positional-args tuple schema."""
        items = getattr(schema, "items", None)
        if callable(items):
            items = items()
        return list(items) if isinstance(items, (list, tuple)) else None
