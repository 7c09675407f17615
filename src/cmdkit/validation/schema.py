"""Schema capability consumed by the validation layer.

The runtime never reaches into a validation library directly. Everything it
needs from a schema goes through the narrow :class:`Schema` protocol:

- ``type_name``: the name of the outermost layer (``"default"``,
  ``"optional"``, ``"annotated"``, ``"object"``, ``"array"``, ``"record"``,
  ``"tuple"``, ``"str"``, ...).
- ``is_complex()``: whether the unwrapped base type is structured data.
- ``meta()``: declared field metadata (:class:`FieldMeta`) or None.
- ``unwrap()``: the schema with one modifier layer removed.
- ``validate(value)``: a :class:`SchemaOutcome`, never an exception.

The concrete schemas here adapt pydantic: :class:`FieldSchema` wraps a type
annotation through ``pydantic.TypeAdapter``, :class:`ObjectSchema` wraps a
``BaseModel`` used for flags, and :class:`TupleSchema` orders positional
argument fields.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Literal, Protocol, Union, get_args, get_origin, runtime_checkable

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

MISSING: Any = PydanticUndefined

COMPLEX_TYPE_NAMES = frozenset({"object", "array", "record"})
WRAPPER_TYPE_NAMES = frozenset({"default", "optional", "annotated"})


@dataclass(frozen=True)
class FieldMeta:
    """Per-field CLI metadata.

    Attach it through ``Annotated[dict[str, Any], FieldMeta(file_check=False)]``
    or pass it to :func:`argument`.  The same keys are also accepted as a
    mapping in pydantic's ``Field(json_schema_extra={...})``.

    Attributes:
        file_check: Whether a raw value may be loaded from a file or parsed as
            inline JSON.  None means "decide from the type".
        display_name: Name shown in help output instead of the field name.
    """

    file_check: bool | None = None
    display_name: str | None = None


class SchemaIssue(BaseModel):
    """One validation failure reported by a schema."""

    model_config = {"frozen": True}

    path: tuple[str, ...] = ()
    message: str
    code: str | None = None


class SchemaOutcome(BaseModel):
    """Result of ``Schema.validate``: a value or a list of issues."""

    model_config = {"frozen": True}

    ok: bool
    value: Any = None
    issues: list[SchemaIssue] = Field(default_factory=list)


@runtime_checkable
class Schema(Protocol):
    """Narrow capability the runtime needs from any schema implementation."""

    @property
    def type_name(self) -> str: ...

    def is_complex(self) -> bool: ...

    def meta(self) -> FieldMeta | Mapping[str, Any] | None: ...

    def unwrap(self) -> Schema: ...

    def validate(self, value: Any) -> SchemaOutcome: ...


# ---------------------------------------------------------------------------
# Annotation helpers
# ---------------------------------------------------------------------------


def _is_union(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, types.UnionType)


def _is_optional(annotation: Any) -> bool:
    return _is_union(annotation) and type(None) in get_args(annotation)


def _strip_none(annotation: Any) -> Any:
    members = tuple(a for a in get_args(annotation) if a is not type(None))
    if len(members) == 1:
        return members[0]
    return Union[members]  # noqa: UP007


def _base_type_name(annotation: Any) -> str:
    """Classify an annotation that carries no modifier layer."""
    if annotation is Any:
        return "any"
    origin = get_origin(annotation) or annotation
    if origin is Literal:
        return "literal"
    if _is_union(annotation):
        return "union"
    if isinstance(origin, type):
        if issubclass(origin, BaseModel) or typing.is_typeddict(origin):
            return "object"
        if dataclasses.is_dataclass(origin):
            return "object"
        if issubclass(origin, (str, bytes, bytearray)):
            return origin.__name__
        if issubclass(origin, Mapping):
            return "record"
        if issubclass(origin, (Sequence, AbstractSet)):
            return "array"
        return origin.__name__
    return getattr(annotation, "__name__", repr(annotation))


def _find_marker(annotation: Any) -> FieldMeta | None:
    """Find a FieldMeta marker in Annotated metadata, looking through Optional."""
    if get_origin(annotation) is Annotated:
        inner, *extras = get_args(annotation)
        for extra in extras:
            if isinstance(extra, FieldMeta):
                return extra
        return _find_marker(inner)
    if _is_optional(annotation):
        return _find_marker(_strip_none(annotation))
    return None


def _find_field_info(annotation: Any) -> FieldInfo | None:
    if get_origin(annotation) is Annotated:
        for extra in get_args(annotation)[1:]:
            if isinstance(extra, FieldInfo):
                return extra
    return None


def _issues_from(exc: PydanticValidationError, prefix: tuple[str, ...] = ()) -> list[SchemaIssue]:
    return [
        SchemaIssue(
            path=prefix + tuple(str(part) for part in err["loc"]),
            message=err["msg"],
            code=err["type"],
        )
        for err in exc.errors(include_url=False)
    ]


# ---------------------------------------------------------------------------
# Concrete schemas
# ---------------------------------------------------------------------------


class FieldSchema:
    """A single field backed by a type annotation.

    Layers are peeled in a fixed order by :meth:`unwrap`: the declared
    default first, then ``Annotated`` metadata, then ``| None``.
    """

    def __init__(
        self,
        annotation: Any,
        default: Any = MISSING,
        *,
        meta: FieldMeta | None = None,
        description: str | None = None,
        json_schema_extra: Mapping[str, Any] | None = None,
    ) -> None:
        self.annotation = annotation
        self.default = default
        self.description = description
        self.json_schema_extra = json_schema_extra
        self._meta = meta

        info = _find_field_info(annotation)
        if info is not None:
            if self.description is None:
                self.description = info.description
            if self.json_schema_extra is None and isinstance(info.json_schema_extra, Mapping):
                self.json_schema_extra = info.json_schema_extra

    @classmethod
    def from_field_info(cls, info: FieldInfo) -> FieldSchema:
        """Build a FieldSchema from a pydantic model field."""
        annotation: Any = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        default = MISSING
        if not info.is_required():
            default = info.get_default(call_default_factory=True)
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, Mapping) else None
        return cls(annotation, default, description=info.description, json_schema_extra=extra)

    def __repr__(self) -> str:
        return f"FieldSchema({self.type_name}, annotation={self.annotation!r})"

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def is_optional(self) -> bool:
        """True when the field may be omitted (it has a default or accepts None)."""
        if self.has_default:
            return True
        annotation = self.annotation
        while get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        return _is_optional(annotation)

    @property
    def type_name(self) -> str:
        if self.has_default:
            return "default"
        if get_origin(self.annotation) is Annotated:
            return "annotated"
        if _is_optional(self.annotation):
            return "optional"
        return _base_type_name(self.annotation)

    def is_complex(self) -> bool:
        schema: FieldSchema = self
        while schema.type_name in WRAPPER_TYPE_NAMES:
            schema = schema.unwrap()
        return schema.type_name in COMPLEX_TYPE_NAMES

    def meta(self) -> FieldMeta | None:
        if self._meta is not None:
            return self._meta
        return _find_marker(self.annotation)

    def unwrap(self) -> FieldSchema:
        kind = self.type_name
        if kind == "default":
            inner: Any = self.annotation
        elif kind == "annotated":
            inner = get_args(self.annotation)[0]
        elif kind == "optional":
            inner = _strip_none(self.annotation)
        else:
            return self
        return FieldSchema(
            inner,
            meta=self._meta,
            description=self.description,
            json_schema_extra=self.json_schema_extra,
        )

    @cached_property
    def _adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self.annotation)

    def validate(self, value: Any) -> SchemaOutcome:
        if value is MISSING:
            if self.has_default:
                return SchemaOutcome(ok=True, value=self.default)
            if self.is_optional:
                return SchemaOutcome(ok=True, value=None)
            return SchemaOutcome(
                ok=False,
                issues=[SchemaIssue(message="Field required", code="missing")],
            )
        try:
            validated = self._adapter.validate_python(value)
        except PydanticValidationError as exc:
            return SchemaOutcome(ok=False, issues=_issues_from(exc))
        return SchemaOutcome(ok=True, value=self._adapter.dump_python(validated))


class ObjectSchema:
    """Flags schema backed by a pydantic model.

    Field keys are the model aliases where declared, so a field
    ``dry_run: bool = Field(False, alias="dry-run")`` maps to ``--dry-run``.
    Unknown keys are ignored the way the model's own config decides.
    """

    type_name = "object"

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model

    def __repr__(self) -> str:
        return f"ObjectSchema({self.model.__name__})"

    def is_complex(self) -> bool:
        return True

    def meta(self) -> FieldMeta | None:
        return None

    def unwrap(self) -> ObjectSchema:
        return self

    def shape(self) -> dict[str, FieldSchema]:
        return {
            info.alias or name: FieldSchema.from_field_info(info)
            for name, info in self.model.model_fields.items()
        }

    def validate(self, value: Any) -> SchemaOutcome:
        try:
            model = self.model.model_validate(value)
        except PydanticValidationError as exc:
            return SchemaOutcome(ok=False, issues=_issues_from(exc))
        return SchemaOutcome(ok=True, value=model.model_dump(by_alias=True))


class TupleSchema:
    """Ordered positional-argument schema.

    Missing trailing positions take the item default (or None when the item
    is optional); surplus positions are rejected.
    """

    type_name = "tuple"

    def __init__(self, *items: FieldSchema) -> None:
        self._items = list(items)

    def __repr__(self) -> str:
        return f"TupleSchema({', '.join(repr(i) for i in self._items)})"

    def is_complex(self) -> bool:
        return False

    def meta(self) -> FieldMeta | None:
        return None

    def unwrap(self) -> TupleSchema:
        return self

    def items(self) -> list[FieldSchema]:
        return list(self._items)

    def validate(self, value: Any) -> SchemaOutcome:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return SchemaOutcome(
                ok=False,
                issues=[SchemaIssue(message="Input should be a valid list", code="list_type")],
            )

        values = list(value)
        result: list[Any] = []
        issues: list[SchemaIssue] = []
        for index, item in enumerate(self._items):
            raw = values[index] if index < len(values) else MISSING
            outcome = item.validate(raw)
            if outcome.ok:
                result.append(outcome.value)
            else:
                issues.extend(
                    issue.model_copy(update={"path": (str(index), *issue.path)})
                    for issue in outcome.issues
                )

        for index in range(len(self._items), len(values)):
            issues.append(
                SchemaIssue(
                    path=(str(index),),
                    message=f"Unexpected extra argument: {values[index]!r}",
                    code="too_many_arguments",
                )
            )

        if issues:
            return SchemaOutcome(ok=False, issues=issues)
        return SchemaOutcome(ok=True, value=result)


# ---------------------------------------------------------------------------
# Authoring helpers
# ---------------------------------------------------------------------------


def argument(
    annotation: Any = str,
    default: Any = MISSING,
    *,
    file_check: bool | None = None,
    display_name: str | None = None,
    description: str | None = None,
) -> FieldSchema:
    """Declare one positional argument.

    ``argument(str | None, "world", description="Name to greet")`` is an
    optional string that falls back to ``"world"``.
    """
    meta = None
    if file_check is not None or display_name is not None:
        meta = FieldMeta(file_check=file_check, display_name=display_name)
    return FieldSchema(annotation, default, meta=meta, description=description)


def as_args_schema(value: Any) -> Any:
    """Coerce a TupleSchema, a sequence of items, or None into an args schema."""
    if value is None or isinstance(value, TupleSchema):
        return value
    if isinstance(value, Sequence) and not isinstance(value, str):
        return TupleSchema(*(v if isinstance(v, FieldSchema) else FieldSchema(v) for v in value))
    return value


def as_flags_schema(value: Any) -> Any:
    """Coerce a pydantic model class, an ObjectSchema, or None into a flags schema."""
    if isinstance(value, type) and issubclass(value, BaseModel):
        return ObjectSchema(value)
    return value
