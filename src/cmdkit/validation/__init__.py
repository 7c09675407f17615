"""Argument and flag validation: schemas, resolution and the validation pipeline."""

from cmdkit.validation.introspector import SchemaIntrospector
from cmdkit.validation.pipeline import ValidationPipeline
from cmdkit.validation.resolver import ResolveResult, ValueResolver
from cmdkit.validation.schema import (
    FieldMeta,
    FieldSchema,
    ObjectSchema,
    Schema,
    SchemaIssue,
    SchemaOutcome,
    TupleSchema,
    argument,
)
from cmdkit.validation.types import (
    ValidateCallback,
    ValidateContext,
    ValidatedParams,
    ValidationError,
    ValidationResult,
)
from cmdkit.validation.validator import SchemaValidator

__all__ = [
    "FieldMeta",
    "FieldSchema",
    "ObjectSchema",
    "ResolveResult",
    "Schema",
    "SchemaIntrospector",
    "SchemaIssue",
    "SchemaOutcome",
    "SchemaValidator",
    "TupleSchema",
    "ValidateCallback",
    "ValidateContext",
    "ValidatedParams",
    "ValidationError",
    "ValidationPipeline",
    "ValidationResult",
    "argument",
]
