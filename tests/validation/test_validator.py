"""Tests for SchemaValidator and the validation result types."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from cmdkit.validation.schema import ObjectSchema, SchemaOutcome, TupleSchema, argument
from cmdkit.validation.types import ValidationError, ValidationResult
from cmdkit.validation.validator import SchemaValidator


class Flags(BaseModel):
    port: int
    host: str = "localhost"


class TestValidationResult:
    def test_ok_without_data(self) -> None:
        result = ValidationResult.ok()
        assert result.success
        assert result.data is None

    def test_ok_with_data(self) -> None:
        result = ValidationResult.ok(["a"], {"b": 1})
        assert result.data is not None
        assert result.data.args == ["a"]
        assert result.data.flags == {"b": 1}

    def test_fail_normalizes_errors(self) -> None:
        result = ValidationResult.fail("plain", {"path": ("flags", "x"), "message": "bad"})
        assert not result.success
        assert result.errors[0] == ValidationError(message="plain")
        assert result.errors[1].dotted_path == "flags.x"

    def test_dotted_path_without_path(self) -> None:
        assert ValidationError(message="m").dotted_path == "value"


class TestSchemaValidator:
    def test_validates_args_and_flags(self) -> None:
        result = SchemaValidator().validate_all(
            ["3"], {"port": "8080"}, TupleSchema(argument(int)), ObjectSchema(Flags)
        )
        assert result.success
        assert result.data is not None
        assert result.data.args == [3]
        assert result.data.flags == {"port": 8080, "host": "localhost"}

    def test_collects_errors_from_both(self) -> None:
        result = SchemaValidator().validate_all(
            ["x"], {}, TupleSchema(argument(int)), ObjectSchema(Flags)
        )
        assert not result.success
        assert [e.path for e in result.errors] == [("args", "0"), ("flags", "port")]

    def test_no_schemas_passes_input_through(self) -> None:
        result = SchemaValidator().validate_all(["a"], {"b": True})
        assert result.data is not None
        assert result.data.args == ["a"]
        assert result.data.flags == {"b": True}

    def test_schema_without_validate_passes_through(self) -> None:
        result = SchemaValidator().validate_flags({"a": 1}, object())
        assert result.success
        assert result.data is not None
        assert result.data.flags == {"a": 1}

    def test_raising_schema_becomes_error(self) -> None:
        class Exploding:
            def validate(self, value: Any) -> SchemaOutcome:
                raise RuntimeError("boom")

        result = SchemaValidator().validate_args([], Exploding())
        assert not result.success
        assert result.errors[0].message == "boom"
        assert result.errors[0].path == ("args",)

    def test_failed_outcome_without_issues(self) -> None:
        class Refusing:
            def validate(self, value: Any) -> SchemaOutcome:
                return SchemaOutcome(ok=False)

        result = SchemaValidator().validate_flags({}, Refusing())
        assert result.errors[0].message == "Invalid value"


class TestFormatErrors:
    def test_empty(self) -> None:
        assert SchemaValidator().format_errors([]) == ""

    def test_bulleted_lines(self) -> None:
        errors = [
            ValidationError(path=("flags", "port"), message="Field required"),
            ValidationError(message="bad"),
        ]
        assert SchemaValidator().format_errors(errors) == (
            "Validation errors:\n  • flags.port: Field required\n  • value: bad"
        )
