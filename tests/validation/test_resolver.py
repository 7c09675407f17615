"""Tests for ValueResolver — file, inline JSON and raw fallbacks."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel

from cmdkit.validation.resolver import YAML_UNSUPPORTED, ResolveResult, ValueResolver
from cmdkit.validation.schema import FieldSchema, ObjectSchema, TupleSchema, argument


class Flags(BaseModel):
    config: dict[str, Any] | None = None
    name: str | None = None


class RejectingResolver(ValueResolver):
    """Fails every value, to exercise the error bookkeeping."""

    def resolve(self, value: Any, schema: Any) -> ResolveResult:
        return ResolveResult(success=False, error="rejected")


@pytest.fixture
def resolver() -> ValueResolver:
    return ValueResolver()


@pytest.fixture
def complex_schema() -> FieldSchema:
    return FieldSchema(dict[str, Any])


class TestResolve:
    def test_non_string_passes_through(self, resolver: ValueResolver, complex_schema) -> None:
        result = resolver.resolve({"a": 1}, complex_schema)
        assert result.success
        assert result.value == {"a": 1}

    def test_scalar_field_never_parsed(self, resolver: ValueResolver) -> None:
        result = resolver.resolve('{"a": 1}', FieldSchema(str))
        assert result.value == '{"a": 1}'

    def test_inline_json(self, resolver: ValueResolver, complex_schema) -> None:
        result = resolver.resolve('{"port": 8080}', complex_schema)
        assert result.success
        assert result.value == {"port": 8080}
        assert not result.from_file

    def test_inline_json_array(self, resolver: ValueResolver) -> None:
        result = resolver.resolve(" [1, 2] ", FieldSchema(list[int]))
        assert result.value == [1, 2]

    def test_invalid_json_falls_back_to_raw(self, resolver: ValueResolver, complex_schema) -> None:
        result = resolver.resolve("{not json", complex_schema)
        assert result.success
        assert result.value == "{not json"

    def test_json_file(self, resolver: ValueResolver, complex_schema, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"port": 8080}), encoding="utf-8")

        result = resolver.resolve(str(path), complex_schema)
        assert result.success
        assert result.from_file
        assert result.value == {"port": 8080}

    def test_json_compatible_yaml_file(
        self, resolver: ValueResolver, complex_schema, tmp_path: Path
    ) -> None:
        path = tmp_path / "config.yaml"
        path.write_text('{"port": 8080}', encoding="utf-8")

        assert resolver.resolve(str(path), complex_schema).value == {"port": 8080}

    def test_plain_yaml_file_passes_through_raw(
        self,
        resolver: ValueResolver,
        complex_schema,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        path = tmp_path / "config.yml"
        path.write_text("port: 8080\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="cmdkit.validation.resolver"):
            result = resolver.resolve(str(path), complex_schema)
        assert result.success
        assert result.value == str(path)
        assert not result.from_file
        assert YAML_UNSUPPORTED in caplog.text

    def test_broken_json_file_passes_through_raw(
        self,
        resolver: ValueResolver,
        complex_schema,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        path = tmp_path / "config.json"
        path.write_text("{oops", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="cmdkit.validation.resolver"):
            result = resolver.resolve(str(path), complex_schema)
        assert result.success
        assert result.value == str(path)
        assert "Invalid JSON" in caplog.text

    def test_other_suffix_falls_back_to_text(
        self, resolver: ValueResolver, tmp_path: Path
    ) -> None:
        path = tmp_path / "note.txt"
        path.write_text("  hello\n", encoding="utf-8")

        result = resolver.resolve(str(path), argument(str, file_check=True))
        assert result.from_file
        assert result.value == "hello"

    def test_missing_file_falls_back_to_raw(self, resolver: ValueResolver, complex_schema) -> None:
        result = resolver.resolve("./does-not-exist.json", complex_schema)
        assert result.success
        assert result.value == "./does-not-exist.json"


class TestLooksLikeFilePath:
    @pytest.mark.parametrize(
        "value",
        ["./a", "../a", "/etc/a", "C:\\data\\a", "d:/a", "data.json", "x.YAML", "x.yml", "x.toml"],
    )
    def test_path_like(self, resolver: ValueResolver, value: str) -> None:
        assert resolver.looks_like_file_path(value)

    @pytest.mark.parametrize("value", ["hello", '{"a": 1}', "data.txt", "json"])
    def test_not_path_like(self, resolver: ValueResolver, value: str) -> None:
        assert not resolver.looks_like_file_path(value)


class TestResolveFlags:
    def test_only_complex_flags_resolved(self, resolver: ValueResolver) -> None:
        resolution = resolver.resolve_flags(
            {"config": '{"a": 1}', "name": '{"b": 2}', "extra": "x"}, ObjectSchema(Flags)
        )
        assert resolution.errors == []
        assert resolution.resolved == {"config": {"a": 1}, "name": '{"b": 2}', "extra": "x"}

    def test_unparseable_file_leaves_no_error(
        self, resolver: ValueResolver, tmp_path: Path
    ) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("a: 1", encoding="utf-8")

        resolution = resolver.resolve_flags({"config": str(path)}, ObjectSchema(Flags))
        assert resolution.errors == []
        assert resolution.resolved == {"config": str(path)}

    def test_errors_carry_flag_path(self) -> None:
        resolution = RejectingResolver().resolve_flags({"config": "x"}, ObjectSchema(Flags))
        errors = [(e.path, e.message) for e in resolution.errors]
        assert errors == [(("flags", "config"), "rejected")]

    def test_no_schema_shape(self, resolver: ValueResolver) -> None:
        resolution = resolver.resolve_flags({"a": "1"}, FieldSchema(str))
        assert resolution.resolved == {"a": "1"}


class TestResolveArgs:
    def test_lines_up_with_items(self, resolver: ValueResolver) -> None:
        schema = TupleSchema(argument(str), argument(dict[str, Any]))
        resolution = resolver.resolve_args(["{}", '{"a": 1}', "extra"], schema)
        assert resolution.resolved == ["{}", {"a": 1}, "extra"]

    def test_errors_carry_argument_index(self) -> None:
        schema = TupleSchema(argument(str), argument(dict[str, Any]))
        resolution = RejectingResolver().resolve_args(["a", "b"], schema)
        assert [e.path for e in resolution.errors] == [("args", "0"), ("args", "1")]
        assert resolution.errors[0].code == "resolution"
