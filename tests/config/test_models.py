"""Tests for the CLI config models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cmdkit.config.models import (
    DEFAULT_COMMANDS_PATH,
    CLIConfig,
    CommandSource,
    RuntimeConfig,
    normalize_command_sources,
)


class TestCLIConfig:
    def test_minimal(self) -> None:
        config = CLIConfig(name="Test CLI", tokens=["test", "t"])
        assert config.token == "test"
        assert config.version == "0.0.0"
        assert config.description is None
        assert config.runtime == RuntimeConfig()

    def test_tokens_required(self) -> None:
        with pytest.raises(ValidationError):
            CLIConfig(name="Test CLI", tokens=[])

    def test_blank_token_rejected(self) -> None:
        with pytest.raises(ValidationError, match="tokens must not be blank"):
            CLIConfig(name="Test CLI", tokens=["  "])

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            CLIConfig(name="", tokens=["test"])

    def test_frozen(self) -> None:
        config = CLIConfig(name="Test CLI", tokens=["test"])
        with pytest.raises(ValidationError):
            config.name = "Other"  # type: ignore[misc]

    def test_runtime_table(self) -> None:
        config = CLIConfig.model_validate(
            {"name": "x", "tokens": ["x"], "runtime": {"verbose": True}}
        )
        assert config.runtime.verbose


class TestNormalizeCommandSources:
    def test_default(self) -> None:
        assert normalize_command_sources(None) == [CommandSource(path=DEFAULT_COMMANDS_PATH)]

    def test_single_path(self) -> None:
        assert normalize_command_sources("./cmds") == [CommandSource(path="./cmds")]

    def test_mixed_list(self) -> None:
        sources = normalize_command_sources(
            ["./a", {"path": "./b", "root": "tools"}, CommandSource(path="./c")]
        )
        assert sources == [
            CommandSource(path="./a"),
            CommandSource(path="./b", root="tools"),
            CommandSource(path="./c"),
        ]

    def test_from_config(self) -> None:
        config = CLIConfig.model_validate(
            {"name": "x", "tokens": ["x"], "commands": [{"path": "./b", "root": "tools"}]}
        )
        assert config.command_sources() == [CommandSource(path="./b", root="tools")]


class TestCommandSource:
    def test_describe(self) -> None:
        assert CommandSource(path="./a").describe() == "./a"
        assert CommandSource(path="./a", root="x").describe() == "./a (root: x)"

    def test_resolved_relative(self, tmp_path: Path) -> None:
        source = CommandSource(path="commands", root="x").resolved(tmp_path)
        assert source.path == str(tmp_path / "commands")
        assert source.root == "x"

    def test_resolved_absolute_unchanged(self, tmp_path: Path) -> None:
        absolute = str(tmp_path / "commands")
        assert CommandSource(path=absolute).resolved(Path("/elsewhere")).path == absolute
