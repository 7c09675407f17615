"""Tests for LocalFileSystemHooks — entry resolution and module loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmdkit.commands.metadata import GroupMetadata
from cmdkit.commands.module import CommandModule
from cmdkit.config.models import CommandSource
from cmdkit.domain.errors import CommandLoadError
from cmdkit.infrastructure.filesystem import LocalFileSystemHooks
from tests.conftest import simple_command, write_command


@pytest.fixture
def hooks() -> LocalFileSystemHooks:
    return LocalFileSystemHooks()


@pytest.fixture
def commands_dir(tmp_path: Path) -> Path:
    root = tmp_path / "commands"
    write_command(root, "hello.py", simple_command("hello"))
    group_source = 'metadata = {"name": "Scaffold", "description": "Gen"}\n'
    write_command(root, "scaffold/_group.py", group_source)
    write_command(root, "scaffold/cloud.py", simple_command("cloud"))
    write_command(root, "scaffold/cloud/aws.py", simple_command("aws"))
    write_command(root, "_helpers.py", "VALUE = 1\n")
    write_command(root, ".hidden/secret.py", simple_command("secret"))
    write_command(root, "notes.txt", "not a command\n")
    return root


class TestResolveEntries:
    def test_keys(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        entries = hooks.resolve_command_entry_paths(CommandSource(path=str(commands_dir)))
        assert sorted(entries) == ["hello", "scaffold", "scaffold/cloud", "scaffold/cloud/aws"]

    def test_command_and_group_share_key(
        self, hooks: LocalFileSystemHooks, commands_dir: Path
    ) -> None:
        entries = hooks.resolve_command_entry_paths(CommandSource(path=str(commands_dir)))
        cloud = entries["scaffold/cloud"]
        assert cloud.is_command
        assert cloud.is_group
        assert cloud.group_path == commands_dir / "scaffold" / "cloud"

    def test_group_file_preferred(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        entries = hooks.resolve_command_entry_paths(CommandSource(path=str(commands_dir)))
        assert entries["scaffold"].group_path == commands_dir / "scaffold" / "_group.py"
        assert not entries["scaffold"].is_command

    def test_root_prefix(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        entries = hooks.resolve_command_entry_paths(
            CommandSource(path=str(commands_dir), root="tools")
        )
        assert "tools/hello" in entries
        assert entries["tools/hello"].source == f"{commands_dir} (root: tools)"

    def test_missing_directory(self, hooks: LocalFileSystemHooks, tmp_path: Path) -> None:
        assert hooks.resolve_command_entry_paths(CommandSource(path=str(tmp_path / "no"))) == {}


class TestLoading:
    def test_load_command_module(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        module = hooks.load_command_module(commands_dir / "hello.py")
        assert isinstance(module, CommandModule)
        assert module.command().build_metadata().name == "hello"

    def test_modules_are_cached(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        path = commands_dir / "hello.py"
        assert hooks._import(path) is hooks._import(path)

    def test_missing_attribute(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        with pytest.raises(CommandLoadError, match="does not define 'command_module'"):
            hooks.load_command_module(commands_dir / "_helpers.py")

    def test_import_error_wrapped(self, hooks: LocalFileSystemHooks, tmp_path: Path) -> None:
        path = write_command(tmp_path, "broken.py", "import does_not_exist_anywhere\n")
        with pytest.raises(CommandLoadError, match="Failed to load command module"):
            hooks.load_command_module(path)

    def test_group_metadata(self, hooks: LocalFileSystemHooks, commands_dir: Path) -> None:
        meta = hooks.load_group_metadata(commands_dir / "scaffold" / "_group.py")
        assert meta == GroupMetadata(name="Scaffold", description="Gen")

    def test_bare_directory_has_no_metadata(
        self, hooks: LocalFileSystemHooks, commands_dir: Path
    ) -> None:
        assert hooks.load_group_metadata(commands_dir / "scaffold" / "cloud") is None

    def test_invalid_group_metadata(self, hooks: LocalFileSystemHooks, tmp_path: Path) -> None:
        path = write_command(tmp_path, "_group.py", "metadata = {'description': 'no name'}\n")
        with pytest.raises(CommandLoadError, match="Invalid group metadata"):
            hooks.load_group_metadata(path)
