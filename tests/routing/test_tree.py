"""Tests for command source merging and the CommandTree."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cmdkit.domain.entries import CommandEntry
from cmdkit.domain.errors import DuplicateCommandKeyError
from cmdkit.routing.tree import CommandTree, merge_command_sources, merge_registry


def _fs(*keys: str) -> dict[str, CommandEntry]:
    return {key: CommandEntry(command_path=Path(f"/cmds/{key}.py"), source="fs") for key in keys}


class TestMergeCommandSources:
    def test_disjoint_sources_merge(self) -> None:
        merged = merge_command_sources([("a", _fs("hello")), ("b", _fs("world", "deploy"))])
        assert len(merged) == 3

    def test_duplicate_names_both_sources(self) -> None:
        with pytest.raises(DuplicateCommandKeyError) as exc_info:
            merge_command_sources(
                [("./commands (root: )", _fs("hello")), ("./more (root: )", _fs("hello"))]
            )
        message = str(exc_info.value)
        assert "Duplicate command key 'hello' detected." in message
        assert "First defined in: ./commands (root: )" in message
        assert "Also defined in: ./more (root: )" in message
        assert exc_info.value.key == "hello"


class TestMergeRegistry:
    def test_in_process_wins_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = {"hello": CommandEntry(module="in-process", source="registry")}
        with caplog.at_level(logging.WARNING, logger="cmdkit"):
            merged = merge_registry(_fs("hello"), registry)

        assert merged["hello"].module == "in-process"
        assert merged["hello"].source == "registry"
        assert "Duplicate command key 'hello' detected" in caplog.text

    def test_filesystem_group_half_survives(self) -> None:
        fs = {"db": CommandEntry(group_path=Path("/cmds/db"), source="fs")}
        registry = {"db": CommandEntry(module="in-process", source="registry")}
        merged = merge_registry(fs, registry)
        assert merged["db"].is_command
        assert merged["db"].group_path == Path("/cmds/db")

    def test_no_collision_no_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cmdkit"):
            merged = merge_registry(_fs("a"), {"b": CommandEntry(module="m")})
        assert set(merged) == {"a", "b"}
        assert caplog.text == ""


class TestCommandTree:
    @pytest.fixture
    def tree(self) -> CommandTree:
        entries = _fs("hello", "scaffold/cloud/aws", "scaffold/cloud/azure", "scaffold/connection")
        entries["scaffold"] = CommandEntry(group_path=Path("/cmds/scaffold"))
        return CommandTree(entries)

    def test_build_sizes(self) -> None:
        tree = CommandTree.build([("fs", _fs("a", "b"))], {"c": CommandEntry(module="m")})
        assert len(tree) == 3

    def test_implicit_groups(self, tree: CommandTree) -> None:
        assert "scaffold/cloud" in tree
        assert tree.is_implicit_group("scaffold/cloud")
        assert tree.get("scaffold/cloud") is None
        assert not tree.is_implicit_group("scaffold")

    def test_contains_normalizes(self, tree: CommandTree) -> None:
        assert "scaffold\\cloud\\aws" in tree
        assert "nope" not in tree
        assert 42 not in tree

    def test_children(self, tree: CommandTree) -> None:
        assert tree.children("") == ["hello", "scaffold"]
        assert tree.children("scaffold") == ["scaffold/cloud", "scaffold/connection"]
        assert tree.children("scaffold/cloud") == ["scaffold/cloud/aws", "scaffold/cloud/azure"]

    def test_has_children(self, tree: CommandTree) -> None:
        assert tree.has_children(None)
        assert not tree.has_children("hello")

    def test_keys_sorted(self, tree: CommandTree) -> None:
        assert tree.keys() == sorted(tree.keys())
        assert list(tree) == tree.keys()
