"""Shared pytest fixtures and test helpers for cmdkit tests."""

from __future__ import annotations

import json
import textwrap
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from cmdkit.config.models import CLIConfig
from cmdkit.execution.telemetry import disable_telemetry
from cmdkit.output.console import create_console


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def console() -> Console:
    """StringIO-backed console without colors; read it with ``get_output``."""
    return create_console(no_color=True, width=200)


@pytest.fixture
def cli_config() -> CLIConfig:
    return CLIConfig(name="Test CLI", tokens=["test"], version="1.0.0", description="A test CLI")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project directory with a ``.cli.json`` and an empty ``commands/`` dir."""
    (tmp_path / "commands").mkdir()
    write_config(tmp_path)
    return tmp_path


@pytest.fixture
def _isolated_project(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the project so config discovery finds it."""
    monkeypatch.chdir(project)
    monkeypatch.delenv("CMDKIT_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``--verbose`` enables telemetry for the whole context; undo it per test."""
    yield
    disable_telemetry()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_config(root: Path, **overrides: object) -> Path:
    """Write ``.cli.json`` under *root* with sensible defaults."""
    data: dict[str, object] = {
        "name": "Test CLI",
        "tokens": ["test"],
        "version": "1.0.0",
        "commands": "./commands",
    }
    data.update(overrides)
    path = root / ".cli.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_command(commands_dir: Path, rel: str, body: str) -> Path:
    """Write a command file (``rel`` like ``"scaffold/cloud/aws.py"``)."""
    path = commands_dir / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def simple_command(name: str, message: str | None = None) -> str:
    """Source of a command file whose run() logs one info line."""
    text = message or f"{name} ran"
    return f"""
        from cmdkit import command

        command_module = command({name!r}, "The {name} command").run(
            lambda ctx: ctx.log.info({text!r})
        )
        """

