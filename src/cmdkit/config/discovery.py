"""CLI config file discovery and loading.

Walk-up finder locates ``.cli.toml`` (or ``.cli.json``), similar to how git
finds .git/.  An explicit config path as the first argv token wins, then the
CMDKIT_CONFIG env var, then the walk-up search.
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cmdkit.config.models import CLIConfig
from cmdkit.domain.errors import ConfigNotFoundError, InvalidConfigError

CONFIG_FILENAMES = (".cli.toml", ".cli.json")
CONFIG_SUFFIXES = (".toml", ".json")
CONFIG_ENV_VAR = "CMDKIT_CONFIG"


@dataclass(frozen=True)
class ResolvedConfig:
    """A loaded config, where it came from, and the argv left to parse."""

    config: CLIConfig
    config_path: Path
    remaining_argv: list[str] = field(default_factory=list)


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for a CLI config file.

    Returns the path to the config file, or None if not found.
    Checks CMDKIT_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        for name in CONFIG_FILENAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Parse a TOML or JSON config file into a dict."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidConfigError(f"Cannot read config {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = tomllib.loads(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise InvalidConfigError(f"Invalid config syntax in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config {path} must contain a table/object at the top level")
    return data


def load_config(path: Path | None = None, cwd: Path | None = None) -> CLIConfig:
    """Load and validate config from a TOML or JSON file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Raises ConfigNotFoundError when no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        raise ConfigNotFoundError(
            f"No CLI config found (looked for {', '.join(CONFIG_FILENAMES)} "
            f"and ${CONFIG_ENV_VAR})"
        )

    data = read_config_data(path)
    try:
        return CLIConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid config in {path}:\n{exc}") from exc


def _is_config_arg(token: str) -> bool:
    if token.startswith("-") or not token.lower().endswith(CONFIG_SUFFIXES):
        return False
    return Path(token).is_file()


def resolve_config(argv: list[str], cwd: Path | None = None) -> ResolvedConfig:
    """Find and load the config for an invocation.

    An existing ``.toml``/``.json`` file as ``argv[0]`` is used and removed
    from the remaining argv; otherwise discovery runs from *cwd*.
    """
    remaining = list(argv)
    if remaining and _is_config_arg(remaining[0]):
        path: Path | None = Path(remaining.pop(0))
    else:
        path = find_config(cwd)

    if path is None:
        raise ConfigNotFoundError(
            f"No CLI config found (looked for {', '.join(CONFIG_FILENAMES)} "
            f"and ${CONFIG_ENV_VAR})"
        )

    path = path.resolve()
    return ResolvedConfig(config=load_config(path), config_path=path, remaining_argv=remaining)
