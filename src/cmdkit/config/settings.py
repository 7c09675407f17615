"""Runtime settings — CLI flags, env vars and the config file in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CMDKIT_*`` prefix
  3. Config file  — the ``runtime`` table of ``.cli.toml`` / ``.cli.json``
  4. Code defaults

Uses Pydantic Settings v2 with a custom :class:`ConfigFileSettingsSource`
that reads the same file the runtime loads its :class:`CLIConfig` from.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cmdkit.config.discovery import find_config, read_config_data
from cmdkit.domain.errors import InvalidConfigError

RUNTIME_TABLE = "runtime"


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Read the ``runtime`` table from a CLI config file."""

    def __init__(self, settings_cls: type[BaseSettings], config_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if config_path and config_path.is_file():
            table = read_config_data(config_path).get(RUNTIME_TABLE, {})
            if not isinstance(table, dict):
                raise InvalidConfigError(f"'{RUNTIME_TABLE}' in {config_path} must be a table")
            self._data = table

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, False

    def __call__(self) -> dict[str, Any]:
        return {k: v for k, v in self._data.items() if k in self.settings_cls.model_fields}


# Thread-local storage for the config path during construction.
_tls = threading.local()


class RuntimeSettings(BaseSettings):
    """Process-level switches for logging, telemetry and colors.

    Attributes:
        verbose: DEBUG-level framework logs and lifecycle telemetry spans.
        log_json: Structured JSON log lines instead of the console renderer.
        no_color: Disable ANSI colors in command output.
        config_path: The config file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CMDKIT_",
    }

    verbose: bool = False
    log_json: bool = False
    no_color: bool = False
    config_path: Path | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the config-file source between env vars and defaults."""
        config_path = getattr(_tls, "config_path", None)
        return (
            init_settings,
            env_settings,
            ConfigFileSettingsSource(settings_cls, config_path),
        )

    @classmethod
    def from_cli(
        cls, *, config_path: Path | str | None = None, **cli_flags: Any
    ) -> RuntimeSettings:
        """Construct settings from a CLI invocation.

        Only flags that were actually switched on override lower-priority
        sources, so ``CMDKIT_VERBOSE=1`` still works without ``--verbose``.
        """
        path = Path(config_path) if config_path else find_config()
        overrides = {name: value for name, value in cli_flags.items() if value}

        _tls.config_path = path
        try:
            return cls(config_path=path, **overrides)
        finally:
            _tls.config_path = None
