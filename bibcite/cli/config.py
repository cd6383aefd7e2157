"""Configuration management for the CLI."""

import os
from pathlib import Path
from typing import Any

import msgspec
import yaml

from bibcite.citations.exceptions import ConfigError
from bibcite.core.fields import Dialect
from bibcite.core.models import Encoding

ENV_VARIABLES = {
    "BIBCITE_STYLE": "style",
    "BIBCITE_FORMAT": "format",
    "BIBCITE_DIALECT": "dialect",
    "BIBCITE_STYLES_DIR": "styles_dir",
    "BIBCITE_MESSAGES": "messages",
    "BIBCITE_LOCALE": "locale",
}


class Settings(msgspec.Struct, kw_only=True):
    """Effective CLI settings.

    ``dialect`` left unset means the dialect marker of each ``.bib`` file
    decides, falling back to BibLaTeX.
    """

    style: str = "ieee"
    format: Encoding = Encoding.RICH
    dialect: Dialect | None = None
    styles_dir: str | None = None
    messages: str | None = None
    locale: str | None = None


class Config:
    """Configuration file handling."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        # User config
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "bibcite" / "config.yaml")

        # Project config
        paths.append(Path(".bibcite.yaml"))
        paths.append(Path("bibcite.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def get_config_paths() -> list[Path]:
    """Get configuration paths in precedence order."""
    return Config.get_config_paths()


def load_config(extra: Path | None = None) -> dict[str, Any]:
    """Load configuration from files and environment variables.

    Later files win over earlier ones, an explicitly given file wins over
    all default locations and environment variables win over files.

    Raises:
        ValueError: If the explicitly given file cannot be read.
    """
    config: dict[str, Any] = {}

    for path in get_config_paths():
        if path.exists():
            try:
                config = Config.merge_configs(config, Config.from_file(path))
            except ValueError:
                continue

    if extra is not None:
        config = Config.merge_configs(config, Config.from_file(extra))

    env_overrides = {
        key: os.environ[name] for name, key in ENV_VARIABLES.items() if os.environ.get(name)
    }
    return Config.merge_configs(config, env_overrides)


def to_settings(config: dict[str, Any]) -> Settings:
    """Convert a raw configuration mapping into settings.

    Unknown keys are ignored. ``format`` and ``dialect`` accept enum
    values as well as member names, in any case.

    Raises:
        ConfigError: If a value has the wrong type or is not recognized.
    """
    data = {key: value for key, value in config.items() if key in Settings.__struct_fields__}

    if data.get("format") is not None:
        try:
            data["format"] = Encoding.parse(data["format"]).value
        except ValueError as e:
            raise ConfigError("format", str(e))
    if data.get("dialect") is not None:
        try:
            data["dialect"] = Dialect.parse(data["dialect"]).value
        except ValueError as e:
            raise ConfigError("dialect", str(e))

    try:
        return msgspec.convert(data, Settings)
    except msgspec.ValidationError as e:
        raise ConfigError("settings", str(e))


def load_settings(extra: Path | None = None) -> Settings:
    """Load and validate settings from every configuration source."""
    try:
        config = load_config(extra)
    except ValueError as e:
        raise ConfigError("config", str(e))
    return to_settings(config)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
