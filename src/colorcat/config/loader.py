"""Settings loading and rule file lookup."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from colorcat.config.defaults import DEFAULT_SETTINGS_YAML, GRC_SHARE_DIRS
from colorcat.config.schema import Settings
from colorcat.errors import RulesFileNotFoundError, SettingsError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "colorcat" / "config.yaml"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif key in result and isinstance(result[key], list) and isinstance(value, list):
            # For lists, extend rather than replace
            result[key] = result[key] + value
        else:
            result[key] = value

    return result


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found."""
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(path, f"YAML error: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SettingsError(path, str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(path, "top level must be a mapping")
    return data


def _build_settings(data: dict[str, Any], path: Path) -> Settings:
    merged = deep_merge(yaml.safe_load(DEFAULT_SETTINGS_YAML), data)
    try:
        return Settings(**merged)
    except ValidationError as e:
        raise SettingsError(path, str(e.errors()[0]["msg"])) from e


def load_settings(settings_path: Path | str | None = None) -> Settings:
    """Load settings from YAML, merged over the built-in defaults.

    Args:
        settings_path: Path to the settings file (default: ~/.config/colorcat/config.yaml)

    Returns:
        Settings object; defaults when the file does not exist
    """
    if settings_path is None:
        settings_path = DEFAULT_SETTINGS_PATH
    elif isinstance(settings_path, str):
        settings_path = Path(settings_path)

    data = load_yaml_file(settings_path)
    if data:
        logger.debug("Loaded settings from %s", settings_path)
    return _build_settings(data, settings_path)


def load_settings_from_string(yaml_string: str) -> Settings:
    """Load settings from a YAML string (useful for testing)."""
    data = yaml.safe_load(yaml_string)
    return _build_settings(data if data else {}, Path("<string>"))


def grc_directories(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Directories searched for grc rule files, in order."""
    if environ is None:
        environ = os.environ

    home = Path(environ.get("HOME") or Path.home())
    config_home = environ.get("XDG_CONFIG_HOME") or str(home / ".config")
    data_home = environ.get("XDG_DATA_HOME") or str(home / ".local" / "share")

    return [
        Path(config_home) / "grc",
        Path(data_home) / "grc",
        home / ".grc",
        *(Path(d) for d in GRC_SHARE_DIRS),
    ]


def find_rules_file(
    name: str,
    settings: Settings | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Locate a rule file by name.

    A name containing a path separator, or naming an existing file, is used
    as is. Otherwise the settings' search_path and then the grc directories
    are searched.

    Raises:
        RulesFileNotFoundError: If no candidate exists
    """
    direct = Path(name).expanduser()
    if os.sep in name or direct.is_file():
        if direct.is_file():
            return direct
        raise RulesFileNotFoundError(name, [direct])

    search_path = [Path(d).expanduser() for d in settings.search_path] if settings else []
    search_path.extend(grc_directories(environ))

    searched: list[Path] = []
    for directory in search_path:
        candidate = directory / name
        searched.append(candidate)
        if candidate.is_file():
            logger.debug("Using rules file %s", candidate)
            return candidate

    raise RulesFileNotFoundError(name, searched)
