#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/config.py
"""Configuration file discovery and loading for the web2md CLI.

Options are read from, lowest priority first:

1. ``ConversionOptions`` defaults
2. a configuration file: ``--config``, else ``$WEB2MD_CONFIG``, else the first
   of ``.web2md.toml``, ``.web2md.yaml``, ``.web2md.yml``, ``.web2md.json`` or
   a ``pyproject.toml`` with a ``[tool.web2md]`` table found walking up from
   the working directory, else the same dotfiles in the home directory
3. ``WEB2MD_<OPTION>`` environment variables
4. command line flags

A configuration file holds ``ConversionOptions`` fields plus the CLI settings
named in ``CLI_SETTINGS``. Keys may use hyphens or underscores.

Example ``.web2md.toml``::

    heading_style = "setext"
    bullet_symbols = "-*+"
    mode = "main"
    remove = ["nav", "aside"]

"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from web2md.constants import CONFIG_FILENAMES, ENV_PREFIX, PYPROJECT_SECTION
from web2md.exceptions import FileError, OptionValidationError, ValidationError
from web2md.options import ConversionOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

# Settings understood by the CLI rather than by ConversionOptions
CLI_SETTINGS = ("mode", "selector", "keep", "remove", "rich")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _option_fields() -> dict[str, Any]:
    return {spec.name: spec for spec in fields(ConversionOptions)}


def _load_pyproject_section(pyproject_path: Path) -> dict[str, Any]:
    """Return the ``[tool.web2md]`` table of a pyproject.toml, or an empty dict."""
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get(PYPROJECT_SECTION, {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"[tool.{PYPROJECT_SECTION}] in {pyproject_path} must be a table, got {type(section).__name__}"
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find the nearest configuration file from ``start_dir`` up to the root.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start from, defaults to the working directory

    Returns
    -------
    Path or None
        The first configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                return candidate

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except (tomllib.TOMLDecodeError, OSError, ValidationError) as e:
                logger.debug(f"Skipping unreadable {pyproject_path}: {e}")

        if current.parent == current:
            return None
        current = current.parent


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Search parent directories, then the home directory, for a config file."""
    found = find_config_in_parents(start_dir)
    if found is not None:
        return found

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        candidate = home / filename
        if candidate.is_file():
            return candidate
    return None


def load_config_file(config_path: Path | str) -> dict[str, Any]:
    """Load a TOML, YAML, JSON or pyproject.toml configuration file.

    Parameters
    ----------
    config_path : Path or str
        File to load; the format follows the file name

    Returns
    -------
    dict
        Settings from the file

    Raises
    ------
    FileError
        If the file does not exist or cannot be read
    ValidationError
        If the file cannot be parsed or is not a mapping

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise FileError(f"Configuration file does not exist: {config_path}", file_path=str(config_path))

    suffix = config_path.suffix.lower()
    try:
        if config_path.name.lower() == "pyproject.toml":
            config = _load_pyproject_section(config_path)
        elif suffix == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        elif suffix == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise ValidationError(
                f"Unsupported config file format: {suffix or config_path.name}. Use .toml, .yaml or .json",
                parameter_name="config",
                parameter_value=str(config_path),
            )
    except OSError as e:
        raise FileError(f"Error reading config file {config_path}: {e}", str(config_path), e) from e
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValidationError(
            f"Invalid config file {config_path}: {e}", parameter_name="config", original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ValidationError(
            f"Config file {config_path} must contain a mapping, got {type(config).__name__}",
            parameter_name="config",
        )

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def load_config_with_priority(
    explicit_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> dict[str, Any]:
    """Load the configuration file chosen by ``--config``, ``$WEB2MD_CONFIG`` or discovery.

    Returns
    -------
    dict
        Settings from the chosen file, or an empty dict when there is none

    """
    environ = os.environ if environ is None else environ
    if explicit_path:
        return load_config_file(explicit_path)
    if environ.get(CONFIG_ENV_VAR):
        return load_config_file(environ[CONFIG_ENV_VAR])

    discovered = discover_config_file()
    return load_config_file(discovered) if discovered is not None else {}


def split_config(config: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate conversion options from CLI settings.

    Raises
    ------
    OptionValidationError
        If a key is neither an option nor a CLI setting

    """
    known_options = _option_fields()
    options: dict[str, Any] = {}
    settings: dict[str, Any] = {}
    for key, value in config.items():
        name = str(key).replace("-", "_")
        if name in known_options:
            options[name] = value
        elif name in CLI_SETTINGS:
            settings[name] = value
        else:
            raise OptionValidationError(name, value, message=f"Unknown configuration key '{key}'")
    return options, settings


def _parse_env_value(name: str, raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise OptionValidationError(name, raw, message=f"{ENV_PREFIX}{name.upper()} must be true or false")
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError as e:
            raise OptionValidationError(name, raw, message=f"{ENV_PREFIX}{name.upper()} must be an integer") from e
    return raw


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Read ``WEB2MD_<OPTION>`` environment variables.

    Parameters
    ----------
    environ : Mapping[str, str], optional
        Environment to read, defaults to ``os.environ``

    Returns
    -------
    dict
        Option values converted to the type of each option's default

    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for name, spec in _option_fields().items():
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = _parse_env_value(name, raw, spec.default)
    return overrides


def build_options(*layers: Mapping[str, Any]) -> ConversionOptions:
    """Merge option layers, later layers winning, into validated options."""
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update({str(key).replace("-", "_"): value for key, value in layer.items()})
    return ConversionOptions.from_mapping(merged)


__all__ = [
    "CONFIG_ENV_VAR",
    "CLI_SETTINGS",
    "find_config_in_parents",
    "discover_config_file",
    "load_config_file",
    "load_config_with_priority",
    "split_config",
    "env_overrides",
    "build_options",
]
