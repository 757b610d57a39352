#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for htmldown.

This module loads :class:`~htmldown.options.TurndownOptions` from JSON, TOML
or YAML files, or from the ``[tool.htmldown]`` section of a
``pyproject.toml``. Keys may use either the snake_case option names or the
camelCase names of the turndown reference converter.

When no file is named, the path in ``HTMLDOWN_CONFIG`` is used, and failing
that ``.htmldown.toml``, ``.htmldown.yaml``, ``.htmldown.yml``,
``.htmldown.json`` or a ``pyproject.toml`` with a ``[tool.htmldown]`` section
is searched for from the current directory upwards.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import yaml

from htmldown.exceptions import ConfigurationError
from htmldown.options import TurndownOptions, normalize_option_names

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".htmldown.toml", ".htmldown.yaml", ".htmldown.yml", ".htmldown.json")
CONFIG_ENV_VAR = "HTMLDOWN_CONFIG"


def _load_pyproject_htmldown_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.htmldown]`` section from pyproject.toml.

    Parameters
    ----------
    pyproject_path : Path
        Path to pyproject.toml file

    Returns
    -------
    dict
        Configuration from the [tool.htmldown] section, or an empty dict if
        the section is absent

    Raises
    ------
    ConfigurationError
        If the file is not valid TOML or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading pyproject.toml {pyproject_path}: {e}", original_error=e) from e

    section = data.get("tool", {}).get("htmldown", {})
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"[tool.htmldown] in {pyproject_path} must be a table, got {type(section).__name__}",
            parameter_name="tool.htmldown",
            parameter_value=section,
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Each directory from ``start_dir`` up to the filesystem root is checked for
    ``.htmldown.toml``, ``.htmldown.yaml``, ``.htmldown.yml`` and
    ``.htmldown.json`` in that order, then for a ``pyproject.toml`` carrying
    a ``[tool.htmldown]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for the search, defaults to the current working
        directory

    Returns
    -------
    Path or None
        Path to the first configuration file found, or None

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_htmldown_section(pyproject_path):
                    return pyproject_path
            except ConfigurationError as e:
                logger.debug(f"Skipping unreadable {pyproject_path}: {e}")

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML, or pyproject.toml file.

    The format is chosen from the file name and extension:

    - ``pyproject.toml``: the ``[tool.htmldown]`` section
    - ``.toml``: TOML
    - ``.yaml`` / ``.yml``: YAML
    - ``.json``: JSON

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Raw option mapping loaded from the file

    Raises
    ------
    ConfigurationError
        If the file is missing, cannot be parsed, or has an unsupported format

    Examples
    --------
    >>> config = load_config_file(".htmldown.toml")
    >>> config.get("heading_style")
    'atx'

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file does not exist: {config_path}")

    if not config_path.is_file():
        raise ConfigurationError(f"Configuration path is not a file: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        config = _load_pyproject_htmldown_section(config_path)
    elif ext == ".toml":
        config = _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        config = _load_yaml_config(config_path)
    elif ext == ".json":
        config = _load_json_config(config_path)
    else:
        raise ConfigurationError(
            f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml",
            parameter_name="config_path",
            parameter_value=str(config_path),
        )

    logger.debug(f"Loaded {len(config)} option(s) from {config_path}")
    return config


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    """Load a TOML configuration file."""
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {config_path}: {e}", original_error=e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    """Load a JSON configuration file."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {config_path}: {e}", original_error=e) from e

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Config file must contain a JSON object, got {type(config).__name__}",
            parameter_name="config_path",
            parameter_value=str(config_path),
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Load a YAML configuration file.

    An empty file yields an empty configuration.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {config_path}: {e}", original_error=e) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Config file must contain a YAML mapping, got {type(config).__name__}",
            parameter_name="config_path",
            parameter_value=str(config_path),
        )
    return config


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two option mappings, with ``override_config`` taking priority.

    Both mappings are normalized to option field names first, so a
    camelCase key in one overrides the snake_case key in the other.

    Parameters
    ----------
    base_config : dict
        Base configuration
    override_config : dict
        Configuration whose values win on conflicts

    Returns
    -------
    dict
        New merged configuration keyed by field names

    Raises
    ------
    ConfigurationError
        If either mapping holds an unknown option or names one option twice

    Examples
    --------
    >>> merge_configs({"headingStyle": "atx", "fence": "~~~"}, {"heading_style": "setext"})
    {'heading_style': 'setext', 'fence': '~~~'}

    """
    result = normalize_option_names(base_config)
    result.update(normalize_option_names(override_config))
    return result


def load_config_with_priority(
    explicit_path: Optional[Path | str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load configuration with priority handling.

    Priority order (highest to lowest):

    1. Explicit config file path
    2. Config file path from the ``HTMLDOWN_CONFIG`` environment variable
    3. Config file discovered by :func:`find_config_in_parents`

    Parameters
    ----------
    explicit_path : Path or str, optional
        Explicit config file path
    env_var_path : str, optional
        Config file path taken from ``HTMLDOWN_CONFIG``

    Returns
    -------
    dict
        Loaded configuration (empty dict if no config found)

    Raises
    ------
    ConfigurationError
        If a config file is specified or found but cannot be loaded

    """
    if explicit_path:
        return load_config_file(explicit_path)

    if env_var_path:
        return load_config_file(env_var_path)

    discovered_path = find_config_in_parents()
    if discovered_path:
        logger.debug(f"Discovered config file {discovered_path}")
        return load_config_file(discovered_path)

    return {}


def load_options(config_path: Optional[Path | str] = None, **overrides: Any) -> TurndownOptions:
    """Load configuration and build validated options from it.

    Parameters
    ----------
    config_path : Path or str, optional
        Path to the configuration file. When omitted, the path in
        ``HTMLDOWN_CONFIG`` is used, and failing that a config file is
        searched for from the current directory upwards. With no file at
        all, the defaults apply.
    **overrides
        Option values taking priority over the file contents

    Returns
    -------
    TurndownOptions
        Options built from the file contents and overrides

    Raises
    ------
    ConfigurationError
        If the file cannot be loaded or contains unknown or invalid options

    """
    config = load_config_with_priority(config_path, os.environ.get(CONFIG_ENV_VAR))
    return TurndownOptions(**merge_configs(config, overrides))
