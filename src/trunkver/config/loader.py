"""Configuration loading from TOML files.

Configuration is looked up, walking up from the project directory, in:

1. ``trunkver.toml`` (the whole file is the configuration)
2. ``pyproject.toml`` (the ``[tool.trunkver]`` table)

When neither exists the defaults apply.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trunkver.config.models import TrunkverConfig
from trunkver.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("trunkver.toml", "pyproject.toml")


def find_config_file(start: Path | None = None) -> Path:
    """Find the nearest configuration file, searching parent directories.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to ``trunkver.toml`` or ``pyproject.toml``

    Raises:
        ConfigNotFoundError: If no configuration file is found
    """
    current = (start or Path.cwd()).resolve()

    while True:
        for name in CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        if current.parent == current:
            break
        current = current.parent

    raise ConfigNotFoundError(
        f"Could not find {' or '.join(CONFIG_FILE_NAMES)} in {start or Path.cwd()} or any parent directory"
    )


def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_trunkver_config(data: dict[str, Any], path: Path) -> dict[str, Any]:
    """Extract the trunkver settings from parsed TOML.

    ``trunkver.toml`` holds the settings at top level; pyproject.toml
    holds them under ``[tool.trunkver]``.
    """
    if path.name == "pyproject.toml":
        return data.get("tool", {}).get("trunkver", {})
    return data


def load_config(path: Path | None = None) -> TrunkverConfig:
    """Load and validate the configuration for a project.

    Args:
        path: Project directory or explicit configuration file

    Returns:
        Validated TrunkverConfig (defaults when no file is found)

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    if path is not None and path.is_file():
        config_path = path
    else:
        try:
            config_path = find_config_file(path)
        except ConfigNotFoundError:
            logger.debug("No configuration file found, using defaults")
            return TrunkverConfig()

    raw = extract_trunkver_config(load_toml(config_path), config_path)
    logger.debug("Loaded configuration from %s", config_path)

    try:
        return TrunkverConfig.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigValidationError(f"Invalid configuration in {config_path}: {errors}") from e
