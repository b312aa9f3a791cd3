"""
Configuration loader — reads a project descriptor into a Project.

The descriptor is either a dedicated ``buildloom.yml`` / ``buildloom.yaml``
or the project's ``package.json`` carrying a ``buildMetadata`` section.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from buildloom.core.errors import ConfigurationError
from buildloom.core.models.project import Project

logger = logging.getLogger(__name__)

# Searched in this order in each directory
PROJECT_CONFIG_FILES = ("buildloom.yml", "buildloom.yaml", "package.json")


class ConfigError(ConfigurationError):
    """Raised when the descriptor file is missing or unreadable."""


def find_project_file(start_dir: Path | None = None) -> Path | None:
    """Search for a descriptor starting from the given directory, walking up.

    This allows running commands from subdirectories and still finding
    the project root.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the descriptor, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        for name in PROJECT_CONFIG_FILES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_descriptor(path: Path) -> dict[str, Any]:
    """Parse a descriptor file (JSON for ``.json``, YAML otherwise).

    Raises:
        ConfigError: The file cannot be read or parsed, or is not a mapping.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if path.suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def load_project(path: Path | None = None) -> Project:
    """Load and validate the project descriptor.

    The project root is the directory containing the descriptor.

    Args:
        path: Explicit descriptor path. If None, searches upward.

    Returns:
        Validated Project.

    Raises:
        ConfigError: If the file is missing or unreadable.
        SchemaValidationError: If a descriptor field is malformed.
        ConfigurationError: If the descriptor is incomplete for its type.
    """
    if path is None:
        path = find_project_file()

    if path is None:
        raise ConfigError(
            f"No project descriptor found ({', '.join(PROJECT_CONFIG_FILES)}). "
            "Run from inside a project, or specify --config."
        )

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading project descriptor from %s", path)
    data = read_descriptor(path)

    if path.suffix == ".json" and "buildMetadata" not in data:
        raise ConfigError(f"{path} has no 'buildMetadata' section")

    project = Project(data, root_path=str(project_root(path)))
    logger.info("Loaded project '%s' (%s)", project.name, project.type.value)
    return project


def project_root(config_path: Path) -> Path:
    """Get the project root directory from a config file path."""
    return config_path.parent.resolve()
