"""
Package metadata lookup for the project being processed.

The project name used for the catalog template is derived from the
package manifest found in the project root: ``package.json`` first, then
the ``[project]`` table of ``pyproject.toml``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
PYPROJECT_TOML = "pyproject.toml"


def load_package_metadata(project_root: Path) -> dict[str, object]:
    """
    Read package metadata from the project root.

    Args:
        project_root: Directory containing the package manifest

    Returns:
        Metadata mapping, empty if no manifest exists

    Raises:
        ConfigurationError: If a manifest exists but cannot be parsed
    """
    package_json = project_root / PACKAGE_JSON
    if package_json.exists():
        try:
            with package_json.open("r", encoding="utf-8") as f:
                data: object = json.load(f)  # pyright: ignore[reportAny]
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Invalid {PACKAGE_JSON}: {e}", context=str(package_json)) from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{PACKAGE_JSON} must contain an object", context=str(package_json))
        logger.debug(f"Loaded package metadata from {package_json}")
        return dict(data)  # pyright: ignore[reportUnknownArgumentType]

    pyproject = project_root / PYPROJECT_TOML
    if pyproject.exists():
        try:
            with pyproject.open("rb") as f:
                toml_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Invalid {PYPROJECT_TOML}: {e}", context=str(pyproject)) from e
        project_data = toml_data.get("project")
        if isinstance(project_data, dict):
            logger.debug(f"Loaded package metadata from {pyproject}")
            return dict(project_data)  # pyright: ignore[reportUnknownArgumentType]

    logger.debug(f"No package metadata found in {project_root}")
    return {}
