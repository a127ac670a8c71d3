"""
Project profile resolution.

A profile is resolved once at startup and fixes the path conventions every
step works with. Plugin projects keep their catalogs flat in ``languages/``;
generic projects use the gettext ``locale/<lang>/LC_MESSAGES`` layout.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

DEFAULT_PROJECT_NAME = "project"
DEFAULT_SOURCE_EXTENSION = "php"


class ProjectKind(Enum):
    """Supported project shapes."""

    GENERIC = "generic"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class ProjectProfile:
    """Path and tool conventions for one project shape."""

    kind: ProjectKind
    project_name: str
    catalog_dir: str
    catalog_file_pattern: str
    template_path: str
    main_source_file: str | None = None

    @property
    def is_plugin(self) -> bool:
        return self.kind is ProjectKind.PLUGIN


def _project_name_from_metadata(package_metadata: Mapping[str, object]) -> str:
    name = package_metadata.get("name")
    if isinstance(name, str) and name.strip():
        # "@scope/pkg" and "path/to/pkg" both resolve to "pkg"
        return PurePosixPath(name.strip()).name or DEFAULT_PROJECT_NAME
    return DEFAULT_PROJECT_NAME


def resolve_profile(
    plugin_name: str | None,
    package_metadata: Mapping[str, object],
    source_extension: str = DEFAULT_SOURCE_EXTENSION,
) -> ProjectProfile:
    """
    Resolve the project profile from the plugin flag and package metadata.

    Args:
        plugin_name: Plugin identifier, or None for a generic project
        package_metadata: Parsed package manifest (may be empty)
        source_extension: Extension of the main source language files

    Returns:
        The immutable ProjectProfile for this run
    """
    if plugin_name:
        catalog_dir = "languages"
        return ProjectProfile(
            kind=ProjectKind.PLUGIN,
            project_name=plugin_name,
            catalog_dir=catalog_dir,
            catalog_file_pattern=f"{catalog_dir}/*.po",
            template_path=f"{catalog_dir}/{plugin_name}.pot",
            main_source_file=f"{plugin_name}.{source_extension}",
        )

    project_name = _project_name_from_metadata(package_metadata)
    catalog_dir = "locale"
    return ProjectProfile(
        kind=ProjectKind.GENERIC,
        project_name=project_name,
        catalog_dir=catalog_dir,
        catalog_file_pattern=f"{catalog_dir}/*/LC_MESSAGES/*.po",
        template_path=f"{catalog_dir}/{project_name}.pot",
        main_source_file=None,
    )
