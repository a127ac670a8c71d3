"""Configuration schema for i18n-tasks using nested Pydantic models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_KEYWORDS: list[str] = [
    "_",
    "__",
    "_e",
    "_c:1,2c",
    "_x:1,2c",
    "_ex:1,2c",
    "_n:1,2",
    "_nx:1,2,4c",
    "_n_noop:1,2",
    "_nx_noop:1,2,3c",
    "esc_attr__",
    "esc_html__",
    "esc_attr_e",
    "esc_html_e",
    "esc_attr_x:1,2c",
    "esc_html_x:1,2c",
]

DEFAULT_EXCLUDED_DIRS: list[str] = [
    ".git",
    "bin",
    "node_modules",
    "vendor",
    "tests",
    "tmp",
    "dev",
]

DEFAULT_README_FRAGMENTS: list[str] = [
    "README.md",
    "INSTALLATION.md",
    "FAQ.md",
    "CHANGELOG.md",
]


class ExtractionConfig(BaseModel):
    """String extraction settings."""

    model_config = ConfigDict(extra="forbid")

    language: str = Field(
        default="PHP",
        description="Source language passed to xgettext",
        min_length=1,
    )
    from_code: str = Field(
        default="UTF-8",
        description="Encoding of the input files",
        min_length=1,
    )
    add_comments: str = Field(
        default="translators",
        description="Comment tag whose comments are copied into the template",
    )
    keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_KEYWORDS),
        description="Marker function names with argument positions",
        min_length=1,
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS),
        description="Directory names excluded from source scanning",
    )
    update_domains: bool = Field(
        default=True,
        description="Replace existing text domains, not only add missing ones",
    )


class ToolsConfig(BaseModel):
    """Executable names for the external tools."""

    model_config = ConfigDict(extra="forbid")

    xgettext: str = Field(default="xgettext", min_length=1)
    msgmerge: str = Field(default="msgmerge", min_length=1)
    msgfmt: str = Field(default="msgfmt", min_length=1)
    wp: str = Field(default="wp", min_length=1)


class ReadmeConfig(BaseModel):
    """Readme regeneration settings for plugin projects."""

    model_config = ConfigDict(extra="forbid")

    source: str = Field(default="readme.txt", description="Existing readme providing the header")
    output: str = Field(default="readme.txt", description="Generated readme path")
    section_marker: str = Field(
        default="== Description ==",
        description="Section marker at which the header is truncated",
        min_length=1,
    )
    fragments: list[str] = Field(
        default_factory=lambda: list(DEFAULT_README_FRAGMENTS),
        description="Markdown fragments concatenated in order",
        min_length=1,
    )
    host_version_file: str = Field(
        default="../../../wp-includes/version.php",
        description="Host version file, relative to the project root",
    )


class I18nTasksConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    plugin_name: str | None = Field(
        default=None,
        description="Plugin identifier; unset for generic projects",
    )
    source_extension: str = Field(
        default="php",
        description="Extension of the source files to scan",
        pattern=r"^[A-Za-z0-9]+$",
    )
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    readme: ReadmeConfig = Field(default_factory=ReadmeConfig)

    @field_validator("plugin_name")
    @classmethod
    def validate_plugin_name(cls, v: str | None) -> str | None:
        """Normalize an empty plugin name to None and reject path separators."""
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if "/" in v or "\\" in v:
            raise ValueError("plugin_name must not contain path separators")
        return v

    @field_validator("source_extension", mode="before")
    @classmethod
    def strip_leading_dot(cls, v: object) -> object:
        """Accept ".php" as well as "php"."""
        if isinstance(v, str):
            return v.lstrip(".")
        return v
