"""
Readme regeneration for plugin projects.

The plugin directory's ``readme.txt`` is rebuilt from its own header (kept
in sync with the main source file) and the project's Markdown fragments.
Every stage reads the file written by the stage before it:

    readme.txt ─copy─> header-1-copy ─update─> header-2-update ──┐
    *.md ─concat─> md-1-concat ─format─> md-2-format ─strip─> md-3-clean
                                                                  └─combine─> readme.txt

Temporary files are removed after every run, including failed ones.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path

from ..config.schema import ReadmeConfig
from ..utils.core.exceptions import (
    ConfigurationError,
    DependencyMissingError,
    I18nTasksError,
)
from .profile import ProjectProfile
from .types import StepResult

logger = logging.getLogger(__name__)

HEADER_COPY = "readme-temp-header-1-copy.txt"
HEADER_UPDATE = "readme-temp-header-2-update.txt"
MD_CONCAT = "readme-temp-md-1-concat.md"
MD_FORMAT = "readme-temp-md-2-format.txt"
MD_CLEAN = "readme-temp-md-3-clean.txt"

TEMP_FILES: tuple[str, ...] = (HEADER_COPY, MD_CONCAT, MD_FORMAT, HEADER_UPDATE, MD_CLEAN)

# Header fields copied verbatim from the main source file's header comment
HEADER_FIELDS: tuple[str, ...] = (
    "Plugin Name",
    "Plugin URI",
    "Description",
    "Version",
    "Author",
    "Author URI",
    "License",
    "License URI",
    "Requires at least",
    "Requires PHP",
)

TESTED_UP_TO_FIELD = "Tested up to"
HOST_VERSION_PATTERN = re.compile(r"\$wp_version = '([^']+)'")
DESCRIPTION_PARAGRAPH_PATTERN = re.compile(r"^\n\n*(.*)\n*\n==", re.MULTILINE)

# Order matters: headings are rewritten before bullets
MARKDOWN_REPLACEMENTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^#  *(.*?) *$", re.MULTILINE), r"=== \1 ==="),
    (re.compile(r"^##  *(.*?) *$", re.MULTILINE), r"== \1 =="),
    (re.compile(r"^###  *(.*?) *$", re.MULTILINE), r"= \1 ="),
    (re.compile(r"^- ", re.MULTILINE), "* "),
)

TITLE_PATTERN = re.compile(r"^=== .* ===\n*")


def format_markdown(content: str) -> str:
    """Rewrite Markdown headings and bullets into readme.txt syntax."""
    for pattern, replacement in MARKDOWN_REPLACEMENTS:
        content = pattern.sub(replacement, content)
    return content


def read_header_value(content: str, field: str) -> str | None:
    """Return the value of ``Field: value`` in a header comment, if present."""
    match = re.search(rf"{re.escape(field)}: (.*)", content)
    if match is None:
        return None
    return match.group(1).strip()


class ReadmePipeline:
    """Six-stage readme.txt regeneration chain with guaranteed cleanup."""

    name: str = "readme"

    def __init__(self, profile: ProjectProfile, config: ReadmeConfig, root: Path) -> None:
        if not profile.is_plugin or profile.main_source_file is None:
            raise ConfigurationError(
                "Readme regeneration is only available for plugin projects",
                context=profile.kind.value,
            )
        self.profile: ProjectProfile = profile
        self.config: ReadmeConfig = config
        self.root: Path = root
        self.main_source_file: str = profile.main_source_file

    def _path(self, name: str) -> Path:
        return self.root / name

    def _require(self, *names: str) -> None:
        for name in names:
            if not self._path(name).is_file():
                raise DependencyMissingError(f"Required input file not found: {name}", path=name)

    def _read(self, name: str) -> str:
        return self._path(name).read_text(encoding="utf-8")

    def _write(self, name: str, content: str) -> None:
        _ = self._path(name).write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {name}")

    def get_host_version(self) -> str | None:
        """Read the installed host version, or None when unavailable."""
        version_file = self.root / self.config.host_version_file
        if not version_file.is_file():
            logger.debug(f"Host version file not found: {version_file}")
            return None
        match = HOST_VERSION_PATTERN.search(version_file.read_text(encoding="utf-8"))
        return match.group(1) if match else None

    def copy_header(self) -> None:
        """Stage 1: copy the readme header up to and including the section marker."""
        self._require(self.config.source)
        marker = self.config.section_marker
        header = self._read(self.config.source).split(marker)[0]
        self._write(HEADER_COPY, header + marker + "\n")

    def update_header(self) -> None:
        """Stage 2: refresh header fields from the main source file."""
        self._require(HEADER_COPY, self.main_source_file)
        content = self._read(HEADER_COPY)
        main_content = self._read(self.main_source_file)

        for field in HEADER_FIELDS:
            value = read_header_value(main_content, field)
            if value is None:
                continue
            content = re.sub(
                rf"{re.escape(field)}: .*",
                lambda _match, field=field, value=value: f"{field}: {value}",
                content,
            )

        host_version = self.get_host_version()
        if host_version:
            content = re.sub(
                rf"{TESTED_UP_TO_FIELD}: .*",
                lambda _match: f"{TESTED_UP_TO_FIELD}: {host_version}",
                content,
            )
        else:
            logger.info(f"Host version unknown, keeping '{TESTED_UP_TO_FIELD}' unchanged")

        description = read_header_value(main_content, "Description")
        content = DESCRIPTION_PARAGRAPH_PATTERN.sub(
            lambda match: f"\n{description if description else match.group(1)}\n\n==",
            content,
        )

        self._write(HEADER_UPDATE, content)

    def concat_markdown(self) -> None:
        """Stage 3: concatenate the Markdown fragments in order."""
        self._require(*self.config.fragments)
        content = "\n\n".join(self._read(fragment) for fragment in self.config.fragments)
        self._write(MD_CONCAT, content)

    def format_markdown(self) -> None:
        """Stage 4: rewrite Markdown syntax into readme.txt syntax."""
        self._require(MD_CONCAT)
        self._write(MD_FORMAT, format_markdown(self._read(MD_CONCAT)))

    def strip_title(self) -> None:
        """Stage 5: drop the leading title, already present in the header."""
        self._require(MD_FORMAT)
        self._write(MD_CLEAN, TITLE_PATTERN.sub("", self._read(MD_FORMAT), count=1))

    def combine(self) -> None:
        """Stage 6: join the updated header and the cleaned Markdown."""
        self._require(HEADER_UPDATE, MD_CLEAN)
        self._write(self.config.output, self._read(HEADER_UPDATE) + "\n" + self._read(MD_CLEAN))

    def cleanup(self) -> list[str]:
        """
        Remove every temporary file of the chain.

        Returns:
            Temporary files that could not be removed
        """
        leftovers: list[str] = []
        for name in TEMP_FILES:
            try:
                self._path(name).unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to remove {name}: {e}")
                leftovers.append(name)
        return leftovers

    def stages(self) -> list[tuple[str, Callable[[], None]]]:
        """Stages in execution order."""
        return [
            ("copy_header", self.copy_header),
            ("update_header", self.update_header),
            ("concat_markdown", self.concat_markdown),
            ("format_markdown", self.format_markdown),
            ("strip_title", self.strip_title),
            ("combine", self.combine),
        ]

    async def run(self) -> StepResult:
        """Run every stage in order, then clean up regardless of the outcome."""
        result: StepResult | None = None
        try:
            for stage_name, stage in self.stages():
                try:
                    stage()
                except DependencyMissingError as e:
                    logger.error(f"Readme stage {stage_name} cannot run: {e}")
                    result = StepResult.from_error(e, item=e.path).with_details(stage=stage_name)
                    break
                except (OSError, UnicodeError) as e:
                    logger.error(f"Readme stage {stage_name} failed: {e}")
                    error = I18nTasksError(f"{stage_name} failed: {e}", context=stage_name)
                    result = StepResult.from_error(error).with_details(stage=stage_name)
                    break
        finally:
            leftovers = self.cleanup()

        if result is not None:
            return result
        if leftovers:
            return StepResult.failure(
                "temporary files could not be removed",
                item=leftovers[0],
                leftovers=leftovers,
            )

        logger.info(f"Generated {self.config.output}")
        return StepResult.success(readme=self.config.output)
