"""
Extraction, merge and compile steps.

Each step is a thin policy wrapper: it resolves the files it works on,
picks tool names and arguments for the project kind, and delegates to the
process runner (one call) or to the fan-out join (one call per catalog).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..config.schema import I18nTasksConfig
from ..utils.core.exceptions import (
    ConfigurationError,
    DependencyMissingError,
    NoWorkError,
)
from .fan_out import run_all
from .profile import ProjectKind, ProjectProfile
from .types import CommandRunner, StepResult

logger = logging.getLogger(__name__)


def find_source_files(root: Path, extension: str, exclude_dirs: Iterable[str]) -> list[Path]:
    """
    Find source files below ``root`` outside of excluded directories.

    Args:
        root: Project root to scan
        extension: File extension without the leading dot
        exclude_dirs: Directory names excluded at any depth

    Returns:
        Sorted paths relative to ``root``
    """
    excluded = set(exclude_dirs)
    source_files: list[Path] = []

    for filepath in root.rglob(f"*.{extension}"):
        relative_path = filepath.relative_to(root)
        # Skip files in excluded directories
        if any(part in excluded for part in relative_path.parts[:-1]):
            continue
        if filepath.is_file():
            source_files.append(relative_path)

    return sorted(source_files)


def find_catalog_files(root: Path, profile: ProjectProfile) -> list[Path]:
    """
    Resolve the profile's catalog pattern against the project root.

    Returns:
        Sorted .po paths relative to ``root``
    """
    return sorted(
        path.relative_to(root)
        for path in root.glob(profile.catalog_file_pattern)
        if path.is_file()
    )


class _ProfileStep:
    """Shared wiring for steps bound to one profile and project root."""

    name: str = ""

    def __init__(
        self,
        profile: ProjectProfile,
        config: I18nTasksConfig,
        root: Path,
        runner: CommandRunner,
    ) -> None:
        self.profile: ProjectProfile = profile
        self.config: I18nTasksConfig = config
        self.root: Path = root
        self.runner: CommandRunner = runner


class ExtractionStep(_ProfileStep):
    """Extract translatable strings into the catalog template."""

    name: str = "extract"

    async def run(self) -> StepResult:
        extraction = self.config.extraction

        if self.profile.kind is ProjectKind.PLUGIN:
            main_file = self.profile.main_source_file
            if main_file is None or not (self.root / main_file).is_file():
                logger.error(f"Main source file not found: {main_file}")
                return StepResult.from_error(
                    ConfigurationError("missing main source file", context=main_file),
                    item=main_file,
                )

        source_files = find_source_files(
            self.root, self.config.source_extension, extraction.exclude
        )
        if not source_files:
            logger.error(
                f"No .{self.config.source_extension} files found for extraction"
            )
            return StepResult.from_error(NoWorkError("no source files"))

        (self.root / self.profile.catalog_dir).mkdir(parents=True, exist_ok=True)

        match self.profile.kind:
            case ProjectKind.PLUGIN:
                command = self.config.tools.wp
                args = self._make_pot_args()
            case ProjectKind.GENERIC:
                command = self.config.tools.xgettext
                args = self._xgettext_args(source_files)

        result = await self.runner.run(command, args, cwd=self.root)
        if not result.ok:
            logger.error(f"Error running {command}: {result.reason}")
            return result.with_details(
                template_path=self.profile.template_path,
                source_files=len(source_files),
            )

        logger.info(f"Generated POT file: {self.profile.template_path}")
        logger.info(f"Extracted strings from {len(source_files)} source file(s)")
        return StepResult.success(
            template_path=self.profile.template_path,
            source_files=len(source_files),
        )

    def _xgettext_args(self, source_files: list[Path]) -> list[str]:
        extraction = self.config.extraction
        args = [f"--language={extraction.language}"]
        args.extend(f"--keyword={keyword}" for keyword in extraction.keywords)
        args.append(f"--from-code={extraction.from_code}")
        if extraction.add_comments:
            args.append(f"--add-comments={extraction.add_comments}")
        args.append(f"--output={self.profile.template_path}")
        args.extend(str(path) for path in source_files)
        return args

    def _make_pot_args(self) -> list[str]:
        # make-pot locates the plugin's main file from the slug
        args = [
            "i18n",
            "make-pot",
            ".",
            self.profile.template_path,
            f"--slug={self.profile.project_name}",
            f"--domain={self.profile.project_name}",
        ]
        if self.config.extraction.exclude:
            args.append(f"--exclude={','.join(self.config.extraction.exclude)}")
        return args


class MergeStep(_ProfileStep):
    """Merge the template into every translated catalog in place."""

    name: str = "merge"

    async def run(self) -> StepResult:
        template = self.root / self.profile.template_path
        if not template.exists():
            logger.error(f"POT file not found: {self.profile.template_path}")
            return StepResult.from_error(
                DependencyMissingError("missing template", path=self.profile.template_path),
                item=self.profile.template_path,
            )

        catalogs = find_catalog_files(self.root, self.profile)
        if not catalogs:
            logger.info("No PO files found - skipping merge")
            return StepResult.success(note="no catalog files", catalogs=0)

        result = await run_all(catalogs, self._merge_catalog)
        if not result.ok:
            logger.error(f"Merge failed: {result.reason}")
        return result.with_details(catalogs=len(catalogs))

    async def _merge_catalog(self, po_file: Path) -> StepResult:
        result = await self.runner.run(
            self.config.tools.msgmerge,
            ["--update", "--backup=off", str(po_file), self.profile.template_path],
            cwd=self.root,
        )
        if result.ok:
            logger.info(f"Updated {po_file} with new strings from POT")
        else:
            logger.error(f"Error merging {po_file}: {result.reason}")
        return result


class CompileStep(_ProfileStep):
    """Compile every translated catalog into a sibling binary catalog."""

    name: str = "compile"

    async def run(self) -> StepResult:
        catalogs = find_catalog_files(self.root, self.profile)
        if not catalogs:
            logger.error("No PO files found")
            return StepResult.from_error(NoWorkError("no catalog files"))

        result = await run_all(catalogs, self._compile_catalog)
        if not result.ok:
            logger.error(f"Compilation failed: {result.reason}")
        return result.with_details(catalogs=len(catalogs))

    async def _compile_catalog(self, po_file: Path) -> StepResult:
        mo_file = po_file.with_suffix(".mo")

        match self.profile.kind:
            case ProjectKind.PLUGIN:
                command = self.config.tools.wp
                args = ["i18n", "make-mo", str(po_file)]
            case ProjectKind.GENERIC:
                command = self.config.tools.msgfmt
                args = ["-o", str(mo_file), str(po_file)]

        result = await self.runner.run(command, args, cwd=self.root)
        if result.ok:
            logger.info(f"Converted {po_file} to {mo_file}")
        else:
            logger.error(f"Error processing {po_file}: {result.reason}")
        return result
