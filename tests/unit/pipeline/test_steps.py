"""
Tests for the extraction, merge and compile steps.

All external tools are replaced by a recording runner; the tests assert on
the commands each step would run and on the step's own policy decisions.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_tasks.config.schema import DEFAULT_KEYWORDS, I18nTasksConfig
from i18n_tasks.pipeline.profile import ProjectProfile
from i18n_tasks.pipeline.steps import (
    CompileStep,
    ExtractionStep,
    MergeStep,
    find_catalog_files,
    find_source_files,
)
from i18n_tasks.utils.core.exceptions import (
    ConfigurationError,
    DependencyMissingError,
    ExternalToolError,
    NoWorkError,
)
from tests.utils.process_helpers import FakeProcessRunner, fail_for_file


class TestFindFiles:
    """Test source and catalog file resolution."""

    def test_find_source_files_skips_excluded_dirs(self, generic_project: Path) -> None:
        """Test excluded directories are skipped at any depth."""
        files = find_source_files(generic_project, "php", ["vendor", "node_modules", "tests"])

        assert files == [Path("index.php"), Path("src/page.php")]

    def test_find_source_files_nested_exclusion(self, tmp_path: Path) -> None:
        """Test a nested vendor directory is excluded."""
        nested = tmp_path / "lib" / "vendor"
        nested.mkdir(parents=True)
        _ = (nested / "dep.php").write_text("<?php", encoding="utf-8")
        _ = (tmp_path / "lib" / "own.php").write_text("<?php", encoding="utf-8")

        files = find_source_files(tmp_path, "php", ["vendor"])

        assert files == [Path("lib/own.php")]

    def test_find_catalog_files_generic(
        self, generic_project: Path, generic_profile: ProjectProfile
    ) -> None:
        """Test the generic catalog pattern finds every locale."""
        files = find_catalog_files(generic_project, generic_profile)

        assert files == [
            Path("locale/da/LC_MESSAGES/demo.po"),
            Path("locale/de/LC_MESSAGES/demo.po"),
        ]

    def test_find_catalog_files_plugin(
        self, plugin_project: Path, plugin_profile: ProjectProfile
    ) -> None:
        """Test the plugin catalog pattern is flat."""
        files = find_catalog_files(plugin_project, plugin_profile)

        assert files == [Path("languages/my-plugin-da_DK.po")]


class TestExtractionStep:
    """Test the ExtractionStep class."""

    @pytest.mark.asyncio
    async def test_no_source_files_never_invokes_runner(
        self,
        tmp_path: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test zero matching sources fail without running the tool."""
        step = ExtractionStep(generic_profile, config, tmp_path, fake_runner)

        result = await step.run()

        assert result.ok is False
        assert result.reason == "no source files"
        assert isinstance(result.error, NoWorkError)
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_generic_runs_xgettext_once(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test generic extraction runs one xgettext over every source file."""
        step = ExtractionStep(generic_profile, config, generic_project, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert result.details["template_path"] == "locale/demo.pot"
        assert result.details["source_files"] == 2

        assert len(fake_runner.calls) == 1
        call = fake_runner.calls[0]
        assert call.command == "xgettext"
        assert call.cwd == generic_project
        assert call.args[0] == "--language=PHP"
        for keyword in DEFAULT_KEYWORDS:
            assert f"--keyword={keyword}" in call.args
        assert "--from-code=UTF-8" in call.args
        assert "--add-comments=translators" in call.args
        assert "--output=locale/demo.pot" in call.args
        assert call.args[-2:] == ["index.php", "src/page.php"]

    @pytest.mark.asyncio
    async def test_generic_creates_catalog_dir(
        self,
        tmp_path: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test the catalog directory exists before the tool writes into it."""
        _ = (tmp_path / "app.php").write_text("<?php", encoding="utf-8")
        step = ExtractionStep(generic_profile, config, tmp_path, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert (tmp_path / "locale").is_dir()

    @pytest.mark.asyncio
    async def test_plugin_delegates_to_packaging_cli(
        self,
        plugin_project: Path,
        plugin_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test plugin extraction runs wp i18n make-pot."""
        step = ExtractionStep(plugin_profile, config, plugin_project, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert result.details["template_path"] == "languages/my-plugin.pot"
        assert result.details["source_files"] == 1
        assert fake_runner.commands == ["wp"]
        args = fake_runner.calls[0].args
        assert args[:4] == ["i18n", "make-pot", ".", "languages/my-plugin.pot"]
        assert "--slug=my-plugin" in args
        assert "--domain=my-plugin" in args
        assert "--exclude=.git,bin,node_modules,vendor,tests,tmp,dev" in args

    @pytest.mark.asyncio
    async def test_plugin_missing_main_file(
        self,
        tmp_path: Path,
        plugin_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test plugin extraction requires the main source file."""
        _ = (tmp_path / "other.php").write_text("<?php", encoding="utf-8")
        step = ExtractionStep(plugin_profile, config, tmp_path, fake_runner)

        result = await step.run()

        assert result.ok is False
        assert result.reason == "missing main source file"
        assert isinstance(result.error, ConfigurationError)
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_tool_failure_is_reported(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
    ) -> None:
        """Test an extraction tool failure resolves failure."""
        runner = FakeProcessRunner(fail_when=lambda _command, _args: "xgettext: syntax error")
        step = ExtractionStep(generic_profile, config, generic_project, runner)

        result = await step.run()

        assert result.ok is False
        assert result.reason == "xgettext: syntax error"
        assert isinstance(result.error, ExternalToolError)
        assert result.details["template_path"] == "locale/demo.pot"


class TestMergeStep:
    """Test the MergeStep class."""

    @pytest.mark.asyncio
    async def test_missing_template(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test a missing template fails without merging."""
        (generic_project / "locale" / "demo.pot").unlink()
        step = MergeStep(generic_profile, config, generic_project, fake_runner)

        result = await step.run()

        assert result.ok is False
        assert result.reason == "missing template"
        assert isinstance(result.error, DependencyMissingError)
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_no_catalogs_is_success(
        self,
        tmp_path: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test a project without catalogs merges nothing and succeeds."""
        (tmp_path / "locale").mkdir()
        _ = (tmp_path / "locale" / "demo.pot").write_text("# template", encoding="utf-8")
        step = MergeStep(generic_profile, config, tmp_path, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert result.details["note"] == "no catalog files"
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_merges_every_catalog(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test one in-place msgmerge per catalog without backups."""
        step = MergeStep(generic_profile, config, generic_project, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert result.details["catalogs"] == 2
        assert fake_runner.commands == ["msgmerge", "msgmerge"]
        merged = sorted(call.args[2] for call in fake_runner.calls)
        assert merged == ["locale/da/LC_MESSAGES/demo.po", "locale/de/LC_MESSAGES/demo.po"]
        for call in fake_runner.calls:
            assert call.args[:2] == ["--update", "--backup=off"]
            assert call.args[3] == "locale/demo.pot"

    @pytest.mark.asyncio
    async def test_partial_failure_still_merges_all(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
    ) -> None:
        """Test one failing catalog fails the step but every catalog is attempted."""
        runner = FakeProcessRunner(fail_when=fail_for_file("/da/", "msgmerge: bad header"))
        step = MergeStep(generic_profile, config, generic_project, runner)

        result = await step.run()

        assert result.ok is False
        assert len(runner.calls) == 2
        assert result.failure_count == 1
        assert result.failures[0].item == str(Path("locale/da/LC_MESSAGES/demo.po"))
        assert result.failures[0].reason == "msgmerge: bad header"


class TestCompileStep:
    """Test the CompileStep class."""

    @pytest.mark.asyncio
    async def test_no_catalogs_is_failure(
        self,
        tmp_path: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test compiling nothing is treated as an error."""
        step = CompileStep(generic_profile, config, tmp_path, fake_runner)

        result = await step.run()

        assert result.ok is False
        assert result.reason == "no catalog files"
        assert isinstance(result.error, NoWorkError)
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_generic_uses_msgfmt(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test generic compilation writes sibling .mo files with msgfmt."""
        step = CompileStep(generic_profile, config, generic_project, fake_runner)

        result = await step.run()

        assert result.ok is True
        calls = sorted(fake_runner.calls, key=lambda call: call.args[-1])
        assert [call.command for call in calls] == ["msgfmt", "msgfmt"]
        assert calls[0].args == [
            "-o",
            "locale/da/LC_MESSAGES/demo.mo",
            "locale/da/LC_MESSAGES/demo.po",
        ]

    @pytest.mark.asyncio
    async def test_plugin_uses_packaging_cli(
        self,
        plugin_project: Path,
        plugin_profile: ProjectProfile,
        config: I18nTasksConfig,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test plugin compilation runs wp i18n make-mo per catalog."""
        step = CompileStep(plugin_profile, config, plugin_project, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert fake_runner.commands == ["wp"]
        assert fake_runner.calls[0].args == ["i18n", "make-mo", "languages/my-plugin-da_DK.po"]

    @pytest.mark.asyncio
    async def test_custom_tool_names(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        fake_runner: FakeProcessRunner,
    ) -> None:
        """Test tool names come from configuration."""
        config = I18nTasksConfig.model_validate({"tools": {"msgfmt": "/opt/gettext/bin/msgfmt"}})
        step = CompileStep(generic_profile, config, generic_project, fake_runner)

        result = await step.run()

        assert result.ok is True
        assert set(fake_runner.commands) == {"/opt/gettext/bin/msgfmt"}

    @pytest.mark.asyncio
    async def test_failure_reports_offending_catalog(
        self,
        generic_project: Path,
        generic_profile: ProjectProfile,
        config: I18nTasksConfig,
    ) -> None:
        """Test compile failures name the catalog and keep compiling the rest."""
        runner = FakeProcessRunner(fail_when=fail_for_file("/de/", "msgfmt: fatal"))
        step = CompileStep(generic_profile, config, generic_project, runner)

        result = await step.run()

        assert result.ok is False
        assert len(runner.calls) == 2
        assert [failure.item for failure in result.failures] == [
            str(Path("locale/de/LC_MESSAGES/demo.po"))
        ]
