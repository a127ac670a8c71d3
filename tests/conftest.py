"""
Global test configuration fixtures for i18n-tasks tests.

This module provides reusable pytest fixtures for building throwaway
generic and plugin project trees, resolved profiles, configurations and a
recording process runner.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_tasks.config.schema import I18nTasksConfig
from i18n_tasks.pipeline.profile import ProjectProfile, resolve_profile
from tests.utils.process_helpers import FakeProcessRunner

PLUGIN_NAME = "my-plugin"

MAIN_PLUGIN_FILE = """<?php
/**
 * Plugin Name: New Name
 * Plugin URI: https://example.com/new
 * Description: A fresh description.
 * Version: 2.0.0
 * Author: Jane Doe
 * Author URI: https://example.com/jane
 * License: GPL-2.0-or-later
 * License URI: https://www.gnu.org/licenses/gpl-2.0.html
 * Requires at least: 6.0
 * Requires PHP: 8.1
 * Text Domain: my-plugin
 */

echo __( 'Hello', 'my-plugin' );
"""

README_TXT = """=== Old Name ===
Plugin Name: Old
Plugin URI: https://example.com/old
Contributors: jane
Description: An old description.
Version: 1.0.0
Author: Someone
Author URI: https://example.com/someone
License: MIT
License URI: https://opensource.org/licenses/MIT
Requires at least: 5.0
Tested up to: 6.1
Requires PHP: 7.4
Stable tag: 1.0.0

An old description.

== Description ==

Old body that gets replaced.
"""


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    """Create a recording process runner."""
    return FakeProcessRunner()


@pytest.fixture
def config() -> I18nTasksConfig:
    """Default configuration."""
    return I18nTasksConfig()


@pytest.fixture
def generic_profile() -> ProjectProfile:
    """Profile of a generic project named "demo"."""
    return resolve_profile(None, {"name": "demo"})


@pytest.fixture
def plugin_profile() -> ProjectProfile:
    """Profile of a plugin project."""
    return resolve_profile(PLUGIN_NAME, {})


@pytest.fixture
def generic_project(tmp_path: Path) -> Path:
    """
    Create a generic project with sources and two locale catalogs.

    Returns:
        Path: Project root
    """
    _ = (tmp_path / "src").mkdir()
    _ = (tmp_path / "index.php").write_text("<?php echo _('Hi');", encoding="utf-8")
    _ = (tmp_path / "src" / "page.php").write_text("<?php echo __('Page');", encoding="utf-8")
    for excluded in ("vendor", "node_modules", "tests"):
        _ = (tmp_path / excluded).mkdir()
        _ = (tmp_path / excluded / "skip.php").write_text("<?php", encoding="utf-8")

    for language in ("da", "de"):
        lc_messages = tmp_path / "locale" / language / "LC_MESSAGES"
        lc_messages.mkdir(parents=True)
        _ = (lc_messages / "demo.po").write_text(f"# {language}", encoding="utf-8")

    _ = (tmp_path / "locale" / "demo.pot").write_text("# template", encoding="utf-8")
    return tmp_path


@pytest.fixture
def plugin_project(tmp_path: Path) -> Path:
    """
    Create a plugin project with main file, readme, docs and catalogs.

    Returns:
        Path: Project root
    """
    _ = (tmp_path / f"{PLUGIN_NAME}.php").write_text(MAIN_PLUGIN_FILE, encoding="utf-8")
    _ = (tmp_path / "readme.txt").write_text(README_TXT, encoding="utf-8")
    _ = (tmp_path / "README.md").write_text(
        "# My Plugin\n\nIntro text.\n\n## Features\n\n- Fast\n- Small\n", encoding="utf-8"
    )
    _ = (tmp_path / "INSTALLATION.md").write_text(
        "## Installation\n\n- Upload the plugin\n", encoding="utf-8"
    )
    _ = (tmp_path / "FAQ.md").write_text(
        "## Frequently Asked Questions\n\n### Does it work?\n\nYes.\n", encoding="utf-8"
    )
    _ = (tmp_path / "CHANGELOG.md").write_text(
        "## Changelog\n\n### 2.0.0\n\n- Rewrite\n", encoding="utf-8"
    )

    languages = tmp_path / "languages"
    languages.mkdir()
    _ = (languages / f"{PLUGIN_NAME}-da_DK.po").write_text("# da", encoding="utf-8")
    _ = (languages / f"{PLUGIN_NAME}.pot").write_text("# template", encoding="utf-8")
    return tmp_path
