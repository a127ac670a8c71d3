"""
Command-line driver for i18n-tasks.

This module parses command-line arguments, sets up logging, resolves the
project profile and configuration, and runs one named task.

Usage Examples:
    Run the full pipeline for a generic project:
        i18n-tasks

    Run the full pipeline for a plugin, including readme regeneration:
        i18n-tasks --plugin my-plugin

    Run a single sub-task:
        i18n-tasks compile

    List the available tasks:
        i18n-tasks --plugin my-plugin --list
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

from .config.manager import DEFAULT_CONFIG_FILE, ConfigManager
from .pipeline.process_runner import ProcessRunner
from .pipeline.profile import resolve_profile
from .pipeline.task_graph import DEFAULT_TASK, TaskGraph, build_task_graph
from .pipeline.types import CommandRunner, StepResult
from .utils.core.exceptions import I18nTasksError
from .utils.core.metadata import load_package_metadata
from .utils.core.version import get_version


class CliArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    task: str
    plugin: str | None
    root: Path
    config_file: Path | None
    list_tasks: bool
    verbose: bool
    ci_mode: bool


def setup_logging(verbose: bool = False, ci_mode: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
        ci_mode: Enable CI-friendly logging format
    """
    level = logging.DEBUG if verbose else logging.INFO

    if ci_mode:
        log_format = "::%(levelname)s::%(message)s" if verbose else "%(message)s"
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser for i18n-tasks."""
    parser = argparse.ArgumentParser(
        prog="i18n-tasks",
        description="Extract, merge and compile gettext catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Run the full i18n pipeline
  %(prog)s --plugin my-plugin       # Plugin project, regenerates readme.txt first
  %(prog)s extract                  # Only extract strings into the template
  %(prog)s --list                   # Show the available tasks
        """,
    )

    _ = parser.add_argument(
        "task",
        nargs="?",
        default=DEFAULT_TASK,
        help=f"Task to run (default: {DEFAULT_TASK})",
    )
    _ = parser.add_argument(
        "--plugin",
        metavar="NAME",
        help="Plugin identifier; selects the plugin project layout",
    )
    _ = parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Project root directory (default: current directory)",
    )
    _ = parser.add_argument(
        "--config",
        dest="config_file",
        type=Path,
        help=f"Configuration file (default: <root>/{DEFAULT_CONFIG_FILE} if present)",
    )
    _ = parser.add_argument(
        "--list",
        dest="list_tasks",
        action="store_true",
        help="List available tasks and exit",
    )
    _ = parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    _ = parser.add_argument(
        "--ci-mode",
        action="store_true",
        help="Enable CI/CD mode with condensed log output",
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> CliArgs:
    """Parse command-line arguments into a type-safe container."""
    args = create_argument_parser().parse_args(argv)
    return CliArgs(
        task=args.task,  # pyright: ignore[reportAny]
        plugin=args.plugin,  # pyright: ignore[reportAny]
        root=args.root,  # pyright: ignore[reportAny]
        config_file=args.config_file,  # pyright: ignore[reportAny]
        list_tasks=args.list_tasks,  # pyright: ignore[reportAny]
        verbose=args.verbose,  # pyright: ignore[reportAny]
        ci_mode=args.ci_mode,  # pyright: ignore[reportAny]
    )


def create_task_graph(args: CliArgs, runner: CommandRunner | None = None) -> TaskGraph:
    """
    Resolve configuration and profile, then build the task graph.

    Raises:
        ConfigurationError: If configuration or metadata cannot be loaded
    """
    root = args.root.resolve()
    if args.config_file is not None:
        config = ConfigManager.load_config(args.config_file, required=True)
    else:
        config = ConfigManager.load_config(root / DEFAULT_CONFIG_FILE)
    config = ConfigManager.apply_overrides(config, plugin_name=args.plugin)

    profile = resolve_profile(
        config.plugin_name,
        load_package_metadata(root),
        source_extension=config.source_extension,
    )
    logging.getLogger(__name__).info(
        f"Project {profile.project_name} ({profile.kind.value}), template {profile.template_path}"
    )
    return build_task_graph(profile, config, root, runner or ProcessRunner(cwd=root))


def report_failure(result: StepResult, logger: logging.Logger) -> None:
    """Log a failed task result with the offending items."""
    step = result.details.get("failed_step", "unknown")
    logger.error(f"❌ Step {step} failed: {result.reason}")
    if result.item:
        logger.error(f"  {result.item}")
    for failure in result.failures:
        logger.error(f"  {failure.item}: {failure.reason}")


def main(argv: Sequence[str] | None = None, runner: CommandRunner | None = None) -> int:
    """
    Main entry point for the i18n task driver.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.ci_mode)

    logger = logging.getLogger(__name__)

    try:
        graph = create_task_graph(args, runner)

        if args.list_tasks:
            for name in graph.task_names():
                print(f"{name:15} {graph.describe(name)}")
            return 0

        result = asyncio.run(graph.run(args.task))

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except I18nTasksError as e:
        logger.error(f"Error: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return 1

    if not result.ok:
        report_failure(result, logger)
        return 1

    logger.info(f"✅ Task {args.task} completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
