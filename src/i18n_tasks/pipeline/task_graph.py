"""
Named task registry and sequential task execution.

A task is an ordered list of steps, or names of other tasks. Running a
task executes its steps strictly in order and stops at the first step
that fails, because later steps read what earlier ones wrote.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..config.schema import I18nTasksConfig
from ..utils.core.exceptions import ConfigurationError, I18nTasksError
from .profile import ProjectProfile
from .readme import ReadmePipeline
from .steps import CompileStep, ExtractionStep, MergeStep
from .textdomain import TextDomainStep
from .types import CommandRunner, Step, StepResult

logger = logging.getLogger(__name__)

DEFAULT_TASK = "i18n"

TaskEntry = Step | str


@dataclass
class TaskDefinition:
    """A registered task and its ordered entries."""

    name: str
    entries: list[TaskEntry] = field(default_factory=list)
    description: str = ""


class TaskGraph:
    """Registry of named tasks with strictly ordered execution."""

    def __init__(self) -> None:
        self._tasks: dict[str, TaskDefinition] = {}

    def register_task(
        self, name: str, entries: Sequence[TaskEntry], description: str = ""
    ) -> None:
        """
        Register (or replace) a named task.

        Args:
            name: Task name exposed to callers
            entries: Steps or names of other registered tasks, in order
            description: Human readable summary
        """
        if name in self._tasks:
            logger.debug(f"Task {name} already registered, replacing it")
        self._tasks[name] = TaskDefinition(name=name, entries=list(entries), description=description)

    def has_task(self, name: str) -> bool:
        return name in self._tasks

    def task_names(self) -> list[str]:
        return sorted(self._tasks)

    def describe(self, name: str) -> str:
        return self._get(name).description

    def _get(self, name: str) -> TaskDefinition:
        try:
            return self._tasks[name]
        except KeyError:
            raise ConfigurationError(f"Unknown task: {name}", context=name) from None

    def resolve(self, name: str) -> list[Step]:
        """
        Expand a task into its flat, ordered list of steps.

        Raises:
            ConfigurationError: For unknown task names or circular references
        """
        steps: list[Step] = []
        self._expand(name, steps, [])
        return steps

    def _expand(self, name: str, steps: list[Step], stack: list[str]) -> None:
        if name in stack:
            cycle = " -> ".join([*stack, name])
            raise ConfigurationError(f"Circular task reference: {cycle}", context=cycle)
        definition = self._get(name)
        stack.append(name)
        for entry in definition.entries:
            if isinstance(entry, str):
                self._expand(entry, steps, stack)
            else:
                steps.append(entry)
        _ = stack.pop()

    async def run(self, name: str) -> StepResult:
        """
        Run a task, stopping at the first failing step.

        Args:
            name: Registered task name

        Returns:
            Success when every step succeeded, otherwise the first failure
            annotated with the name of the failing step

        Raises:
            ConfigurationError: If the task cannot be resolved
        """
        steps = self.resolve(name)
        logger.info(f"Running task {name} ({len(steps)} step(s))")

        completed: list[str] = []
        for step in steps:
            logger.info(f"Running step: {step.name}")
            try:
                result = await step.run()
            except Exception as e:
                logger.exception(f"Unexpected error in step {step.name}")
                error = I18nTasksError(f"{step.name} failed: {e}", context=step.name)
                result = StepResult.from_error(error)
            if not result.ok:
                logger.error(f"Task {name} failed at step {step.name}: {result.reason}")
                return result.with_details(failed_step=step.name, completed_steps=completed)
            completed.append(step.name)

        logger.info(f"Task {name} completed successfully")
        return StepResult.success(completed_steps=completed)


def build_task_graph(
    profile: ProjectProfile,
    config: I18nTasksConfig,
    root: Path,
    runner: CommandRunner,
) -> TaskGraph:
    """
    Register the i18n tasks for a resolved project profile.

    Args:
        profile: Resolved project profile
        config: Validated configuration
        root: Project root directory
        runner: Process runner shared by all steps

    Returns:
        TaskGraph with ``extract``, ``merge``, ``compile``, ``textdomain``,
        ``i18n`` and, for plugin projects, ``readme`` (plus their aliases)
    """
    graph = TaskGraph()

    graph.register_task(
        "extract",
        [ExtractionStep(profile, config, root, runner)],
        "Extract translatable strings into the catalog template",
    )
    graph.register_task(
        "merge",
        [MergeStep(profile, config, root, runner)],
        "Merge the catalog template into translated catalogs",
    )
    graph.register_task(
        "compile",
        [CompileStep(profile, config, root, runner)],
        "Compile translated catalogs into binary catalogs",
    )
    graph.register_task(
        "textdomain",
        [TextDomainStep(profile, config, root)],
        "Add the project text domain to translation calls",
    )

    i18n_entries: list[TaskEntry] = ["extract", "merge", "compile"]
    aliases = {
        "makepot": "extract",
        "msgmerge": "merge",
        "makemo": "compile",
        "addtextdomain": "textdomain",
    }

    if profile.is_plugin:
        graph.register_task(
            "readme",
            [ReadmePipeline(profile, config.readme, root)],
            "Regenerate readme.txt from the Markdown documentation",
        )
        aliases["makereadmetxt"] = "readme"
        i18n_entries.insert(0, "readme")

    for alias, target in aliases.items():
        graph.register_task(alias, [target], f"Alias for {target}")

    graph.register_task(DEFAULT_TASK, i18n_entries, "Run the full i18n pipeline")
    return graph
