"""
Pipeline package for i18n-tasks.

This package contains the profile resolution, process execution, fan-out
join, pipeline steps and the task graph that sequences them.
"""

from .types import ItemFailure, StepResult, WorkItem, Step, CommandRunner
from .profile import ProjectKind, ProjectProfile, resolve_profile
from .process_runner import ProcessRunner
from .fan_out import run_all
from .steps import ExtractionStep, MergeStep, CompileStep
from .readme import ReadmePipeline
from .textdomain import TextDomainStep, apply_text_domain
from .task_graph import TaskGraph, build_task_graph, DEFAULT_TASK

__all__ = [
    # Types
    "ItemFailure",
    "StepResult",
    "WorkItem",
    "Step",
    "CommandRunner",
    # Profile
    "ProjectKind",
    "ProjectProfile",
    "resolve_profile",
    # Execution
    "ProcessRunner",
    "run_all",
    # Steps
    "ExtractionStep",
    "MergeStep",
    "CompileStep",
    "ReadmePipeline",
    "TextDomainStep",
    "apply_text_domain",
    # Composition
    "TaskGraph",
    "build_task_graph",
    "DEFAULT_TASK",
]
