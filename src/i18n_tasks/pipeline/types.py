"""
Core types for the i18n pipeline.

Every asynchronous operation in the pipeline resolves to exactly one
StepResult; fan-out batches aggregate many of them into one.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from typing_extensions import override

from ..utils.core.exceptions import I18nTasksError

WorkItem = Path
ItemOperation = Callable[[Path], Awaitable["StepResult"]]


@dataclass(frozen=True)
class ItemFailure:
    """Failure of a single work item inside a fan-out batch."""

    item: str
    reason: str


@dataclass(frozen=True)
class StepResult:
    """Tagged outcome of a pipeline operation: success or failure."""

    ok: bool
    reason: str | None = None
    item: str | None = None
    failures: tuple[ItemFailure, ...] = ()
    error: I18nTasksError | None = None
    details: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def success(cls, **details: object) -> StepResult:
        """Create a successful result carrying optional details."""
        return cls(ok=True, details=details)

    @classmethod
    def failure(
        cls,
        reason: str,
        item: str | None = None,
        failures: tuple[ItemFailure, ...] = (),
        error: I18nTasksError | None = None,
        **details: object,
    ) -> StepResult:
        """Create a failed result."""
        return cls(
            ok=False,
            reason=reason,
            item=item,
            failures=failures,
            error=error,
            details=details,
        )

    @classmethod
    def from_error(cls, error: I18nTasksError, item: str | None = None) -> StepResult:
        """Create a failed result from a classified error."""
        return cls.failure(error.message, item=item, error=error)

    @property
    def failure_count(self) -> int:
        """Number of failed items (1 for a failure without per-item detail)."""
        if self.ok:
            return 0
        return len(self.failures) or 1

    def with_details(self, **details: object) -> StepResult:
        """Return a copy with additional details merged in."""
        merged = dict(self.details)
        merged.update(details)
        return StepResult(
            ok=self.ok,
            reason=self.reason,
            item=self.item,
            failures=self.failures,
            error=self.error,
            details=merged,
        )

    @override
    def __str__(self) -> str:
        if self.ok:
            return "Success"
        text = f"Failure: {self.reason}"
        if self.item:
            text += f" ({self.item})"
        return text


class Step(Protocol):
    """A named unit of work in a task sequence."""

    @property
    def name(self) -> str: ...

    async def run(self) -> StepResult: ...


class CommandRunner(Protocol):
    """Anything that can run an external command to a StepResult."""

    async def run(
        self, command: str, args: Sequence[str], cwd: Path | None = None
    ) -> StepResult: ...
