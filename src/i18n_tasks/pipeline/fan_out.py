"""
Concurrent fan-out over independent work items.

All item operations are started together and awaited as one batch. A
failing item never cancels the others; the batch only reports success
when every item succeeded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..utils.core.exceptions import ExternalToolError
from .types import ItemFailure, ItemOperation, StepResult, WorkItem

logger = logging.getLogger(__name__)


async def run_all(items: Sequence[WorkItem], op: ItemOperation) -> StepResult:
    """
    Run ``op`` for every item concurrently and join the outcomes.

    Args:
        items: Work items (catalog files) to process
        op: Per-item coroutine function resolving to a StepResult

    Returns:
        Success iff every item succeeded, otherwise a failure listing
        each failed item and its reason
    """
    if not items:
        return StepResult.success(items=0)

    outcomes = await asyncio.gather(*(op(item) for item in items), return_exceptions=True)

    failures: list[ItemFailure] = []
    for item, outcome in zip(items, outcomes, strict=True):
        if isinstance(outcome, BaseException):
            logger.error(f"Unexpected error processing {item}: {outcome}")
            failures.append(ItemFailure(item=str(item), reason=str(outcome) or type(outcome).__name__))
        elif not outcome.ok:
            failures.append(ItemFailure(item=str(item), reason=outcome.reason or "unknown error"))

    if failures:
        reason = f"{len(failures)} of {len(items)} item(s) failed"
        return StepResult.failure(
            reason,
            failures=tuple(failures),
            error=ExternalToolError(reason, context=[f.item for f in failures]),
            items=len(items),
        )

    return StepResult.success(items=len(items))
