"""Run one pipeline stage over an ordered set of named items.

With fail_fast the first failure propagates unchanged and the remaining
items are never attempted. Without it every item runs and all failures
are reported together as a StageError.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol, TypeVar

from kerygma_release.errors import ItemFailure, PipelineOutcome, StageError


class Named(Protocol):
    name: str


N = TypeVar("N", bound=Named)


def run_stage(
    label: str,
    items: Iterable[N],
    operation: Callable[[N], Any],
    fail_fast: bool,
    logger: Any,
) -> PipelineOutcome:
    attempted: list[str] = []
    failures: list[ItemFailure] = []

    for item in items:
        attempted.append(item.name)
        logger.info("[%s] %s", label, item.name)
        try:
            operation(item)
        except Exception as exc:
            logger.warning("[%s] %s failed: %s", label, item.name, exc)
            if fail_fast:
                raise
            failures.append(ItemFailure(item.name, exc))

    outcome = PipelineOutcome(stage=label, attempted=tuple(attempted), failures=tuple(failures))
    if failures:
        raise StageError(outcome)
    return outcome
