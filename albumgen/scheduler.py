"""
Fan-out/fan-in over a thread pool.

Used at both levels of the pipeline: one task per album, and within each
album one task per source file.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class TaskOutcome(Generic[T, R]):
    """Result or error of one task."""
    item: T
    result: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fan_out(
    items: Sequence[T],
    task: Callable[[T], R],
    max_workers: Optional[int] = None,
    on_result: Optional[Callable[[TaskOutcome[T, R]], None]] = None,
) -> List[TaskOutcome[T, R]]:
    """
    Run one task per item concurrently and join all of them.

    Without max_workers every item gets its own thread. Outcomes are returned
    in completion order. An exception raised by a task is captured on its
    outcome and never affects sibling tasks.

    Args:
        items: Items to process
        task: Callable run once per item
        max_workers: Optional cap on concurrent threads
        on_result: Optional callback run in the joining thread per outcome

    Returns:
        Exactly len(items) outcomes
    """
    if not items:
        return []

    workers = min(max_workers, len(items)) if max_workers else len(items)
    outcomes: List[TaskOutcome[T, R]] = []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures: Dict[Future, T] = {executor.submit(task, item): item for item in items}

        for future in as_completed(futures):
            item = futures[future]
            try:
                outcome = TaskOutcome(item=item, result=future.result())
            except Exception as e:
                logger.error(f"Task for {item} failed: {e}", exc_info=True)
                outcome = TaskOutcome(item=item, error=e)

            outcomes.append(outcome)
            if on_result:
                on_result(outcome)

    return outcomes
