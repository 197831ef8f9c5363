"""Concurrent mapper.

Starts the work for every element at once (pending value resolution
followed by the callback) and joins on all of them. There is no
concurrency ceiling.
"""

import asyncio
import logging
from typing import Any, List, Tuple

from .adapter import TraversalPlan
from .collector import IterationCollector
from .walker import IterationCallback, invoke_callback, resolve_element

logger = logging.getLogger(__name__)


def _retrieve_exception(task: asyncio.Future) -> None:
    """Mark a task's failure as retrieved.

    Once one unit fails the others keep running but nobody awaits their
    outcome anymore, which would otherwise be reported as never retrieved.
    """
    if not task.cancelled():
        task.exception()


class ConcurrentMapper:
    """Maps all elements of a plan simultaneously.

    Results are placed by source position, never by completion order. The
    first failure fails the whole operation; units still running are not
    cancelled, their outcome is ignored.
    """

    async def _run_unit(
        self,
        plan: TraversalPlan,
        callback: IterationCallback,
        key: Any,
        raw: Any
    ) -> Tuple[Any, Any]:
        """Resolve one element and run the callback on it."""
        value = await resolve_element(raw, key)
        result = await invoke_callback(callback, value, key, plan.container)
        return value, result

    async def map(
        self,
        plan: TraversalPlan,
        callback: IterationCallback,
        collector: IterationCollector
    ) -> Any:
        """Map every element concurrently and collect the results.

        Args:
            plan: Traversal plan to execute
            callback: Callback invoked per element
            collector: Collector building the result

        Returns:
            The collector's result
        """
        units: List[Tuple[Any, Any]] = []
        tasks = []

        for position in plan.positions():
            key = plan.key_at(position)
            raw = plan.read(key)
            units.append((key, raw))

            task = asyncio.ensure_future(self._run_unit(plan, callback, key, raw))
            task.add_done_callback(_retrieve_exception)
            tasks.append(task)

        logger.debug("Started %d concurrent unit(s) over %s", len(tasks), plan.shape.value)

        try:
            outcomes = await asyncio.gather(*tasks)
        except Exception as e:
            logger.debug("Concurrent mapping failed: %s", e)
            raise

        for (key, raw), (value, result) in zip(units, outcomes):
            collector.collect(key, raw, value, result)

        return collector.get_result()
