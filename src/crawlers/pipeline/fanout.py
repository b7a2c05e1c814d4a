import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_FAILED = object()


async def gather_isolated(
    units: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    max_concurrency: int | None = None,
    label: str = "fanout",
) -> list[R]:
    """Run ``worker`` once per unit concurrently and keep only the successes.

    Results come back in input order. A unit that raises is logged and dropped;
    it never cancels its siblings. ``max_concurrency`` caps in-flight units with
    a semaphore, ``None`` launches all of them at once.
    """
    if not units:
        return []

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency and max_concurrency > 0 else None

    async def _run(index: int, unit: T) -> object:
        try:
            if semaphore is None:
                return await worker(unit)
            async with semaphore:
                return await worker(unit)
        except Exception as exc:
            logger.warning("[%s] unit %d failed: %s", label, index, exc)
            return _FAILED

    outcomes = await asyncio.gather(*(_run(index, unit) for index, unit in enumerate(units)))
    results = [outcome for outcome in outcomes if outcome is not _FAILED]
    dropped = len(outcomes) - len(results)
    if dropped:
        logger.warning("[%s] %d of %d units dropped", label, dropped, len(outcomes))
    return results  # type: ignore[return-value]
