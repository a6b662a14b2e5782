"""
Fan-out helpers for awaiting one asynchronous unit per item.

Each traversal level picks a `FanOut` policy, which keeps throttling choices
explicit at the call site.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class FanOut(str, Enum):
    """How the units of one traversal level are awaited."""

    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


async def fan_out(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    policy: FanOut = FanOut.PARALLEL,
) -> list[R]:
    """
    Runs `worker` for every item and returns the results in input order.

    PARALLEL starts every unit at once and fails on the first error;
    SEQUENTIAL awaits each unit before starting the next one.
    """
    items = list(items)
    if policy is FanOut.SEQUENTIAL:
        results = []
        for item in items:
            results.append(await worker(item))
        return results

    return list(await asyncio.gather(*(worker(item) for item in items)))
