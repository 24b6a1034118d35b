"""Bounded worker pool for the bulk transfer steps.

`pool_size` comes from `configure_concurrency` and is the upper bound on
in-flight requests. A pool of 0 runs every item on the calling task, one at a
time.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def run_parallel(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    pool_size: int,
) -> list[R]:
    """Run `worker` over `items`, returning results in input order."""

    pending = list(items)
    if pool_size <= 0:
        return [await worker(item) for item in pending]

    sem = asyncio.Semaphore(pool_size)

    async def bounded(item: T) -> R:
        async with sem:
            return await worker(item)

    return list(await asyncio.gather(*(bounded(item) for item in pending)))
