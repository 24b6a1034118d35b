"""Worker-pool sizing.

One of the requested "threads" is the orchestrating task itself, so the pool
gets `threads - 1` workers. A request of 1 yields a pool of 0, which the
worker pool runs sequentially.
"""

from __future__ import annotations

from core.config import DEFAULT_CONCURRENCY
from core.domain.models import ConcurrencyLevel


def configure_concurrency(requested_threads: int | None = None) -> ConcurrencyLevel:
    threads = DEFAULT_CONCURRENCY if requested_threads is None else int(requested_threads)
    if threads < 1:
        raise ValueError(f"concurrency must be at least 1, got {threads}")
    return ConcurrencyLevel(threads=threads, pool_size=threads - 1)
