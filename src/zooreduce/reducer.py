"""
Parallel map/reduce over a fixed input, with an owned or an injected pool.

``compute`` borrows a pool from the caller and never shuts it down.
``compute_owned`` builds its own pool and always shuts it down, whether the
computation succeeds or fails.
"""

import logging
import concurrent.futures
from functools import reduce

from .errors import ExecutionError, WaitInterrupted
from .pool import WorkerPool

log = logging.getLogger(__name__)

INPUT = tuple(range(1, 11))
NUM_WORKERS = 10


def double(n):
    return n * 2


def combine(a, b):
    return a + b


def partial_sum(chunk):
    """Double every element of ``chunk`` and sum the results."""
    return reduce(combine, (double(n) for n in chunk), 0)


def _split(items, parts):
    return [items[i::parts] for i in range(parts)]


def compute(pool, timeout=None) -> int:
    """
    Sum the doubled ``INPUT`` on ``pool`` and block until the total is ready.

    ``pool`` is anything with ``submit(fn, *args)`` returning a
    ``concurrent.futures.Future``. Work is split into one chunk per worker
    when the pool reports ``num_workers``, otherwise one chunk per element.
    """
    workers = getattr(pool, "num_workers", None) or len(INPUT)
    chunks = _split(INPUT, min(workers, len(INPUT)))
    futures = [pool.submit(partial_sum, chunk) for chunk in chunks]

    total = 0
    try:
        for future in concurrent.futures.as_completed(futures, timeout=timeout):
            if future.cancelled():
                log.warning("Partial sum cancelled while waiting")
                raise WaitInterrupted("partial sum was cancelled before completing")

            exc = future.exception()
            if exc is not None:
                log.warning("Partial sum failed: %r", exc)
                raise ExecutionError(f"worker task failed: {exc!r}") from exc

            total = combine(total, future.result())
    except concurrent.futures.TimeoutError as e:
        log.warning("Gave up waiting after %ss", timeout)
        raise WaitInterrupted(f"result not ready after {timeout}s") from e

    log.debug("Computed %d over %d chunks", total, len(chunks))
    return total


def compute_owned(num_workers=NUM_WORKERS, pool_factory=WorkerPool, timeout=None) -> int:
    """Run ``compute`` on a pool created for this call and shut it down afterwards."""
    with pool_factory(num_workers=num_workers) as pool:
        return compute(pool, timeout=timeout)
