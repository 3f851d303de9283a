import threading
import concurrent.futures

import pytest
from zooreduce import WorkerPool


def error_task():
    raise ValueError("Intentional error for testing")


def test_error_propagation():
    """Verify that exceptions in workers are correctly propagated to futures."""
    with WorkerPool(num_workers=1) as pool:
        future = pool.submit(error_task)
        with pytest.raises(ValueError, match="Intentional error"):
            future.result()

        # The worker survives the failure
        assert pool.submit(abs, -3).result(timeout=1.0) == 3


def test_invalid_size():
    with pytest.raises(ValueError, match="at least 1"):
        WorkerPool(num_workers=0)


def test_default_size():
    with WorkerPool() as pool:
        assert pool.num_workers >= 1
        assert len(pool.workers) == pool.num_workers


def test_concurrent_pools():
    """Verify that multiple pools can co-exist with their own threads."""
    with WorkerPool(num_workers=1, thread_name_prefix="p1") as p1:
        with WorkerPool(num_workers=1, thread_name_prefix="p2") as p2:
            f1 = p1.submit(lambda: threading.current_thread().name)
            f2 = p2.submit(lambda: threading.current_thread().name)
            assert f1.result(timeout=1.0) == "p1-0"
            assert f2.result(timeout=1.0) == "p2-0"


def test_cancel_queued_work():
    started = threading.Event()
    release = threading.Event()

    def blocker():
        started.set()
        return release.wait(5.0)

    pool = WorkerPool(num_workers=1)
    try:
        running = pool.submit(blocker)
        assert started.wait(1.0)
        queued = [pool.submit(abs, -i) for i in range(3)]

        pool.shutdown(wait=False, cancel_futures=True)
        done, not_done = concurrent.futures.wait(queued, timeout=1.0)
        assert not not_done
        assert all(f.cancelled() for f in queued)
    finally:
        release.set()

    assert running.result(timeout=1.0) is True
    for t in pool.workers:
        t.join(timeout=1.0)
        assert not t.is_alive()


if __name__ == "__main__":
    pytest.main([__file__])
