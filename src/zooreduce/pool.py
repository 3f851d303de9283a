import os
import queue
import threading
import weakref
import atexit
import logging

from concurrent.futures import Future

log = logging.getLogger(__name__)

_active_pools = weakref.WeakSet()
_atexit_registered = False
_handler_lock = threading.Lock()


def _cleanup_all_pools():
    """Shut down pools still running at interpreter exit."""
    for pool in list(_active_pools):
        try:
            pool.shutdown(wait=False, cancel_futures=True)
        except Exception:
            log.exception("Failed to shut down %r at exit", pool)


def _register_atexit():
    global _atexit_registered
    with _handler_lock:
        if _atexit_registered:
            return
        atexit.register(_cleanup_all_pools)
        _atexit_registered = True


def _stop_workers(tasks, num_workers):
    for _ in range(num_workers):
        tasks.put(None)


class WorkerPool:
    """Fixed-size pool of worker threads handing results back through futures."""

    def __init__(self, num_workers=None, thread_name_prefix="zooreduce"):
        if num_workers is None:
            num_workers = os.cpu_count() or 1
        if num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")

        self.num_workers = num_workers
        self.thread_name_prefix = thread_name_prefix
        self.workers = []
        self._tasks = queue.SimpleQueue()
        self._shutdown = False
        self._shutdown_lock = threading.Lock()

        try:
            for i in range(num_workers):
                t = threading.Thread(
                    target=self._worker_loop,
                    args=(self._tasks,),
                    name=f"{thread_name_prefix}-{i}",
                    daemon=True,
                )
                t.start()
                self.workers.append(t)

            _register_atexit()
            _active_pools.add(self)
            # Workers only hold the queue, so a dropped pool can still be collected.
            self._finalizer = weakref.finalize(
                self, _stop_workers, self._tasks, len(self.workers)
            )
        except Exception:
            self._shutdown = True
            _stop_workers(self._tasks, len(self.workers))
            raise

        log.debug("Started %d workers (%s)", num_workers, thread_name_prefix)

    @staticmethod
    def _worker_loop(tasks):
        while True:
            item = tasks.get()
            if item is None:
                break

            future, func, args, kwargs = item
            if not future.set_running_or_notify_cancel():
                continue

            try:
                result = func(*args, **kwargs)
            except BaseException as e:
                # Anything raised by the task belongs to the waiter, not the worker.
                future.set_exception(e)
            else:
                future.set_result(result)

    @property
    def is_shutdown(self):
        return self._shutdown

    def submit(self, func, *args, **kwargs):
        with self._shutdown_lock:
            if self._shutdown:
                raise RuntimeError("Pool is shutdown")

            future = Future()
            self._tasks.put((future, func, args, kwargs))

        return future

    def map(self, func, iterable, timeout=None):
        futures = [self.submit(func, item) for item in iterable]
        return [f.result(timeout=timeout) for f in futures]

    def shutdown(self, wait=True, cancel_futures=False):
        with self._shutdown_lock:
            already_shutdown = self._shutdown
            self._shutdown = True

        if already_shutdown:
            # Another caller is tearing down; still honor wait.
            if wait:
                self._join_workers()
            return

        self._finalizer.detach()

        if cancel_futures:
            cancelled = 0
            while True:
                try:
                    item = self._tasks.get_nowait()
                except queue.Empty:
                    break
                if item is not None and item[0].cancel():
                    # Wake anyone blocked in wait()/as_completed() on it.
                    item[0].set_running_or_notify_cancel()
                    cancelled += 1
            if cancelled:
                log.debug("Cancelled %d queued tasks", cancelled)

        _stop_workers(self._tasks, self.num_workers)

        if wait:
            self._join_workers()

        _active_pools.discard(self)
        log.debug("Pool %s shut down", self.thread_name_prefix)

    def _join_workers(self):
        current = threading.current_thread()
        for t in self.workers:
            if t is not current:
                t.join()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(cancel_futures=exc_type is not None)

    def __repr__(self):
        state = "shutdown" if self._shutdown else "running"
        return f"<WorkerPool {self.thread_name_prefix} workers={self.num_workers} {state}>"
