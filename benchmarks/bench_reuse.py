import time
from concurrent.futures import ThreadPoolExecutor

from zooreduce import WorkerPool, compute, compute_owned

# Pool sizes to test
SIZES = [1, 10, 100]
ops_count = 1_000


def run_bench(num_workers):
    print(f"\n--- Pool size: {num_workers}, {ops_count} calls ---")

    # --- Owned: a fresh pool per call ---
    start = time.perf_counter()
    for _ in range(ops_count):
        assert compute_owned(num_workers=num_workers) == 110
    duration = time.perf_counter() - start
    print(f"Owned:      {duration:.4f}s  ({ops_count / duration:.0f} calls/s)")

    # --- Injected: one pool reused for every call ---
    with WorkerPool(num_workers=num_workers) as pool:
        start = time.perf_counter()
        for _ in range(ops_count):
            assert compute(pool) == 110
        duration = time.perf_counter() - start
    print(f"Injected:   {duration:.4f}s  ({ops_count / duration:.0f} calls/s)")

    # --- Injected stdlib executor, for reference ---
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        start = time.perf_counter()
        for _ in range(ops_count):
            assert compute(executor) == 110
        duration = time.perf_counter() - start
    print(f"Executor:   {duration:.4f}s  ({ops_count / duration:.0f} calls/s)")


if __name__ == "__main__":
    for s in SIZES:
        run_bench(s)
