import logging

from .errors import ReducerError, ExecutionError, WaitInterrupted
from .pool import WorkerPool
from .reducer import INPUT, NUM_WORKERS, double, combine, compute, compute_owned

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ReducerError",
    "ExecutionError",
    "WaitInterrupted",
    "WorkerPool",
    "INPUT",
    "NUM_WORKERS",
    "double",
    "combine",
    "compute",
    "compute_owned",
]
