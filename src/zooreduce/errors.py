class ReducerError(Exception):
    """Base class for failures surfaced by the reducer."""


class ExecutionError(ReducerError):
    """A worker task raised while mapping or summing its chunk.

    The exception raised by the task is available as ``__cause__``.
    """


class WaitInterrupted(ReducerError):
    """The caller stopped waiting before the result was available.

    Raised when a partial sum was cancelled or the wait timed out.
    """
