from __future__ import annotations


class TaskBatchError(Exception):
    """Base class for all exceptions raised by the taskbatch library."""

    pass


class InvalidArgumentError(TaskBatchError, ValueError):
    """
    Raised when a runner or a partition is requested with unusable input:
    no items at all, or a batch size that is not a positive integer.
    """

    pass
