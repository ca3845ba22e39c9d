# taskbatch.core
# This package contains the core pieces of taskbatch: the BatchRunner,
# partitioning, cancellation and the error types.

from .runner import BatchRunner
from .partition import partition
from .cancellation import CancellationToken, is_cancellation_requested
from .errors import TaskBatchError, InvalidArgumentError
from .hooks import BatchHooks

__all__ = [
    "BatchRunner",
    "partition",
    "CancellationToken",
    "is_cancellation_requested",
    "TaskBatchError",
    "InvalidArgumentError",
    "BatchHooks",
]
