from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, List, Optional


@dataclass
class BatchHooks:
    """
    A collection of hook functions to observe a batch run.

    Hooks are called synchronously by the runner's driver, between batches,
    so they never run concurrently with each other. An exception raised by a
    hook propagates to the caller of the run.

    Attributes:
        on_batch_start: Called with the batch index and the batch's items,
                        after the batch passed its cancellation check and
                        before any of its tasks is dispatched.
        on_batch_end: Called with the batch index and the batch's results,
                      in submission order, once every task of the batch
                      finished successfully.
        on_cancel: Called with the batch index at which cancellation was
                   noticed and the number of that batch's tasks already
                   dispatched (0 when noticed before the batch started).
        on_error: Called with the batch index and the exception raised by a
                  failing task, just before it propagates.
    """
    on_batch_start: Optional[Callable[[int, List[Any]], None]] = None
    on_batch_end: Optional[Callable[[int, List[Any]], None]] = None
    on_cancel: Optional[Callable[[int, int], None]] = None
    on_error: Optional[Callable[[int, BaseException], None]] = None
