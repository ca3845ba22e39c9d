"""
This module defines the `BatchRunner`, which applies an asynchronous task
function to a fixed collection of items, one batch at a time.

Within a batch every item is dispatched before any is awaited, so the whole
batch runs concurrently; the batch is then joined as a unit before the next
one starts. Results come back either all at once (`resolve`) or batch by
batch as each join completes (`resolve_with_results`).
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
    TypeVar,
    Union,
)

from ..config import DEFAULT_BATCH_SIZE, Config, load_config, runner_settings
from .cancellation import is_cancellation_requested
from .errors import InvalidArgumentError
from .hooks import BatchHooks
from .log import get_logger
from .partition import partition, validate_batch_size

T = TypeVar("T")
Y = TypeVar("Y")

TaskFunction = Callable[[T], Union[Awaitable[Y], Y]]

# Abandoned tasks that were left running; held here until they finish.
_detached_tasks: Set["asyncio.Task[Any]"] = set()


class BatchRunner:
    """Runs a task function over a fixed set of items in sequential batches.

    The runner only keeps what it was constructed with. Each call to
    `resolve`, `resolve_with_results` or `collect` partitions the items again
    and owns its own results, so one runner can be used any number of times.

    Attributes:
        name: The name of the runner, used for logging.
        hooks: Optional callbacks observing each run.
        cancel_abandoned: Whether tasks dispatched in a batch that was cut
            short by cancellation are cancelled (`True`) or left to finish
            on their own (`False`). A sync task function already running in
            a worker thread cannot be interrupted, so a cancelled task only
            settles once its thread returns.
        logger: A logger instance for the runner.
    """

    partition = staticmethod(partition)

    def __init__(
        self,
        items: Optional[Iterable[T]],
        batch_size: int = DEFAULT_BATCH_SIZE,
        *,
        hooks: Optional[BatchHooks] = None,
        cancel_abandoned: bool = True,
        name: Optional[str] = None,
    ):
        """Initializes a new BatchRunner.

        Args:
            items: The items to process. They are copied into a tuple, so
                later changes to the source have no effect on the runner.
            batch_size: The maximum number of items dispatched together.
            hooks: Callbacks invoked as batches start, end, fail or are
                cancelled.
            cancel_abandoned: The policy for tasks already dispatched when
                cancellation is noticed in the middle of a batch.
            name: An optional name for the runner.

        Raises:
            InvalidArgumentError: If no items are given or `batch_size` is
                not a positive integer.
        """
        if items is None:
            raise InvalidArgumentError("Items were not provided.")
        items = tuple(items)
        if not items:
            raise InvalidArgumentError("Items were not provided.")
        validate_batch_size(batch_size)

        self._items: Tuple[T, ...] = items
        self._batch_size = batch_size
        self.hooks = hooks or BatchHooks()
        self.cancel_abandoned = cancel_abandoned
        self.name = name or "BatchRunner"
        self.logger = get_logger(f"taskbatch.runner.{self.name}")

    @classmethod
    def from_config(
        cls,
        items: Optional[Iterable[T]],
        config: Union[Config, str, None] = None,
        *,
        hooks: Optional[BatchHooks] = None,
    ) -> "BatchRunner":
        """Builds a runner from a `Config` or the path of a YAML file.

        Reads `runner.batch_size`, `runner.cancel_abandoned` and
        `runner.name`; missing keys fall back to the constructor defaults.

        Raises:
            InvalidArgumentError: If a `runner.*` value has the wrong type.
        """
        if not isinstance(config, Config):
            config = load_config(config)
        settings = runner_settings(config)
        return cls(
            items,
            settings.batch_size,
            hooks=hooks,
            cancel_abandoned=settings.cancel_abandoned,
            name=settings.name,
        )

    @property
    def items(self) -> Tuple[T, ...]:
        return self._items

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def __repr__(self) -> str:
        return (
            f"BatchRunner(name={self.name!r}, items={len(self._items)}, "
            f"batch_size={self._batch_size})"
        )

    async def resolve(
        self, task_to_execute: TaskFunction, cancellation_token: Any = None
    ) -> List[Y]:
        """Runs every batch and returns all results at once.

        Args:
            task_to_execute: The function applied to each item. Coroutine
                functions run on the event loop; other callables run in a
                worker thread.
            cancellation_token: An optional signal polled before each batch
                and before each task dispatch.

        Returns:
            The results in input order. When cancellation is requested the
            list holds only the batches that completed before it was noticed.

        Raises:
            Exception: Whatever the task function raised for the first
                failing item; no later batch is started.
        """
        results: List[Y] = []
        async for task in self._drive(task_to_execute, cancellation_token, "collect"):
            results.append(task.result())
        return results

    def resolve_with_results(
        self, task_to_execute: TaskFunction, cancellation_token: Any = None
    ) -> AsyncIterator["asyncio.Task[Y]"]:
        """Streams each batch's finished tasks as soon as the batch is joined.

        Every yielded task is already done; read it with `.result()`. The
        returned iterator is single-pass, call this method again for a new
        run. On cancellation the iterator simply ends.
        """
        return self._drive(task_to_execute, cancellation_token, "stream")

    def collect(
        self, task_to_execute: TaskFunction, cancellation_token: Any = None
    ) -> List[Y]:
        """A synchronous entry point that runs `resolve` on a new event loop.

        .. warning::
            This cannot be called from a running event loop. Use `resolve`
            there instead.

        The event loop is closed before this returns, and closing it
        cancels every task still pending. Tasks detached under
        `cancel_abandoned=False` therefore do not outlive `collect`.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.resolve(task_to_execute, cancellation_token))
        raise RuntimeError(
            "Cannot call BatchRunner.collect from a running event loop. "
            "You must await BatchRunner.resolve instead."
        )

    async def _drive(
        self, task_to_execute: TaskFunction, cancellation_token: Any, mode: str
    ) -> AsyncIterator["asyncio.Task[Y]"]:
        batches = partition(self._items, self._batch_size)
        loop = asyncio.get_running_loop()
        log = self.logger.bind(mode=mode)
        log.info(
            "run_started",
            items=len(self._items),
            batches=len(batches),
            batch_size=self._batch_size,
        )
        run_start_time = loop.time()
        batches_completed = 0
        items_out = 0
        status = "failed"

        try:
            for index, batch in enumerate(batches):
                if is_cancellation_requested(cancellation_token):
                    self._on_cancel(log, index, 0)
                    status = "cancelled"
                    return

                if self.hooks.on_batch_start:
                    self.hooks.on_batch_start(index, batch)
                log.debug("batch_started", batch=index, size=len(batch))
                batch_start_time = loop.time()

                pending: List[asyncio.Task[Y]] = []
                try:
                    for item in batch:
                        if is_cancellation_requested(cancellation_token):
                            self._on_cancel(log, index, len(pending))
                            await self._abandon(pending, log)
                            status = "cancelled"
                            return
                        pending.append(_dispatch(task_to_execute, item))

                    await asyncio.gather(*pending)
                except Exception as e:
                    log.warning("batch_failed", batch=index, error=str(e))
                    await _cancel_and_settle(pending)
                    if self.hooks.on_error:
                        self.hooks.on_error(index, e)
                    raise

                batches_completed += 1
                log.debug(
                    "batch_finished",
                    batch=index,
                    size=len(pending),
                    duration=round(loop.time() - batch_start_time, 4),
                )
                if self.hooks.on_batch_end:
                    self.hooks.on_batch_end(index, [task.result() for task in pending])

                for task in pending:
                    items_out += 1
                    yield task
            status = "completed"
        except GeneratorExit:
            status = "closed"
            raise
        finally:
            log.info(
                "run_finished",
                status=status,
                batches_completed=batches_completed,
                items_out=items_out,
                duration=round(loop.time() - run_start_time, 4),
            )

    def _on_cancel(self, log: Any, index: int, dispatched: int) -> None:
        log.info(
            "run_cancelled",
            batch=index,
            dispatched=dispatched,
            abandoned_policy="cancel" if self.cancel_abandoned else "detach",
        )
        if self.hooks.on_cancel:
            self.hooks.on_cancel(index, dispatched)

    async def _abandon(self, tasks: List["asyncio.Task[Any]"], log: Any) -> None:
        if self.cancel_abandoned:
            await _cancel_and_settle(tasks)
            return
        for task in tasks:
            _detached_tasks.add(task)
            task.add_done_callback(functools.partial(_on_detached_done, log))


def _dispatch(task_to_execute: TaskFunction, item: Any) -> "asyncio.Task[Any]":
    if inspect.iscoroutinefunction(task_to_execute):
        return asyncio.ensure_future(task_to_execute(item))
    return asyncio.ensure_future(_run_in_thread(task_to_execute, item))


async def _run_in_thread(task_to_execute: TaskFunction, item: Any) -> Any:
    call = asyncio.ensure_future(asyncio.to_thread(task_to_execute, item))
    try:
        result = await asyncio.shield(call)
    except asyncio.CancelledError:
        # A worker thread cannot be interrupted; stay pending until it returns.
        await asyncio.wait([call])
        raise
    # Plain callables may still hand back an awaitable, e.g. `lambda x: fetch(x)`.
    if inspect.isawaitable(result):
        result = await result
    return result


async def _cancel_and_settle(tasks: List["asyncio.Task[Any]"]) -> None:
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)


def _on_detached_done(log: Any, task: "asyncio.Task[Any]") -> None:
    _detached_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        log.warning("abandoned_task_failed", error=str(error))
