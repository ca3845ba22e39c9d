import asyncio
import time

import pytest

from taskbatch import BatchRunner


async def double(x):
    await asyncio.sleep(0)
    return x * 2


@pytest.mark.asyncio
async def test_resolve_doubles_in_order():
    runner = BatchRunner(range(1, 26), 10)
    results = await runner.resolve(double)
    assert results == [x * 2 for x in range(1, 26)]


@pytest.mark.asyncio
async def test_resolve_single_item():
    runner = BatchRunner(["a"], 100)
    results = await runner.resolve(lambda s: asyncio.sleep(0, result=s.upper()))
    assert results == ["A"]


@pytest.mark.asyncio
async def test_resolve_keeps_submission_order_not_completion_order():
    async def slow_for_small(x):
        # Lower numbers finish last.
        await asyncio.sleep((10 - x) * 0.005)
        return x

    runner = BatchRunner(range(10), 5)
    assert await runner.resolve(slow_for_small) == list(range(10))


@pytest.mark.asyncio
async def test_resolve_runs_a_batch_concurrently_and_batches_sequentially():
    active = 0
    max_active = 0
    seen_by_batch = []

    async def track(x):
        nonlocal active, max_active
        active += 1
        max_active = max(max_active, active)
        seen_by_batch.append(active)
        await asyncio.sleep(0.01)
        active -= 1
        return x

    runner = BatchRunner(range(12), 4)
    await runner.resolve(track)

    assert max_active == 4
    # Each batch starts from an idle driver.
    assert seen_by_batch == [1, 2, 3, 4] * 3


@pytest.mark.asyncio
async def test_resolve_dispatches_whole_batch_before_awaiting():
    events = []

    async def record(x):
        events.append(f"start:{x}")
        await asyncio.sleep(0)
        events.append(f"end:{x}")
        return x

    runner = BatchRunner([1, 2, 3], 3)
    await runner.resolve(record)
    assert events[:3] == ["start:1", "start:2", "start:3"]


@pytest.mark.asyncio
async def test_resolve_runs_sync_functions_in_threads():
    def blocking_double(x):
        time.sleep(0.05)
        return x * 2

    runner = BatchRunner(range(4), 4)
    start = time.perf_counter()
    results = await runner.resolve(blocking_double)
    elapsed = time.perf_counter() - start

    assert results == [0, 2, 4, 6]
    # Four blocking calls in parallel take far less than their sum.
    assert elapsed < 0.19


@pytest.mark.asyncio
async def test_resolve_awaits_awaitables_returned_by_plain_callables():
    runner = BatchRunner([1, 2, 3], 2)
    results = await runner.resolve(lambda x: double(x))
    assert results == [2, 4, 6]


@pytest.mark.asyncio
async def test_runner_can_be_resolved_repeatedly():
    calls = []

    async def count(x):
        calls.append(x)
        return x + 1

    runner = BatchRunner([1, 2, 3], 2)
    first = await runner.resolve(count)
    second = await runner.resolve(count)

    assert first == second == [2, 3, 4]
    assert calls == [1, 2, 3, 1, 2, 3]
