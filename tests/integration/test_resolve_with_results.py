import asyncio

import pytest

from taskbatch import BatchRunner


async def double(x):
    await asyncio.sleep(0)
    return x * 2


@pytest.mark.asyncio
async def test_stream_yields_every_result_in_order():
    runner = BatchRunner(range(1, 26), 10)
    results = [task.result() async for task in runner.resolve_with_results(double)]
    assert results == [x * 2 for x in range(1, 26)]


@pytest.mark.asyncio
async def test_stream_yields_completed_tasks():
    runner = BatchRunner(range(5), 2)
    async for task in runner.resolve_with_results(double):
        assert isinstance(task, asyncio.Future)
        assert task.done()
        assert await task == task.result()


@pytest.mark.asyncio
async def test_stream_delivers_a_batch_before_starting_the_next():
    events = []

    async def record(x):
        events.append(f"start:{x}")
        await asyncio.sleep(0.001 * (3 - x % 2))
        return x

    runner = BatchRunner([1, 2, 3, 4], 2)
    async for task in runner.resolve_with_results(record):
        events.append(f"got:{task.result()}")

    assert events == [
        "start:1",
        "start:2",
        "got:1",
        "got:2",
        "start:3",
        "start:4",
        "got:3",
        "got:4",
    ]


@pytest.mark.asyncio
async def test_stream_is_lazy_and_can_be_stopped_early():
    calls = []

    async def record(x):
        calls.append(x)
        return x

    runner = BatchRunner(range(10), 3)
    stream = runner.resolve_with_results(record)
    first = await stream.__anext__()
    await stream.aclose()

    assert first.result() == 0
    # Only the first batch ever ran.
    assert calls == [0, 1, 2]


@pytest.mark.asyncio
async def test_each_call_produces_a_fresh_stream():
    runner = BatchRunner([1, 2, 3], 2)
    first = [t.result() async for t in runner.resolve_with_results(double)]
    second = [t.result() async for t in runner.resolve_with_results(double)]
    assert first == second == [2, 4, 6]


@pytest.mark.asyncio
async def test_stream_propagates_task_failure_after_earlier_batches():
    async def fail_on_three(x):
        if x == 3:
            raise RuntimeError("no threes")
        return x

    runner = BatchRunner([1, 2, 3, 4, 5], 2)
    received = []
    with pytest.raises(RuntimeError, match="no threes"):
        async for task in runner.resolve_with_results(fail_on_three):
            received.append(task.result())

    # The stream had already delivered the first batch before failing.
    assert received == [1, 2]
