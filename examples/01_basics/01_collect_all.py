"""
A simple example demonstrating the basic usage of taskbatch.
Twenty-five numbers are doubled, ten at a time, and collected into one list.
"""
import asyncio

from taskbatch import BatchRunner


async def double(x: int) -> int:
    """Pretends to do some I/O, then doubles the number."""
    await asyncio.sleep(0.01)
    return x * 2


async def main():
    """Builds a runner and waits for every batch to finish."""
    runner = BatchRunner(range(1, 26), batch_size=10)

    # Batches are worked through one after another; the items inside a
    # batch run concurrently.
    print(f"Batch sizes: {[len(b) for b in BatchRunner.partition(runner.items, runner.batch_size)]}")

    results = await runner.resolve(double)

    print("--- Results ---")
    print(results)


if __name__ == "__main__":
    asyncio.run(main())
