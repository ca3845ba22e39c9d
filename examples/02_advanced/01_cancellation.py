"""
An example demonstrating cooperative cancellation. The token is checked
before every batch and before every task dispatch, so a run stops at the
next checkpoint and returns what was already completed.
"""
import asyncio

from taskbatch import BatchRunner, CancellationToken


def main():
    token = CancellationToken()

    async def process(x: int) -> int:
        # Something inside the work decides the run should stop.
        if x == 5:
            token.cancel()
        await asyncio.sleep(0.01)
        return x * 10

    runner = BatchRunner(range(20), batch_size=4)

    # `collect` runs the batches on a fresh event loop for sync callers.
    results = runner.collect(process, token)

    print("--- Results (cancelled during the second batch) ---")
    print(results)
    print(f"Completed {len(results)} of {len(runner.items)} items.")


if __name__ == "__main__":
    main()
