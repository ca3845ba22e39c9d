"""
An example demonstrating how to build a runner from a YAML configuration file.
"""
import asyncio
from pathlib import Path

from taskbatch import BatchHooks, BatchRunner

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yml"


async def shout(word: str) -> str:
    await asyncio.sleep(0)
    return word.upper()


def main():
    hooks = BatchHooks(
        on_batch_end=lambda index, results: print(f"Batch {index} done: {results}")
    )
    runner = BatchRunner.from_config(
        ["alpha", "beta", "gamma", "delta", "epsilon"], str(CONFIG_PATH), hooks=hooks
    )

    print(f"--- Running '{runner.name}' with batch size {runner.batch_size} ---")
    results = runner.collect(shout)
    print(f"Result: {results}")


if __name__ == "__main__":
    main()
