"""
An example demonstrating how a failing task ends a run. The exception is
not caught or wrapped by the runner: it reaches the caller as is, and no
later batch is started.
"""
import asyncio

from taskbatch import BatchRunner


class PageNotFound(Exception):
    pass


async def fetch(page: int) -> str:
    await asyncio.sleep(0.01)
    if page == 4:
        raise PageNotFound(f"page {page} does not exist")
    return f"page {page}"


def main():
    runner = BatchRunner([1, 2, 3, 4, 5], batch_size=2)
    try:
        runner.collect(fetch)
    except PageNotFound as e:
        print(f"Run failed: {e}")


if __name__ == "__main__":
    main()
