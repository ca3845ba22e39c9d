"""
An example demonstrating streaming mode. Results of each batch are handed
out as soon as that batch is done, before the next batch starts.
"""
import asyncio

from taskbatch import BatchRunner

URLS = [f"http://example.com/page{i}" for i in range(1, 7)]


async def download_url_async(url: str) -> dict:
    """A dummy function to simulate downloading a URL asynchronously."""
    await asyncio.sleep(0.05)
    return {"url": url, "content": f"Content of {url}"}


async def main():
    runner = BatchRunner(URLS, batch_size=3)

    print("--- Streaming results ---")
    downloaded = 0
    # Every yielded task is already finished; `.result()` never blocks.
    async for task in runner.resolve_with_results(download_url_async):
        page = task.result()
        downloaded += 1
        print(f"Got {page['url']}")

    print(f"Downloaded {downloaded} pages.")


if __name__ == "__main__":
    asyncio.run(main())
