"""
Streaming Download Example

The body is handed over chunk by chunk instead of being buffered, so
there is no size cap. Errors after the response head are raised while
iterating.
"""

import asyncio
import sys

from http_fluent import AbortedError, TimeoutError, request


async def download(url: str, destination: str) -> None:
    body = await request(url).stream().compress().timeout(10000).send()
    print(f"Status: {body.status_code}")

    try:
        async with body:
            with open(destination, "wb") as f:
                async for chunk in body:
                    f.write(chunk)
    except TimeoutError as e:
        print(f"Server went silent: {e}")
        return
    except AbortedError as e:
        print(f"Connection dropped after {e.received} bytes")
        return

    print(f"Saved {body.received} bytes to {destination}")


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "https://httpbin.org/bytes/102400"
    asyncio.run(download(url, "download.bin"))
