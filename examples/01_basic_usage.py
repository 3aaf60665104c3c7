"""
Basic http-fluent Usage Examples

Demonstrates GET, POST, query parameters, path joining and compression.
"""

import asyncio

from http_fluent import HTTPFluentException, request

BASE_URL = "https://jsonplaceholder.typicode.com"


async def basic_get_request():
    """Simple GET request."""
    print("\n=== Basic GET Request ===")

    response = await request(f"{BASE_URL}/posts/1").send()

    print(f"Status: {response.status_code}")
    print(f"Data: {response.json}")


async def post_with_json():
    """POST request with a JSON body (dicts are JSON-encoded by default)."""
    print("\n=== POST with JSON ===")

    response = await request(f"{BASE_URL}/posts", "POST") \
        .body({"title": "My Post", "body": "This is the content", "userId": 1}) \
        .send()

    print(f"Status: {response.status_code}")
    print(f"Created: {response.json}")


async def post_form():
    """POST request with a form-encoded body."""
    print("\n=== POST with form data ===")

    response = await request("https://httpbin.org/post", "POST") \
        .body({"name": "john", "role": "admin"}, "form") \
        .send()

    print(f"Status: {response.status_code}")
    print(f"Form echoed back: {response.json['form']}")


async def with_query_and_path():
    """Build the URL step by step."""
    print("\n=== Path + Query ===")

    req = request(BASE_URL).path("posts").query("userId", 1).query({"_limit": 3})
    print(f"URL: {req.url}")

    response = await req.send()
    print(f"Got {len(response.json)} posts")


async def with_compression_and_timeout():
    """Negotiate gzip/deflate and bound every wait to 5 seconds."""
    print("\n=== Compression + Timeout ===")

    try:
        response = await request(f"{BASE_URL}/comments").compress().timeout(5000).send()
        print(f"Status: {response.status_code}, decoded size: {response.size} bytes")
    except HTTPFluentException as e:
        print(f"Request failed: {e}")


async def main():
    await basic_get_request()
    await post_with_json()
    await post_form()
    await with_query_and_path()
    await with_compression_and_timeout()


if __name__ == "__main__":
    asyncio.run(main())
