"""
Shared Configuration and Logging

One RequestConfig carries default headers, the buffer cap, a default
timeout and the logging setup for every request built with it.
"""

import asyncio

from http_fluent import LoggingConfig, RequestConfig, ResponseTooLargeError, request
from http_fluent.core.env_config import load_from_env, print_config_summary


def build_config() -> RequestConfig:
    logging_config = LoggingConfig.create(
        level="INFO",
        format="colored",
        enable_console=True,
    )
    return RequestConfig.create(
        max_buffer_bytes=64 * 1024,
        timeout_ms=5000,
        headers={"User-Agent": "http-fluent-example/1.0", "Authorization": "Bearer demo"},
        logging=logging_config,
    )


async def main():
    config = build_config()
    print_config_summary(config)

    response = await request("https://httpbin.org/get", config=config).send()
    print(f"Status: {response.status_code}")

    try:
        await request("https://httpbin.org/bytes/102400", config=config).send()
    except ResponseTooLargeError as e:
        print(f"Buffer cap hit: {e}")

    # Same thing from HTTP_FLUENT_* environment variables / .env
    env_config = load_from_env(log_enabled=True, log_format="json")
    print_config_summary(env_config)
    response = await request("https://httpbin.org/uuid", config=env_config).send()
    print(f"Status: {response.status_code}")


if __name__ == "__main__":
    asyncio.run(main())
