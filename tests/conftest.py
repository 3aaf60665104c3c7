"""
Pytest configuration and fixtures for http-fluent tests.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

import httpx
import pytest

from http_fluent.core.logging import LoggingConfig, clear_correlation_id
import http_fluent.core.logging.logger as logger_module


class ChunkedStream(httpx.AsyncByteStream):
    """
    Response body delivered chunk by chunk.

    Args:
        chunks: Body chunks in wire order
        error: Raised after the last chunk (simulates a dropped connection)
        stall_after: Sleep forever after this many chunks
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        error: Optional[Exception] = None,
        stall_after: Optional[int] = None,
    ):
        self.chunks: List[bytes] = list(chunks)
        self.error = error
        self.stall_after = stall_after
        self.produced = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            if self.stall_after is not None and self.produced >= self.stall_after:
                await asyncio.sleep(60)
            self.produced += 1
            yield chunk
        if self.stall_after is not None and self.produced >= self.stall_after:
            await asyncio.sleep(60)
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def chunked():
    """ChunkedStream factory: chunked([b"a", b"b"], error=..., stall_after=...)."""
    return ChunkedStream


@pytest.fixture
def make_transport():
    """
    Build an httpx.MockTransport from a handler and remember the requests.

    Example:
        def test_x(make_transport):
            transport, calls = make_transport(lambda req: httpx.Response(200))
    """
    def factory(handler):
        calls: List[httpx.Request] = []

        async def recorder(request: httpx.Request):
            calls.append(request)
            result = handler(request)
            if asyncio.iscoroutine(result):
                result = await result
            return result

        return httpx.MockTransport(recorder), calls

    return factory


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with JSON file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Drop cached loggers and the correlation id between tests."""
    yield
    loggers = list(logger_module._named_loggers.values())

    for logger in loggers:
        logger.close()
        logger._logger.propagate = True
        logger._logger.setLevel(logging.NOTSET)

    logger_module._named_loggers.clear()

    package_logger = logging.getLogger("http_fluent")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    for handler in package_logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())

    clear_correlation_id()
