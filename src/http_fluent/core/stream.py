"""
Response body pipeline.

BodyReader walks one response through
AWAITING_HEADERS -> RECEIVING_BODY -> SETTLED_SUCCESS | SETTLED_ERROR,
pulling raw chunks from httpx, decoding them when a decoder is attached
and translating transport failures into our exceptions. Request.send()
drives it into a Response in buffered mode and hands it to the caller
wrapped in a ResponseStream in stream mode.
"""

import asyncio
import zlib
from enum import Enum
from typing import AsyncIterator, Iterator, Optional

import httpx

from .decoders import ContentDecoder
from .exceptions import (
    DecodeError,
    HTTPFluentException,
    TimeoutError,
    classify_httpx_exception,
)


class ReceiveState(str, Enum):
    AWAITING_HEADERS = "awaiting_headers"
    RECEIVING_BODY = "receiving_body"
    SETTLED_SUCCESS = "settled_success"
    SETTLED_ERROR = "settled_error"


def to_seconds(timeout_ms: Optional[float]) -> Optional[float]:
    return timeout_ms / 1000.0 if timeout_ms else None


def _raw_chunks(response: httpx.Response) -> AsyncIterator[bytes]:
    """
    Raw (still encoded) body chunks of `response`.

    httpx reads a Response built from bytes content eagerly, after which
    aiter_raw() refuses to run. Its stream is then an in-memory ByteStream
    that can be iterated again and still yields the wire bytes.
    """
    if response.is_stream_consumed:
        return response.stream.__aiter__()
    return response.aiter_raw()


class BodyReader:
    """
    Async iterator over the (decoded) body chunks of one response.

    Every wait for a chunk is bounded by `timeout_ms`. Whatever ends the
    body (end of stream, error, timeout, aclose()) closes the httpx
    response and, when given, the client that owns the connection.

    Raises from iteration:
        TimeoutError: no chunk within timeout_ms
        AbortedError: peer closed the connection mid-body
        TransportError: other connection failures
        DecodeError: corrupt gzip/deflate data
    """

    def __init__(
        self,
        response: httpx.Response,
        client: Optional[httpx.AsyncClient] = None,
        *,
        decoder: Optional[ContentDecoder] = None,
        timeout_ms: Optional[float] = None,
    ):
        self._response = response
        self._client = client
        self._decoder = decoder
        self._timeout_ms = timeout_ms
        self._raw = _raw_chunks(response)
        self._pending: Optional[Iterator[bytes]] = None
        self._closed = False

        self.url = str(response.request.url)
        self.state = ReceiveState.RECEIVING_BODY
        # Bytes off the wire, before decoding
        self.received = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "BodyReader":
        return self

    async def __anext__(self) -> bytes:
        while True:
            # Decoded pieces of the last raw chunk go out one at a time
            if self._pending is not None:
                chunk = await self._next_decoded()
                if chunk:
                    return chunk
                self._pending = None

            if self.state is not ReceiveState.RECEIVING_BODY:
                raise StopAsyncIteration

            try:
                raw = await asyncio.wait_for(self._raw.__anext__(), to_seconds(self._timeout_ms))
            except StopAsyncIteration:
                tail = await self._finish()
                if tail:
                    return tail
                raise StopAsyncIteration
            except asyncio.TimeoutError:
                await self._fail(TimeoutError("Timeout reached", self.url, self._timeout_ms))
            except (httpx.HTTPError, httpx.StreamError) as e:
                await self._fail(classify_httpx_exception(
                    e,
                    self.url,
                    self._timeout_ms,
                    during_body=True,
                    received=self.received,
                ), cause=e)

            self.received += len(raw)
            if self._decoder is None:
                if raw:
                    return raw
            else:
                self._pending = self._decoder.iter_decompress(raw)

    async def _next_decoded(self) -> bytes:
        try:
            return next(self._pending, b"")
        except zlib.error as e:
            await self._fail(DecodeError(self._decoder.encoding, str(e), self.url), cause=e)

    async def _finish(self) -> bytes:
        tail = b""
        if self._decoder is not None:
            try:
                tail = self._decoder.flush()
            except zlib.error as e:
                await self._fail(DecodeError(self._decoder.encoding, str(e), self.url), cause=e)

        self.state = ReceiveState.SETTLED_SUCCESS
        await self.aclose()
        return tail

    async def _fail(self, error: HTTPFluentException, cause: Optional[BaseException] = None) -> None:
        self.state = ReceiveState.SETTLED_ERROR
        await self.aclose()
        raise error from cause

    async def aclose(self) -> None:
        """
        Tear down the connection. Idempotent.

        Closing before the end of the body settles the reader as an error:
        the body was not fully received.
        """
        if self._closed:
            return
        self._closed = True
        self._pending = None

        if self.state is ReceiveState.RECEIVING_BODY:
            self.state = ReceiveState.SETTLED_ERROR

        try:
            await self._raw.aclose()
        finally:
            try:
                await self._response.aclose()
            finally:
                if self._client is not None:
                    await self._client.aclose()


class ResponseStream:
    """
    Live response body returned by send() in stream mode.

    Iterate it to receive byte chunks in wire order (decompressed if
    compression was negotiated). Nothing is buffered and there is no size
    cap: the consumer paces the download.

    Failures after the response head, timeouts included, are raised from
    the iteration itself, because send() has already returned this handle.

    Example:
        >>> async with await request(url).stream().send() as body:
        ...     async for chunk in body:
        ...         sink.write(chunk)
    """

    def __init__(self, response: httpx.Response, reader: BodyReader):
        self.status_code = response.status_code
        self.headers = response.headers
        self.url = reader.url
        self._reader = reader

    @property
    def state(self) -> ReceiveState:
        return self._reader.state

    @property
    def closed(self) -> bool:
        return self._reader.closed

    @property
    def received(self) -> int:
        """Raw bytes received so far."""
        return self._reader.received

    def __aiter__(self) -> "ResponseStream":
        return self

    async def __anext__(self) -> bytes:
        return await self._reader.__anext__()

    async def aread(self) -> bytes:
        """Read the rest of the body into memory."""
        body = bytearray()
        async for chunk in self:
            body += chunk
        return bytes(body)

    async def aclose(self) -> None:
        await self._reader.aclose()

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<ResponseStream [{self.status_code}] {self.state.value}>"
