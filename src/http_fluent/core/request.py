# src/http_fluent/core/request.py
"""
Fluent request builder.

Example:
    >>> from http_fluent import request
    >>>
    >>> res = await request("https://api.example.com/posts", "POST") \\
    ...     .header("Authorization", "Bearer ...") \\
    ...     .body({"title": "foo"}) \\
    ...     .timeout(5000) \\
    ...     .send()
    >>> res.status_code, res.json
"""

import asyncio
import time
import uuid
from typing import Any, Awaitable, Dict, Mapping, Optional, Union

import httpx

from .config import RequestConfig
from .decoders import ACCEPT_ENCODING, get_decoder
from .exceptions import (
    ConfigurationError,
    HTTPFluentException,
    ResponseTooLargeError,
    TimeoutError,
    classify_httpx_exception,
)
from .logging import get_request_logger, reset_correlation_id, set_correlation_id
from .payload import Payload, encode_body
from .response import Response
from .stream import BodyReader, ResponseStream, to_seconds
from .utils import (
    append_query,
    append_query_mapping,
    ensure_supported_scheme,
    join_path,
    parse_url,
)
from ..utils.sanitizer import mask_headers, mask_url

LOGGER_NAME = "http_fluent.request"


class Request:
    """
    Chainable HTTP request.

    Every configuration method mutates this builder and returns it; send()
    transmits the request. A builder is meant to be sent once.

    Two consumption modes:
        - buffered (default): send() resolves to a Response once the whole
          body arrived, or fails; the body is capped at max_buffer_bytes
        - stream(): send() resolves to a ResponseStream as soon as the
          response head arrived; body errors and timeouts are raised while
          iterating that stream

    Args:
        url: Absolute URL (str or httpx.URL)
        method: HTTP method, GET by default
        config: Shared RequestConfig (default headers, buffer cap, timeout, logging)
        transport: Custom httpx transport (tests, unix sockets, ...)
    """

    def __init__(
        self,
        url: Union[str, httpx.URL],
        method: str = "GET",
        *,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or RequestConfig()
        self._url = parse_url(url)
        self._method = str(method).upper()
        self._payload: Optional[Payload] = None
        self._headers: Dict[str, Any] = {
            name.lower(): value for name, value in self._config.headers.items()
        }
        self._stream = False
        self._compress = False
        self._timeout_ms: Optional[float] = self._config.timeout_ms
        self._transport = transport

    # ==================== Builder ====================

    def query(self, key: Union[str, Mapping[str, Any]], value: Any = None) -> "Request":
        """
        Append query parameters; existing ones are never replaced.

        Examples:
            >>> req.query("page", 2)
            >>> req.query({"sort": "asc", "limit": 10})
        """
        if isinstance(key, Mapping):
            self._url = append_query_mapping(self._url, key)
        else:
            self._url = append_query(self._url, key, value)
        return self

    def path(self, segment: str) -> "Request":
        """
        Join a path segment onto the URL path (POSIX join: `..` and `.` are
        resolved, an absolute segment is still appended).

        Example:
            >>> request("https://api.example.com/v1").path("users/1").url
            URL('https://api.example.com/v1/users/1')
        """
        self._url = self._url.copy_with(path=join_path(self._url.path, str(segment)))
        return self

    def body(self, data: Any, encoding: Optional[str] = None) -> "Request":
        """
        Set the request body.

        Without an explicit `encoding`: bytes are sent as-is ("buffer"),
        str is sent as form data ("form"), anything else as JSON ("json").

        Examples:
            >>> req.body({"title": "foo"})              # application/json
            >>> req.body({"q": "x"}, "form")            # a=1&b=2 style
            >>> req.body(b"\\x89PNG...", "buffer")
        """
        self._payload = encode_body(data, encoding)
        return self

    def header(self, name: Union[str, Mapping[str, Any]], value: Any = None) -> "Request":
        """
        Set headers. Names are stored lowercase, the last write wins.
        """
        if isinstance(name, Mapping):
            for header_name, header_value in name.items():
                self._headers[str(header_name).lower()] = header_value
        else:
            self._headers[str(name).lower()] = value
        return self

    def timeout(self, ms: Optional[float]) -> "Request":
        """
        Bound every network wait (connect + response head, each body chunk)
        to `ms` milliseconds. 0/None disables the timeout.
        """
        if ms is not None and ms < 0:
            raise ConfigurationError(f"timeout must be non-negative, got {ms}")
        self._timeout_ms = ms or None
        return self

    def stream(self) -> "Request":
        """Resolve send() with a ResponseStream instead of buffering the body."""
        self._stream = True
        return self

    def compress(self) -> "Request":
        """
        Negotiate gzip/deflate and decode such responses transparently.

        accept-encoding is only added when the caller did not set it.
        """
        self._compress = True
        if not self._headers.get("accept-encoding"):
            self._headers["accept-encoding"] = ACCEPT_ENCODING
        return self

    # ==================== Introspection ====================

    @property
    def url(self) -> httpx.URL:
        return self._url

    @property
    def method(self) -> str:
        return self._method

    @property
    def headers(self) -> Dict[str, Any]:
        """Copy of the current header map (lowercase names)."""
        return dict(self._headers)

    @property
    def payload(self) -> Optional[Payload]:
        return self._payload

    @property
    def body_encoding(self) -> Optional[str]:
        return self._payload.encoding if self._payload is not None else None

    @property
    def is_stream(self) -> bool:
        return self._stream

    @property
    def is_compressed(self) -> bool:
        return self._compress

    @property
    def timeout_ms(self) -> Optional[float]:
        return self._timeout_ms

    @property
    def max_buffer_bytes(self) -> int:
        return self._config.max_buffer_bytes

    # ==================== Send ====================

    def send(self) -> Awaitable[Union[Response, ResponseStream]]:
        """
        Transmit the request.

        Scheme validation happens right here, before a coroutine exists:
        anything but http/https raises ConfigurationError immediately and
        no connection is attempted. The returned awaitable resolves to a
        Response (buffered) or a ResponseStream (stream mode).

        Raises (from the awaitable):
            TransportError: connection could not be established / failed
            AbortedError: server closed the connection mid-body (buffered)
            TimeoutError: timeout elapsed (stream mode: only before the head)
            ResponseTooLargeError: buffered body exceeded max_buffer_bytes
            DecodeError: corrupt compressed body (buffered)
        """
        if self._payload is not None:
            content_type = self._payload.content_type
            if "content-type" not in self._headers and content_type:
                self._headers["content-type"] = content_type
            if "content-length" not in self._headers:
                self._headers["content-length"] = len(self._payload)

        ensure_supported_scheme(self._url)

        # Snapshot: later builder calls do not leak into this send
        outgoing = httpx.Request(
            self._method,
            self._url,
            headers={name: str(value) for name, value in self._headers.items()},
            content=self._payload.content if self._payload is not None else None,
        )
        return self._send(
            outgoing,
            stream=self._stream,
            compress=self._compress,
            timeout_ms=self._timeout_ms,
        )

    async def _send(
        self,
        outgoing: httpx.Request,
        *,
        stream: bool,
        compress: bool,
        timeout_ms: Optional[float],
    ) -> Union[Response, ResponseStream]:
        url = str(outgoing.url)
        max_buffer = self._config.max_buffer_bytes
        logger = get_request_logger(self._config.logging, LOGGER_NAME)
        token = set_correlation_id(str(uuid.uuid4()))
        start_time = time.monotonic()

        logger.info(
            "Request started",
            method=outgoing.method,
            host=outgoing.url.host,
            url=mask_url(url),
            headers=mask_headers(dict(outgoing.headers)),
            stream=stream,
            compress=compress,
            timeout_ms=timeout_ms,
        )

        client = httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(to_seconds(timeout_ms)),
            follow_redirects=False,
        )
        raw_response: Optional[httpx.Response] = None
        reader: Optional[BodyReader] = None
        handed_off = False

        try:
            try:
                raw_response = await asyncio.wait_for(
                    client.send(outgoing, stream=True),
                    to_seconds(timeout_ms),
                )
            except asyncio.TimeoutError:
                raise TimeoutError("Timeout reached", url, timeout_ms)
            except httpx.HTTPError as e:
                raise classify_httpx_exception(e, url, timeout_ms) from e

            decoder = get_decoder(raw_response.headers.get("content-encoding")) if compress else None
            reader = BodyReader(raw_response, client, decoder=decoder, timeout_ms=timeout_ms)

            if stream:
                logger.info(
                    "Response stream opened",
                    method=outgoing.method,
                    url=mask_url(url),
                    status_code=raw_response.status_code,
                    decoded=decoder.encoding if decoder else None,
                    duration_ms=_elapsed_ms(start_time),
                )
                handed_off = True
                return ResponseStream(raw_response, reader)

            response = Response(raw_response.status_code, raw_response.headers)
            async for chunk in reader:
                response.add_chunk(chunk)
                if response.size > max_buffer:
                    await reader.aclose()
                    raise ResponseTooLargeError(response.size, max_buffer, url)

            logger.info(
                "Request completed",
                method=outgoing.method,
                url=mask_url(url),
                status_code=response.status_code,
                response_size=response.size,
                duration_ms=_elapsed_ms(start_time),
            )
            return response

        except HTTPFluentException as e:
            self._log_failure(logger, outgoing, url, e, start_time)
            raise

        except Exception as e:
            # Anything the transport raised outside httpx.HTTPError
            error = classify_httpx_exception(e, url, timeout_ms)
            self._log_failure(logger, outgoing, url, error, start_time)
            raise error from e

        finally:
            if not handed_off:
                if reader is not None:
                    await reader.aclose()
                else:
                    if raw_response is not None:
                        await raw_response.aclose()
                    await client.aclose()
            reset_correlation_id(token)

    @staticmethod
    def _log_failure(logger, outgoing: httpx.Request, url: str, error: HTTPFluentException, start_time: float) -> None:
        logger.error(
            "Request failed",
            method=outgoing.method,
            url=mask_url(url),
            error=str(error),
            error_type=type(error).__name__,
            duration_ms=_elapsed_ms(start_time),
        )

    def __repr__(self) -> str:
        mode = "stream" if self._stream else "buffered"
        return f"<Request [{self._method} {mask_url(self._url)}] {mode}>"


def request(
    url: Union[str, httpx.URL],
    method: str = "GET",
    *,
    config: Optional[RequestConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Request:
    """
    Start building a request.

    Example:
        >>> res = await request("https://jsonplaceholder.typicode.com/posts/1").send()
        >>> res.json["id"]
        1
    """
    return Request(url, method, config=config, transport=transport)


def _elapsed_ms(start_time: float) -> float:
    return round((time.monotonic() - start_time) * 1000, 2)
