"""Core http-fluent модули."""

from .config import RequestConfig, DEFAULT_MAX_BUFFER_BYTES
from .request import Request, request
from .response import Response
from .stream import ResponseStream, ReceiveState
from .payload import Payload, PayloadKind, encode_body
from .decoders import SUPPORTED_COMPRESSIONS, get_decoder
from .exceptions import (
    HTTPFluentException,
    TemporaryError,
    FatalError,
    NetworkError,
    TransportError,
    AbortedError,
    TimeoutError,
    ConfigurationError,
    InvalidResponseError,
    ParseError,
    DecodeError,
    ResponseTooLargeError,
)

__all__ = [
    "RequestConfig",
    "DEFAULT_MAX_BUFFER_BYTES",
    "Request",
    "request",
    "Response",
    "ResponseStream",
    "ReceiveState",
    "Payload",
    "PayloadKind",
    "encode_body",
    "SUPPORTED_COMPRESSIONS",
    "get_decoder",
    "HTTPFluentException",
    "TemporaryError",
    "FatalError",
    "NetworkError",
    "TransportError",
    "AbortedError",
    "TimeoutError",
    "ConfigurationError",
    "InvalidResponseError",
    "ParseError",
    "DecodeError",
    "ResponseTooLargeError",
]
