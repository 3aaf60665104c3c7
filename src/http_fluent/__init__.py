"""http-fluent - fluent async HTTP client with buffered and streaming responses."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.request import Request, request
from .core.response import Response
from .core.stream import ResponseStream
from .core.config import RequestConfig, DEFAULT_MAX_BUFFER_BYTES
from .core.logging import LoggingConfig
from .core.exceptions import (
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

# NullHandler: no "No handler found" warnings unless the app configures logging.
# Users can configure it themselves via logging.getLogger('http_fluent')
logging.getLogger('http_fluent').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("http-fluent")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "request",
    "Request",
    "Response",
    "ResponseStream",

    # Config
    "RequestConfig",
    "LoggingConfig",
    "DEFAULT_MAX_BUFFER_BYTES",

    # Exceptions
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

    # Version
    "__version__",
]
