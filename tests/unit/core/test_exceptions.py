"""
Tests for custom exceptions and httpx exception classification.
"""

import builtins

import httpx
import pytest

from http_fluent.core.exceptions import (
    AbortedError,
    ConfigurationError,
    DecodeError,
    FatalError,
    HTTPFluentException,
    InvalidResponseError,
    NetworkError,
    ParseError,
    ResponseTooLargeError,
    TemporaryError,
    TimeoutError,
    TransportError,
    classify_httpx_exception,
)


class TestHTTPFluentException:
    """Test base HTTPFluentException."""

    def test_exception_message(self):
        exc = HTTPFluentException("Test error")
        assert str(exc) == "Test error"
        assert exc.message == "Test error"

    def test_default_flags(self):
        exc = HTTPFluentException("Test")
        assert exc.retryable is False
        assert exc.fatal is False

    def test_exception_can_be_raised(self):
        with pytest.raises(HTTPFluentException) as exc_info:
            raise HTTPFluentException("Test error")
        assert str(exc_info.value) == "Test error"


class TestHierarchy:
    """Temporary vs fatal split."""

    @pytest.mark.parametrize("exc", [
        TransportError("refused"),
        AbortedError(),
        TimeoutError(),
    ])
    def test_network_errors_are_retryable(self, exc):
        assert isinstance(exc, NetworkError)
        assert isinstance(exc, TemporaryError)
        assert exc.retryable is True
        assert exc.fatal is False

    @pytest.mark.parametrize("exc", [
        ConfigurationError("bad"),
        ParseError("bad json"),
        DecodeError("gzip", "bad data"),
        ResponseTooLargeError(11, 10),
    ])
    def test_fatal_errors(self, exc):
        assert isinstance(exc, FatalError)
        assert exc.fatal is True
        assert exc.retryable is False

    def test_invalid_response_family(self):
        assert issubclass(ParseError, InvalidResponseError)
        assert issubclass(DecodeError, InvalidResponseError)

    def test_timeout_error_shadows_builtin(self):
        assert TimeoutError is not builtins.TimeoutError
        assert not isinstance(TimeoutError(), builtins.TimeoutError)


class TestMessages:

    def test_network_error_with_url(self):
        exc = TransportError("Connection refused", "https://example.com")
        assert "Connection refused" in str(exc)
        assert "https://example.com" in str(exc)
        assert exc.url == "https://example.com"

    def test_aborted_message(self):
        assert str(AbortedError()) == "Server aborted request"

    def test_aborted_with_received(self):
        exc = AbortedError("https://example.com", received=42)
        assert "Server aborted request after 42 bytes" in str(exc)
        assert exc.received == 42

    def test_timeout_message(self):
        exc = TimeoutError("Timeout reached", "https://example.com", 1500)
        assert "Timeout reached (1500ms)" in str(exc)
        assert exc.timeout_ms == 1500

    def test_response_too_large(self):
        exc = ResponseTooLargeError(60000000, 50000000, "https://example.com/big")
        assert exc.size == 60000000
        assert exc.max_size == 50000000
        assert "longer than acceptable when buffering" in str(exc)
        assert "(60000000 bytes, max: 50000000)" in str(exc)

    def test_parse_error(self):
        exc = ParseError("Expecting value", status_code=200)
        assert "Invalid JSON" in str(exc)
        assert exc.status_code == 200

    def test_decode_error(self):
        exc = DecodeError("deflate", "invalid block type", "https://example.com")
        assert exc.encoding == "deflate"
        assert "deflate" in str(exc)


class TestClassifyHttpxException:
    """classify_httpx_exception()"""

    URL = "https://example.com/a"

    @pytest.mark.parametrize("exc", [
        httpx.ConnectTimeout("t"),
        httpx.ReadTimeout("t"),
        httpx.PoolTimeout("t"),
    ])
    def test_timeouts(self, exc):
        result = classify_httpx_exception(exc, self.URL, 100)
        assert isinstance(result, TimeoutError)
        assert result.timeout_ms == 100

    def test_connect_error(self):
        result = classify_httpx_exception(httpx.ConnectError("refused"), self.URL)
        assert isinstance(result, TransportError)
        assert result.url == self.URL

    def test_unsupported_protocol(self):
        result = classify_httpx_exception(httpx.UnsupportedProtocol("ftp"), self.URL)
        assert isinstance(result, ConfigurationError)

    def test_remote_protocol_error_before_body_is_transport_error(self):
        result = classify_httpx_exception(httpx.RemoteProtocolError("bad"), self.URL)
        assert isinstance(result, TransportError)

    @pytest.mark.parametrize("exc", [
        httpx.RemoteProtocolError("peer closed"),
        httpx.ReadError("reset"),
    ])
    def test_mid_body_disconnect_is_abort(self, exc):
        result = classify_httpx_exception(exc, self.URL, during_body=True, received=10)
        assert isinstance(result, AbortedError)
        assert result.received == 10

    def test_ours_are_returned_unchanged(self):
        original = ParseError("x")
        assert classify_httpx_exception(original) is original

    def test_unknown_is_wrapped(self):
        result = classify_httpx_exception(ValueError("weird"))
        assert type(result) is HTTPFluentException
        assert "weird" in str(result)
