"""
URL helpers for the request builder.

Includes:
- POSIX-style path joining
- query appending
- scheme validation
"""

import posixpath
from typing import Any, Mapping, Union

import httpx

from .exceptions import ConfigurationError

SUPPORTED_SCHEMES = ("http", "https")


def parse_url(url: Union[str, httpx.URL]) -> httpx.URL:
    """
    Parse an absolute URL.

    Unsupported schemes are accepted here; send() rejects them.

    Raises:
        ConfigurationError: if the URL cannot be parsed, is relative, or is
            an http(s) URL without a host
    """
    try:
        parsed = url if isinstance(url, httpx.URL) else httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid URL {url!r}: {e}")

    if not parsed.scheme:
        raise ConfigurationError(f"URL must be absolute: {url!r}")
    if parsed.scheme.lower() in SUPPORTED_SCHEMES and not parsed.host:
        raise ConfigurationError(f"URL has no host: {url!r}")

    return parsed


def join_path(base: str, segment: str) -> str:
    """
    Join `segment` onto `base` with POSIX path.join semantics.

    Unlike posixpath.join an absolute segment does not discard the base.
    `.`/`..` are resolved, repeated slashes collapse and a trailing slash
    on the segment is kept.

    Examples:
        >>> join_path("/posts", "1")
        '/posts/1'
        >>> join_path("/api/v1/", "../v2//users/")
        '/api/v2/users/'
        >>> join_path("/a", "/b")
        '/a/b'
    """
    joined = posixpath.normpath(f"{base or '/'}/{segment}")

    # normpath keeps a leading '//' (POSIX allows it), URL paths don't need it
    if joined.startswith('//'):
        joined = '/' + joined.lstrip('/')

    if not joined.startswith('/'):
        joined = '/' + joined

    if segment.endswith('/') and not joined.endswith('/'):
        joined += '/'

    return joined


def append_query(url: httpx.URL, key: str, value: Any) -> httpx.URL:
    """
    Append one query pair; existing pairs with the same key are kept.

    Example:
        >>> append_query(httpx.URL("https://x.io/?a=1"), "a", 2)
        URL('https://x.io/?a=1&a=2')
    """
    return url.copy_add_param(str(key), _query_value(value))


def append_query_mapping(url: httpx.URL, params: Mapping[str, Any]) -> httpx.URL:
    """Append every pair of `params` in iteration order."""
    for key, value in params.items():
        url = append_query(url, key, value)
    return url


def _query_value(value: Any) -> str:
    # JS-style rendering of booleans and missing values
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    return str(value)


def ensure_supported_scheme(url: httpx.URL) -> str:
    """
    Return the URL scheme if it is http/https.

    Raises:
        ConfigurationError: for any other scheme
    """
    scheme = url.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise ConfigurationError(f"Bad URL protocol: {scheme}:")
    return scheme
