"""
Incremental content decoders for `content-encoding: gzip` and `deflate`.

Each decoder is fed raw wire chunks in order. iter_decompress() yields the
decompressed output in pieces of at most `max_output` bytes, so a highly
compressed chunk never expands in one go; decompress() joins them.
"""

import zlib
from typing import Iterator, Optional

SUPPORTED_COMPRESSIONS = ("gzip", "deflate")

# Value sent in accept-encoding by Request.compress()
ACCEPT_ENCODING = ", ".join(SUPPORTED_COMPRESSIONS)

# Upper bound for one decompressed piece
MAX_DECODED_CHUNK = 64 * 1024


def _bounded(obj, data: bytes, limit: int) -> Iterator[bytes]:
    """Drain `data` through a decompressobj, `limit` output bytes at a time."""
    while True:
        piece = obj.decompress(data, limit)
        if piece:
            yield piece
        data = obj.unconsumed_tail
        # A full piece may leave output pending inside zlib
        if not data and len(piece) < limit:
            return


class ContentDecoder:
    encoding: str = ""

    def __init__(self, max_output: int = MAX_DECODED_CHUNK) -> None:
        if max_output <= 0:
            raise ValueError("max_output must be positive")
        self.max_output = max_output

    def iter_decompress(self, data: bytes) -> Iterator[bytes]:
        raise NotImplementedError()

    def decompress(self, data: bytes) -> bytes:
        return b"".join(self.iter_decompress(data))

    def flush(self) -> bytes:
        raise NotImplementedError()


class DeflateDecoder(ContentDecoder):
    """
    zlib-wrapped deflate; servers that send raw deflate streams are
    detected on the first chunk.
    """

    encoding = "deflate"

    def __init__(self, max_output: int = MAX_DECODED_CHUNK) -> None:
        super().__init__(max_output)
        self._first_try = True
        self._data = b""
        self._obj = zlib.decompressobj()

    def iter_decompress(self, data: bytes) -> Iterator[bytes]:
        if not data:
            return

        if not self._first_try:
            yield from _bounded(self._obj, data, self.max_output)
            return

        self._data += data
        try:
            first = self._obj.decompress(data, self.max_output)
        except zlib.error:
            # No zlib header: retry everything seen so far as raw deflate
            self._first_try = False
            self._obj = zlib.decompressobj(-zlib.MAX_WBITS)
            buffered, self._data = self._data, b""
            yield from _bounded(self._obj, buffered, self.max_output)
            return

        if not first:
            return

        self._first_try = False
        self._data = b""
        yield first
        if self._obj.unconsumed_tail or len(first) == self.max_output:
            yield from _bounded(self._obj, self._obj.unconsumed_tail, self.max_output)

    def flush(self) -> bytes:
        return self._obj.flush()


class GzipDecoder(ContentDecoder):
    """
    gzip, including bodies made of several concatenated gzip members.
    """

    encoding = "gzip"

    def __init__(self, max_output: int = MAX_DECODED_CHUNK) -> None:
        super().__init__(max_output)
        self._obj = zlib.decompressobj(16 + zlib.MAX_WBITS)
        self._in_later_member = False

    def iter_decompress(self, data: bytes) -> Iterator[bytes]:
        while data:
            try:
                yield from _bounded(self._obj, data, self.max_output)
            except zlib.error:
                if self._in_later_member:
                    # Trailing garbage after a complete member
                    return
                raise
            data = self._obj.unused_data
            if data:
                self._in_later_member = True
                self._obj = zlib.decompressobj(16 + zlib.MAX_WBITS)

    def flush(self) -> bytes:
        return self._obj.flush()


def get_decoder(content_encoding: Optional[str]) -> Optional[ContentDecoder]:
    """
    Decoder for a response `content-encoding` value, or None.

    Only gzip and deflate are recognised; anything else (br, identity,
    stacked encodings) is passed through undecoded.

    Examples:
        >>> get_decoder("GZIP").encoding
        'gzip'
        >>> get_decoder("br") is None
        True
    """
    if not content_encoding:
        return None

    encoding = content_encoding.strip().lower()
    if encoding == "gzip":
        return GzipDecoder()
    if encoding == "deflate":
        return DeflateDecoder()
    return None
