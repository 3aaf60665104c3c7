"""
Tests for gzip/deflate content decoders.
"""

import gzip
import zlib

import pytest

from http_fluent.core.decoders import (
    ACCEPT_ENCODING,
    SUPPORTED_COMPRESSIONS,
    DeflateDecoder,
    GzipDecoder,
    MAX_DECODED_CHUNK,
    get_decoder,
)

DATA = b"The quick brown fox jumps over the lazy dog. " * 20


def feed(decoder, data: bytes, size: int) -> bytes:
    out = b""
    for i in range(0, len(data), size):
        out += decoder.decompress(data[i:i + size])
    return out + decoder.flush()


class TestGetDecoder:

    def test_supported(self):
        assert SUPPORTED_COMPRESSIONS == ("gzip", "deflate")
        assert ACCEPT_ENCODING == "gzip, deflate"

    @pytest.mark.parametrize("value", ["gzip", "GZIP", " gzip ", "Gzip"])
    def test_gzip_variants(self, value):
        assert isinstance(get_decoder(value), GzipDecoder)

    @pytest.mark.parametrize("value", ["deflate", "DEFLATE", "\tdeflate"])
    def test_deflate_variants(self, value):
        assert isinstance(get_decoder(value), DeflateDecoder)

    @pytest.mark.parametrize("value", [None, "", "br", "identity", "gzip, br", "x-gzip"])
    def test_unsupported_returns_none(self, value):
        assert get_decoder(value) is None


class TestGzipDecoder:

    def test_single_chunk(self):
        assert feed(GzipDecoder(), gzip.compress(DATA), 1 << 20) == DATA

    def test_byte_by_byte(self):
        assert feed(GzipDecoder(), gzip.compress(DATA), 1) == DATA

    def test_multiple_members(self):
        data = gzip.compress(b"first ") + gzip.compress(b"second")
        assert feed(GzipDecoder(), data, 5) == b"first second"

    def test_trailing_garbage_after_member_is_ignored(self):
        data = gzip.compress(b"payload") + b"\x00\x00garbage"
        assert feed(GzipDecoder(), data, 1 << 20) == b"payload"

    def test_corrupt_data_raises(self):
        with pytest.raises(zlib.error):
            GzipDecoder().decompress(b"this is not gzip data")

    def test_empty_chunk(self):
        assert GzipDecoder().decompress(b"") == b""


class TestDeflateDecoder:

    def test_zlib_wrapped(self):
        assert feed(DeflateDecoder(), zlib.compress(DATA), 13) == DATA

    def test_raw_deflate(self):
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(DATA) + compressor.flush()
        assert feed(DeflateDecoder(), raw, 1 << 20) == DATA

    def test_raw_deflate_in_small_chunks(self):
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(DATA) + compressor.flush()
        assert feed(DeflateDecoder(), raw, 16) == DATA

    def test_encoding_names(self):
        assert DeflateDecoder.encoding == "deflate"
        assert GzipDecoder.encoding == "gzip"


class TestBoundedOutput:
    """A small compressed chunk is handed out in pieces of at most max_output."""

    BOMB = b"\x00" * 1_000_000

    def test_gzip_pieces_are_bounded(self):
        pieces = list(GzipDecoder(max_output=4096).iter_decompress(gzip.compress(self.BOMB)))

        assert all(0 < len(piece) <= 4096 for piece in pieces)
        assert b"".join(pieces) == self.BOMB

    def test_deflate_pieces_are_bounded(self):
        pieces = list(DeflateDecoder(max_output=4096).iter_decompress(zlib.compress(self.BOMB)))

        assert all(0 < len(piece) <= 4096 for piece in pieces)
        assert b"".join(pieces) == self.BOMB

    def test_raw_deflate_pieces_are_bounded(self):
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(self.BOMB) + compressor.flush()

        pieces = list(DeflateDecoder(max_output=4096).iter_decompress(raw))

        assert all(len(piece) <= 4096 for piece in pieces)
        assert b"".join(pieces) == self.BOMB

    def test_pieces_are_produced_lazily(self):
        pieces = GzipDecoder(max_output=1024).iter_decompress(gzip.compress(self.BOMB))

        assert len(next(pieces)) == 1024

    def test_multiple_members_with_small_limit(self):
        data = gzip.compress(DATA) + gzip.compress(DATA)
        assert feed(GzipDecoder(max_output=7), data, 1 << 20) == DATA * 2

    def test_default_limit(self):
        assert GzipDecoder().max_output == MAX_DECODED_CHUNK
        assert DeflateDecoder().max_output == MAX_DECODED_CHUNK

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            GzipDecoder(max_output=0)
