"""Tests for CompressionUtils."""

import zlib

import pytest

from crxpack.errors import CompressionError
from crxpack.utils.compression_utils import CompressionUtils


class TestDeflate:
    """Tests for raw deflate compression."""

    @pytest.mark.parametrize("data", [b"", b"x", b"hello world " * 500, bytes(range(256)) * 4])
    def test_round_trip(self, data):
        """Test that inflate restores the original bytes."""
        assert CompressionUtils.inflate(CompressionUtils.deflate(data)) == data

    def test_has_no_zlib_framing(self):
        """Test that output is raw deflate, not a zlib stream."""
        data = b"frame check " * 50
        compressed = CompressionUtils.deflate(data)
        assert zlib.decompress(compressed, -zlib.MAX_WBITS) == data
        with pytest.raises(zlib.error):
            zlib.decompress(compressed)

    def test_compresses_repetitive_data(self):
        data = b"a" * 10000
        assert len(CompressionUtils.deflate(data)) < len(data)

    def test_is_deterministic(self):
        data = b"same input" * 100
        assert CompressionUtils.deflate(data) == CompressionUtils.deflate(data)

    @pytest.mark.parametrize("level", [0, 1, 9])
    def test_levels(self, level):
        data = b"level test " * 100
        assert CompressionUtils.inflate(CompressionUtils.deflate(data, level)) == data

    def test_invalid_level_raises(self):
        with pytest.raises(CompressionError) as exc_info:
            CompressionUtils.deflate(b"data", level=42)
        assert exc_info.value.stage == "compression"
