"""Raw deflate compression for archive payloads."""

import zlib

from ..errors import CompressionError


class CompressionUtils:
    """Static helpers for raw (unframed) deflate streams."""

    WBITS = -zlib.MAX_WBITS
    """Negative window bits select raw deflate with no zlib header or trailer"""

    @staticmethod
    def deflate(data: bytes, level: int = zlib.Z_DEFAULT_COMPRESSION) -> bytes:
        """Compress bytes to a raw deflate stream.

        Args:
            data: Uncompressed bytes
            level: zlib compression level (-1 for default, 0-9)

        Returns:
            Raw deflate bytes suitable for ZIP compression method 8

        Raises:
            CompressionError: If zlib rejects the input or level
        """
        try:
            compressor = zlib.compressobj(level=level, method=zlib.DEFLATED, wbits=CompressionUtils.WBITS)
            return compressor.compress(data) + compressor.flush()
        except (zlib.error, ValueError, TypeError) as e:
            raise CompressionError(f"Deflate compression failed: {e}") from e

    @staticmethod
    def inflate(data: bytes) -> bytes:
        """Decompress a raw deflate stream produced by deflate().

        Args:
            data: Raw deflate bytes

        Returns:
            Original bytes
        """
        decompressor = zlib.decompressobj(wbits=CompressionUtils.WBITS)
        return decompressor.decompress(data) + decompressor.flush()
