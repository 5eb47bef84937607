"""Checksum utilities for archive entries and build outputs."""

import hashlib
from functools import lru_cache
from pathlib import Path

import numpy as np


class ChecksumUtils:
    """Utility class for computing checksums."""

    CRC32_POLYNOMIAL = 0xEDB88320
    """Reversed CRC-32 polynomial used by ZIP"""

    CRC32_INITIAL = 0xFFFFFFFF

    @staticmethod
    @lru_cache(maxsize=None)
    def crc32_table() -> np.ndarray:
        """Build the 256-entry CRC-32 lookup table.

        The table is computed once per process and returned as a read-only
        array.

        Returns:
            uint32 array of shape (256,)
        """
        table = np.arange(256, dtype=np.uint32)
        polynomial = np.uint32(ChecksumUtils.CRC32_POLYNOMIAL)
        for _ in range(8):
            low_bit = (table & np.uint32(1)).astype(bool)
            table = np.where(low_bit, polynomial ^ (table >> np.uint32(1)), table >> np.uint32(1))
        table = table.astype(np.uint32)
        table.setflags(write=False)
        return table

    @staticmethod
    @lru_cache(maxsize=None)
    def _crc32_lookup() -> tuple[int, ...]:
        return tuple(int(value) for value in ChecksumUtils.crc32_table())

    @staticmethod
    def crc32(data: bytes) -> int:
        """Compute the ZIP CRC-32 of a byte buffer.

        Args:
            data: Bytes to checksum

        Returns:
            Unsigned 32-bit checksum
        """
        table = ChecksumUtils._crc32_lookup()
        crc = ChecksumUtils.CRC32_INITIAL
        for byte in data:
            crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
        return crc ^ ChecksumUtils.CRC32_INITIAL

    @staticmethod
    def compute_bytes_checksum(data: bytes) -> str:
        """Compute SHA256 checksum for bytes.

        Args:
            data: Bytes to hash

        Returns:
            16-character hex string (first 64 bits of SHA256)
        """
        return hashlib.sha256(data).hexdigest()[:16]

    @staticmethod
    def compute_file_checksum(file_path: Path) -> str:
        """Compute the SHA256 checksum of a file's contents.

        Args:
            file_path: Path to the file

        Returns:
            Full SHA256 checksum string
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        hasher = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                hasher.update(chunk)
        return hasher.hexdigest()
