"""
Utility modules for crxpack.

This package contains checksum, compression and logging helpers used by the
archive builder and the command line.
"""

from .checksum_utils import ChecksumUtils
from .compression_utils import CompressionUtils
from .logging_utils import configure_logging

__all__ = [
    "ChecksumUtils",
    "CompressionUtils",
    "configure_logging",
]
