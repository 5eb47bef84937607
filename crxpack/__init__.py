"""
Signed browser extension packaging.

This package builds CRX containers without external tooling:

1. ChecksumUtils and CompressionUtils for CRC-32 and raw deflate
2. ArchiveBuilder for byte-exact ZIP archives from an explicit manifest
3. SigningUtils for RSA key generation, public key encoding and signing
4. CrxContainer for wrapping a signed archive in the container header
5. CrxBuilder to drive the whole pipeline and write the outputs
"""

from .archive import (
    Archive,
    ArchiveBuilder,
    ArchiveEntry,
    CentralDirectoryRecord,
    EndOfCentralDirectory,
    LocalFileHeader,
    SourceFile,
    validate_archive_name,
)
from .builder import BuildResult, CrxBuilder
from .config import BuildConfig, load_config
from .constants import CrxConstants, ZipConstants
from .container import CrxContainer, CrxHeader
from .errors import (
    CompressionError,
    ContainerFormatError,
    CrxBuildError,
    CryptoFailure,
    FormatOverflow,
    IOFailure,
    MissingInputFile,
)
from .signing import KeyPair, SigningUtils
from .utils import ChecksumUtils, CompressionUtils

__all__ = [
    # Archive records and builder
    "Archive",
    "ArchiveBuilder",
    "ArchiveEntry",
    "CentralDirectoryRecord",
    "EndOfCentralDirectory",
    "LocalFileHeader",
    "SourceFile",
    "validate_archive_name",
    # Signing
    "KeyPair",
    "SigningUtils",
    # Container
    "CrxContainer",
    "CrxHeader",
    # Orchestration
    "BuildConfig",
    "BuildResult",
    "CrxBuilder",
    "load_config",
    # Constants
    "CrxConstants",
    "ZipConstants",
    # Utilities
    "ChecksumUtils",
    "CompressionUtils",
    # Errors
    "CompressionError",
    "ContainerFormatError",
    "CrxBuildError",
    "CryptoFailure",
    "FormatOverflow",
    "IOFailure",
    "MissingInputFile",
]
