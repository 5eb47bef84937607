"""Exceptions raised while building or reading a CRX container.

Every error carries the pipeline ``stage`` it came from so callers can report
which step failed: ``read``, ``compression``, ``archive``, ``keygen``,
``signing``, ``write`` or ``container``.
"""

from typing import Optional


class CrxBuildError(Exception):
    """Base class for all crxpack failures."""

    stage: str = "build"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        return f"[{self.stage}] {super().__str__()}"


class MissingInputFile(CrxBuildError):
    """A manifest file does not exist in the source directory.

    Only raised when the manifest is read in strict mode; otherwise the
    entry is skipped.
    """

    stage = "read"

    def __init__(self, name: str, stage: Optional[str] = None):
        super().__init__(f"Missing input file: {name}", stage)
        self.name = name


class IOFailure(CrxBuildError):
    """Reading an input file or writing an output file failed."""

    stage = "write"


class CompressionError(CrxBuildError):
    """Deflate compression of a file failed."""

    stage = "compression"


class CryptoFailure(CrxBuildError):
    """Key generation, encoding or signing failed."""

    stage = "signing"


class FormatOverflow(CrxBuildError, ValueError):
    """A value does not fit the width of its ZIP or container field."""

    stage = "archive"


class ContainerFormatError(CrxBuildError, ValueError):
    """Bytes do not form a well-formed container."""

    stage = "container"
