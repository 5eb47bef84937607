"""ZIP archive construction from an ordered list of source files.

The archive is assembled record by record rather than through ``zipfile`` so
that every byte of the output is fixed: no timestamps, no extra fields, no
directory entries and a single compression method (deflate).

Layout:
    [local header + name + deflate payload] * N
    [central directory record + name] * N
    end of central directory record

Every record is a frozen pydantic model whose integer fields are
width-bounded (UInt16 / UInt32). A value that does not fit raises
FormatOverflow when the record is created.

Example:
    files = SourceFile.read_manifest("dist", ["manifest.json", "popup.js"])
    archive_bytes = ArchiveBuilder().build_archive(files)
"""

import logging
import struct
from pathlib import Path, PurePosixPath
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .common import PathLike, UInt16, UInt32
from .constants import ZipConstants
from .errors import FormatOverflow, IOFailure, MissingInputFile
from .utils.checksum_utils import ChecksumUtils
from .utils.compression_utils import CompressionUtils

logger = logging.getLogger(__name__)

TRecord = TypeVar("TRecord", bound=BaseModel)

_RANGE_ERRORS = {"less_than_equal", "greater_than_equal"}


def _checked(record_cls: type[TRecord], **fields: Any) -> TRecord:
    """Create a record, turning field-width validation errors into FormatOverflow."""
    try:
        return record_cls(**fields)
    except ValidationError as e:
        overflows = [err for err in e.errors() if err["type"] in _RANGE_ERRORS]
        if not overflows:
            raise
        err = overflows[0]
        field = ".".join(str(part) for part in err["loc"])
        raise FormatOverflow(
            f"{record_cls.__name__}.{field} value {err['input']!r} does not fit its field"
        ) from e


def validate_archive_name(name: str) -> str:
    """Check that a name is a normalised relative path inside the source directory.

    Raises:
        ValueError: If the name is empty, absolute, contains a backslash or
            has "." or ".." segments
    """
    if not name:
        raise ValueError("File name must not be empty")
    path = PurePosixPath(name)
    if path.is_absolute() or "\\" in name:
        raise ValueError(f"File name must be a relative POSIX path: {name!r}")
    # PurePosixPath drops "." segments, empty segments and trailing slashes
    if ".." in path.parts or path.as_posix() != name:
        raise ValueError(f"File name must be a normalised path inside the source directory: {name!r}")
    return name


class SourceFile(BaseModel):
    """A file to be packaged, read once and never modified."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Archive-relative path, no leading slash")
    data: bytes = Field(..., description="Raw file contents")

    @field_validator("name")
    @classmethod
    def _validate_name(cls, name: str) -> str:
        return validate_archive_name(name)

    @property
    def name_bytes(self) -> bytes:
        return self.name.encode("utf-8")

    @classmethod
    def read_manifest(
        cls,
        source_dir: PathLike,
        manifest: Sequence[str],
        strict: bool = False,
    ) -> list["SourceFile"]:
        """Read the manifest files from a directory, in manifest order.

        Args:
            source_dir: Directory containing the files
            manifest: Ordered archive-relative file names
            strict: If True, a missing file raises instead of being skipped

        Returns:
            SourceFiles for every manifest entry that exists

        Raises:
            ValueError: If a manifest name is not a relative path inside source_dir
            MissingInputFile: If strict and a manifest file does not exist
            IOFailure: If an existing file cannot be read
        """
        source_dir = Path(source_dir)
        for name in manifest:
            validate_archive_name(name)

        files = []
        for name in manifest:
            path = source_dir / name
            if not path.is_file():
                if strict:
                    raise MissingInputFile(name)
                logger.warning("Skipping missing file: %s", name)
                continue
            try:
                data = path.read_bytes()
            except OSError as e:
                raise IOFailure(f"Could not read {path}: {e}", stage="read") from e
            files.append(cls(name=name, data=data))
        return files


class LocalFileHeader(BaseModel):
    """Fixed 30-byte local file header, followed by the file name."""

    model_config = ConfigDict(frozen=True)

    version_needed: UInt16 = ZipConstants.VERSION
    flags: UInt16 = 0
    method: UInt16 = ZipConstants.METHOD_DEFLATE
    mod_time: UInt16 = 0
    mod_date: UInt16 = 0
    crc32: UInt32
    compressed_size: UInt32
    uncompressed_size: UInt32
    name_length: UInt16
    extra_length: UInt16 = 0

    def to_bytes(self) -> bytes:
        return struct.pack(
            "<4sHHHHHIIIHH",
            ZipConstants.LOCAL_HEADER_SIGNATURE,
            self.version_needed,
            self.flags,
            self.method,
            self.mod_time,
            self.mod_date,
            self.crc32,
            self.compressed_size,
            self.uncompressed_size,
            self.name_length,
            self.extra_length,
        )


class CentralDirectoryRecord(BaseModel):
    """Fixed 46-byte central directory record, followed by the file name."""

    model_config = ConfigDict(frozen=True)

    version_made_by: UInt16 = ZipConstants.VERSION
    version_needed: UInt16 = ZipConstants.VERSION
    flags: UInt16 = 0
    method: UInt16 = ZipConstants.METHOD_DEFLATE
    mod_time: UInt16 = 0
    mod_date: UInt16 = 0
    crc32: UInt32
    compressed_size: UInt32
    uncompressed_size: UInt32
    name_length: UInt16
    extra_length: UInt16 = 0
    comment_length: UInt16 = 0
    disk_number_start: UInt16 = 0
    internal_attributes: UInt16 = 0
    external_attributes: UInt32 = 0
    local_header_offset: UInt32
    name: bytes = Field(..., description="Encoded file name")

    @property
    def size(self) -> int:
        return ZipConstants.CENTRAL_DIRECTORY_SIZE + len(self.name)

    def to_bytes(self) -> bytes:
        return struct.pack(
            "<4sHHHHHHIIIHHHHHII",
            ZipConstants.CENTRAL_DIRECTORY_SIGNATURE,
            self.version_made_by,
            self.version_needed,
            self.flags,
            self.method,
            self.mod_time,
            self.mod_date,
            self.crc32,
            self.compressed_size,
            self.uncompressed_size,
            self.name_length,
            self.extra_length,
            self.comment_length,
            self.disk_number_start,
            self.internal_attributes,
            self.external_attributes,
            self.local_header_offset,
        ) + self.name


class EndOfCentralDirectory(BaseModel):
    """Fixed 22-byte end of central directory record with no comment."""

    model_config = ConfigDict(frozen=True)

    disk_number: UInt16 = 0
    central_directory_disk: UInt16 = 0
    entries_on_disk: UInt16
    total_entries: UInt16
    central_directory_size: UInt32
    central_directory_offset: UInt32
    comment_length: UInt16 = 0

    def to_bytes(self) -> bytes:
        return struct.pack(
            "<4sHHHHIIH",
            ZipConstants.END_OF_CENTRAL_DIRECTORY_SIGNATURE,
            self.disk_number,
            self.central_directory_disk,
            self.entries_on_disk,
            self.total_entries,
            self.central_directory_size,
            self.central_directory_offset,
            self.comment_length,
        )


class ArchiveEntry(BaseModel):
    """A compressed file and its position in the archive."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Archive-relative path")
    raw: bytes = Field(..., description="Uncompressed contents")
    compressed: bytes = Field(..., description="Raw deflate payload")
    crc32: UInt32 = Field(..., description="CRC-32 of the uncompressed contents")
    local_header_offset: UInt32 = Field(..., description="Offset of the local header in the archive")

    @property
    def name_bytes(self) -> bytes:
        return self.name.encode("utf-8")

    @property
    def local_size(self) -> int:
        """Size of the local header, name and payload together."""
        return ZipConstants.LOCAL_HEADER_SIZE + len(self.name_bytes) + len(self.compressed)

    def local_header(self) -> LocalFileHeader:
        return _checked(
            LocalFileHeader,
            crc32=self.crc32,
            compressed_size=len(self.compressed),
            uncompressed_size=len(self.raw),
            name_length=len(self.name_bytes),
        )

    def central_record(self) -> CentralDirectoryRecord:
        return _checked(
            CentralDirectoryRecord,
            crc32=self.crc32,
            compressed_size=len(self.compressed),
            uncompressed_size=len(self.raw),
            name_length=len(self.name_bytes),
            local_header_offset=self.local_header_offset,
            name=self.name_bytes,
        )

    def to_bytes(self) -> bytes:
        return self.local_header().to_bytes() + self.name_bytes + self.compressed


class Archive(BaseModel):
    """Structured form of a complete archive."""

    model_config = ConfigDict(frozen=True)

    entries: list[ArchiveEntry] = Field(default_factory=list)
    central_directory: list[CentralDirectoryRecord] = Field(default_factory=list)
    end_of_central_directory: EndOfCentralDirectory

    def to_bytes(self) -> bytes:
        """Serialize local entries, central directory and end record in order."""
        parts = [entry.to_bytes() for entry in self.entries]
        parts.extend(record.to_bytes() for record in self.central_directory)
        parts.append(self.end_of_central_directory.to_bytes())
        return b"".join(parts)


class ArchiveBuilder:
    """Builds a byte-exact ZIP archive from source files."""

    def __init__(self, compression_level: int = -1):
        self.compression_level = compression_level

    def build_entries(self, files: Sequence[SourceFile]) -> list[ArchiveEntry]:
        """Compress and checksum each file and assign local header offsets.

        Args:
            files: Files in archive order

        Returns:
            ArchiveEntries with contiguous, increasing offsets

        Raises:
            FormatOverflow: If a size or offset does not fit 32 bits
        """
        entries = []
        offset = 0
        for source in files:
            compressed = CompressionUtils.deflate(source.data, self.compression_level)
            entry = _checked(
                ArchiveEntry,
                name=source.name,
                raw=source.data,
                compressed=compressed,
                crc32=ChecksumUtils.crc32(source.data),
                local_header_offset=offset,
            )
            # Fails early on a name too long for its field
            entry.local_header()
            logger.debug(
                "Entry %s: %d -> %d bytes at offset %d",
                entry.name, len(entry.raw), len(entry.compressed), offset,
            )
            entries.append(entry)
            offset += entry.local_size
        return entries

    def build(self, files: Sequence[SourceFile]) -> Archive:
        """Build the structured archive.

        Args:
            files: Files in archive order

        Returns:
            Archive with entries, central directory and end record
        """
        entries = self.build_entries(files)
        central_directory = [entry.central_record() for entry in entries]
        central_directory_offset = sum(entry.local_size for entry in entries)
        end_record = _checked(
            EndOfCentralDirectory,
            entries_on_disk=len(entries),
            total_entries=len(entries),
            central_directory_size=sum(record.size for record in central_directory),
            central_directory_offset=central_directory_offset,
        )
        return Archive(
            entries=entries,
            central_directory=central_directory,
            end_of_central_directory=end_record,
        )

    def build_archive(self, files: Sequence[SourceFile]) -> bytes:
        """Build the archive and return its bytes.

        Args:
            files: Files in archive order

        Returns:
            Complete ZIP archive bytes
        """
        return self.build(files).to_bytes()
