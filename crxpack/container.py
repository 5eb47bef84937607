"""Signed container wrapping a ZIP archive.

Container layout (all integers little-endian):
    magic           4 bytes   b"Cr24"
    version         u32       3
    header length   u32       16 + len(public key) + len(signature) - 12
    public key      DER SubjectPublicKeyInfo
    signature       RSA PKCS#1 v1.5 SHA-256 over the archive bytes
    archive         ZIP bytes, unmodified
"""

import struct

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .common import UInt32
from .constants import CrxConstants
from .errors import ContainerFormatError, FormatOverflow
from .signing import SigningUtils


class CrxHeader(BaseModel):
    """Header fields that precede the archive."""

    model_config = ConfigDict(frozen=True)

    magic: bytes = Field(CrxConstants.MAGIC, min_length=4, max_length=4, description="Format tag")
    version: UInt32 = Field(CrxConstants.VERSION, description="Container format version")
    header_length: UInt32 = Field(..., description="Declared header length")
    public_key: bytes = Field(..., description="DER SubjectPublicKeyInfo")
    signature: bytes = Field(..., description="Signature over the archive")

    @classmethod
    def create(cls, public_key_der: bytes, signature: bytes) -> "CrxHeader":
        """Create a header, computing the declared length.

        Raises:
            FormatOverflow: If the header length does not fit 32 bits
        """
        header_length = CrxConstants.header_length(len(public_key_der), len(signature))
        try:
            return cls(header_length=header_length, public_key=public_key_der, signature=signature)
        except ValidationError as e:
            raise FormatOverflow(f"Header length {header_length} does not fit 32 bits", stage="container") from e

    def to_bytes(self) -> bytes:
        return (
            struct.pack("<4sII", self.magic, self.version, self.header_length)
            + self.public_key
            + self.signature
        )


class CrxContainer(BaseModel):
    """A container header together with the archive it signs."""

    model_config = ConfigDict(frozen=True)

    header: CrxHeader
    archive: bytes = Field(..., description="ZIP archive bytes")

    @staticmethod
    def wrap(public_key_der: bytes, signature: bytes, archive: bytes) -> bytes:
        """Assemble container bytes.

        Args:
            public_key_der: DER SubjectPublicKeyInfo
            signature: Signature over archive
            archive: ZIP archive bytes, appended unmodified

        Returns:
            Complete container bytes
        """
        return CrxHeader.create(public_key_der, signature).to_bytes() + archive

    def to_bytes(self) -> bytes:
        return self.header.to_bytes() + self.archive

    def verify(self) -> bool:
        """Check the embedded signature against the embedded archive."""
        return SigningUtils.verify(self.header.public_key, self.header.signature, self.archive)

    @classmethod
    def from_bytes(cls, data: bytes) -> "CrxContainer":
        """Parse container bytes produced by wrap().

        The public key length is read from its DER SEQUENCE header; the
        signature length follows from the declared header length.

        Args:
            data: Container bytes

        Returns:
            Parsed container

        Raises:
            ContainerFormatError: On bad magic, unknown version or truncation
        """
        prefix = CrxConstants.PREFIX_SIZE
        if len(data) < prefix:
            raise ContainerFormatError("Container is shorter than its fixed prefix")

        magic, version, header_length = struct.unpack_from("<4sII", data, 0)
        if magic != CrxConstants.MAGIC:
            raise ContainerFormatError(f"Bad magic: {magic!r}")
        if version != CrxConstants.VERSION:
            raise ContainerFormatError(f"Unsupported container version: {version}")

        key_length = _der_sequence_length(data, prefix)
        signature_length = header_length + prefix - CrxConstants.HEADER_BASE - key_length
        if signature_length < 0:
            raise ContainerFormatError(
                f"Header length {header_length} is too small for a {key_length}-byte key"
            )

        key_end = prefix + key_length
        signature_end = key_end + signature_length
        if len(data) < signature_end:
            raise ContainerFormatError("Container is truncated inside its header")

        header = CrxHeader(
            magic=magic,
            version=version,
            header_length=header_length,
            public_key=data[prefix:key_end],
            signature=data[key_end:signature_end],
        )
        return cls(header=header, archive=data[signature_end:])


def _der_sequence_length(data: bytes, offset: int) -> int:
    """Total length (tag + length octets + content) of the DER SEQUENCE at offset."""
    if len(data) < offset + 2 or data[offset] != 0x30:
        raise ContainerFormatError("Public key is not a DER SEQUENCE")

    first = data[offset + 1]
    if first < 0x80:
        return 2 + first

    num_octets = first & 0x7F
    if num_octets == 0 or num_octets > 4 or len(data) < offset + 2 + num_octets:
        raise ContainerFormatError("Invalid DER length in public key")
    content_length = int.from_bytes(data[offset + 2 : offset + 2 + num_octets], "big")
    return 2 + num_octets + content_length
