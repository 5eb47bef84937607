"""Constants for the ZIP archive and CRX container formats."""


class ZipConstants:
    """Signatures, fixed sizes and field values for the ZIP layout we emit."""

    LOCAL_HEADER_SIGNATURE = b"PK\x03\x04"
    """Local file header signature (0x04034b50)"""

    CENTRAL_DIRECTORY_SIGNATURE = b"PK\x01\x02"
    """Central directory file header signature (0x02014b50)"""

    END_OF_CENTRAL_DIRECTORY_SIGNATURE = b"PK\x05\x06"
    """End of central directory record signature (0x06054b50)"""

    LOCAL_HEADER_SIZE = 30
    CENTRAL_DIRECTORY_SIZE = 46
    END_OF_CENTRAL_DIRECTORY_SIZE = 22

    VERSION = 20
    """Version made by / needed to extract (2.0, deflate)"""

    METHOD_DEFLATE = 8

    UINT16_MAX = 0xFFFF
    UINT32_MAX = 0xFFFFFFFF


class CrxConstants:
    """Layout of the signed container header."""

    MAGIC = b"Cr24"
    VERSION = 3

    PREFIX_SIZE = 12
    """magic + version + header length"""

    HEADER_BASE = 16
    """Base added to key and signature lengths when computing header length"""

    DEFAULT_KEY_SIZE = 2048
    PUBLIC_EXPONENT = 65537

    EXTENSION_ID_BYTES = 16
    EXTENSION_ID_ALPHABET = "abcdefghijklmnop"

    DEFAULT_MANIFEST = (
        "manifest.json",
        "background.js",
        "content-script.js",
        "popup.html",
        "popup.js",
        "README.md",
    )
    """Files packaged when no manifest is configured, in archive order."""

    DEFAULT_KEY_SUFFIX = ".key"
    DEFAULT_OUTPUT_NAME = "extension.crx"

    @staticmethod
    def header_length(public_key_length: int, signature_length: int) -> int:
        """Compute the declared header length field.

        The field excludes the 12-byte fixed prefix from a 16-byte base, so
        the stored value is ``16 + key + signature - 12``.

        Args:
            public_key_length: Length of the DER encoded public key
            signature_length: Length of the signature

        Returns:
            Value to store in the header length field
        """
        return (
            CrxConstants.HEADER_BASE
            + public_key_length
            + signature_length
            - CrxConstants.PREFIX_SIZE
        )
