"""Build a signed container from a source directory.

Pipeline:
    generate key pair -> read manifest -> build archive -> sign archive
    -> wrap container -> write container -> write private key

Any failure aborts the run with a CrxBuildError naming the stage. The
container is written to a temporary sibling file and renamed into place, so a
failed run never leaves a truncated container at the output path.

Example:
    from crxpack import BuildConfig, CrxBuilder

    result = CrxBuilder(BuildConfig()).build("extension/", "dist/extension.crx")
    print(result.container_path, result.key_path, result.extension_id)
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .archive import ArchiveBuilder, SourceFile
from .common import PathLike
from .config import BuildConfig
from .container import CrxContainer
from .errors import IOFailure
from .signing import SigningUtils
from .utils.checksum_utils import ChecksumUtils

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outputs of a successful build."""

    container_path: Path
    """Where the container was written"""
    key_path: Path
    """Where the PEM private key was written"""
    extension_id: str
    """Extension ID derived from this build's public key"""
    entry_count: int
    """Number of files in the archive"""
    skipped: list[str] = field(default_factory=list)
    """Manifest entries that were missing and left out"""
    sha256: str = ""
    """SHA256 of the container file"""


class CrxBuilder:
    """Drives archive building, signing and output writing."""

    def __init__(self, config: Optional[BuildConfig] = None):
        self.config = config or BuildConfig()

    def key_path_for(self, output_path: PathLike) -> Path:
        """Get the private key sidecar path for a container path.

        The container's extension is replaced with the configured key suffix.

        Raises:
            ValueError: If the sidecar would overwrite the container
        """
        output_path = Path(output_path)
        key_path = output_path.with_suffix(self.config.key_suffix)
        if key_path == output_path:
            raise ValueError(f"Key path would overwrite the container: {output_path}")
        return key_path

    def build(self, source_dir: PathLike, output_path: PathLike) -> BuildResult:
        """Package source_dir into a signed container at output_path.

        Args:
            source_dir: Directory holding the manifest files
            output_path: Container file to write

        Returns:
            BuildResult with output paths and build details

        Raises:
            MissingInputFile: If strict_manifest is set and a file is missing
            IOFailure: If reading inputs or writing outputs fails
            CompressionError: If a file cannot be compressed
            FormatOverflow: If a size or offset does not fit its field
            CryptoFailure: If key generation or signing fails
        """
        source_dir = Path(source_dir)
        output_path = Path(output_path)
        key_path = self.key_path_for(output_path)

        if not source_dir.is_dir():
            raise IOFailure(f"Source directory not found: {source_dir}", stage="read")

        logger.info("Generating %d-bit RSA key pair", self.config.key_size)
        key_pair = SigningUtils.generate_key_pair(self.config.key_size)

        logger.info("Creating archive from %s", source_dir)
        files = SourceFile.read_manifest(
            source_dir, self.config.manifest, strict=self.config.strict_manifest
        )
        included = {source.name for source in files}
        skipped = [name for name in self.config.manifest if name not in included]
        archive = ArchiveBuilder(self.config.compression_level).build_archive(files)
        logger.debug("Archive is %d bytes with %d entries", len(archive), len(files))

        logger.info("Signing archive")
        signature = SigningUtils.sign(key_pair.private_key, archive)

        container = CrxContainer.wrap(key_pair.public_key_der, signature, archive)

        _atomic_write(output_path, container, mode=_default_file_mode())
        _atomic_write(key_path, SigningUtils.private_key_pem(key_pair.private_key), mode=0o600)

        sha256 = ChecksumUtils.compute_file_checksum(output_path)
        logger.info("Container created: %s (sha256 %s)", output_path, sha256)
        logger.info("Private key saved: %s", key_path)
        logger.info("Extension ID: %s", key_pair.extension_id)

        return BuildResult(
            container_path=output_path,
            key_path=key_path,
            extension_id=key_pair.extension_id,
            entry_count=len(files),
            skipped=skipped,
            sha256=sha256,
        )


def _default_file_mode() -> int:
    """Mode a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _atomic_write(path: Path, data: bytes, mode: Optional[int] = None) -> None:
    """Write data to a temporary file next to path, then rename it into place.

    The temporary file is created owner-only (0600); mode, if given, is applied
    before the rename.
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IOFailure(f"Could not write {path}: {e}", stage="write") from e
