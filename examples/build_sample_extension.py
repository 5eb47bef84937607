"""
Generate a sample extension directory and package it into a signed CRX.
The output can be used to check that archive readers accept the container
once the header is stripped.
"""

import io
import sys
import tempfile
import zipfile
from pathlib import Path

from crxpack import CrxBuilder, CrxContainer
from crxpack.utils import configure_logging


def write_sample_extension(path: Path):
    """Write a minimal manifest v3 extension."""
    path.mkdir(parents=True, exist_ok=True)
    (path / "manifest.json").write_text(
        '{"manifest_version": 3, "name": "Sample", "version": "1.0",'
        ' "action": {"default_popup": "popup.html"}}\n'
    )
    (path / "popup.html").write_text('<!doctype html><script src="popup.js"></script>\n')
    (path / "popup.js").write_text("console.log('popup opened');\n")
    # background.js, content-script.js and README.md are left out on purpose
    # to show missing manifest entries being skipped


def main():
    configure_logging("INFO")
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(tempfile.mkdtemp())

    source = output_dir / "sample-extension"
    write_sample_extension(source)
    result = CrxBuilder().build(source, output_dir / "sample.crx")

    container = CrxContainer.from_bytes(result.container_path.read_bytes())
    with zipfile.ZipFile(io.BytesIO(container.archive)) as zf:
        print(f"Archive entries: {zf.namelist()}")
    print(f"Signature valid: {container.verify()}")
    print(f"Extension ID: {result.extension_id}")
    print(f"Skipped: {result.skipped}")


if __name__ == "__main__":
    main()
