"""Pytest configuration and shared fixtures for crxpack tests."""

import shutil
import tempfile
from pathlib import Path

import pytest

from crxpack.archive import SourceFile
from crxpack.signing import SigningUtils


@pytest.fixture
def temp_dir():
    """Create and clean up a temporary directory."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d)


@pytest.fixture
def extension_files():
    """Contents of a small extension, in manifest order."""
    return {
        "manifest.json": b'{"manifest_version": 3, "name": "Auto Dictate", "version": "1.0"}\n',
        "background.js": b"chrome.runtime.onInstalled.addListener(() => {});\n",
        "content-script.js": b"// content script\n" + b"console.log('tick');\n" * 200,
        "popup.html": b"<!doctype html><html><body><script src=\"popup.js\"></script></body></html>\n",
        "popup.js": b"document.addEventListener('DOMContentLoaded', () => {});\n",
        "README.md": b"# Auto Dictate\n",
    }


@pytest.fixture
def extension_dir(temp_dir, extension_files):
    """A source directory holding the full default manifest."""
    src = temp_dir / "extension"
    src.mkdir()
    for name, data in extension_files.items():
        (src / name).write_bytes(data)
    return src


@pytest.fixture
def source_files(extension_files):
    """In-memory SourceFiles for the extension, no filesystem needed."""
    return [SourceFile(name=name, data=data) for name, data in extension_files.items()]


@pytest.fixture(scope="session")
def key_pair():
    """One RSA key pair shared by tests that do not need a fresh key."""
    return SigningUtils.generate_key_pair()
