"""Build configuration models and loading.

Configuration can be given as JSON or YAML; the format is picked from the
file extension.

Example config.yaml:
    manifest:
      - manifest.json
      - background.js
      - popup.html
    strict_manifest: true
    key_size: 4096
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .archive import validate_archive_name
from .common import PathLike
from .constants import CrxConstants

logger = logging.getLogger(__name__)


class BuildConfig(BaseModel):
    """Settings for one container build."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    manifest: list[str] = Field(
        default_factory=lambda: list(CrxConstants.DEFAULT_MANIFEST),
        description="Archive-relative file names to package, in archive order",
    )
    strict_manifest: bool = Field(
        default=False,
        description="Fail on a missing manifest file instead of skipping it",
    )
    key_size: int = Field(
        default=CrxConstants.DEFAULT_KEY_SIZE,
        ge=2048,
        description="RSA modulus size in bits",
    )
    key_suffix: str = Field(
        default=CrxConstants.DEFAULT_KEY_SUFFIX,
        pattern=r"^\.[A-Za-z0-9_-]+$",
        description="Extension of the private key sidecar file",
    )
    compression_level: int = Field(
        default=-1,
        ge=-1,
        le=9,
        description="zlib compression level (-1 for default)",
    )

    @field_validator("manifest")
    @classmethod
    def _validate_manifest(cls, manifest: list[str]) -> list[str]:
        seen = set()
        for name in manifest:
            validate_archive_name(name)
            if name in seen:
                raise ValueError(f"Duplicate manifest entry: {name!r}")
            seen.add(name)
        return manifest


def detect_format(file_path: PathLike) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined
    """
    suffix = Path(file_path).suffix.lower()
    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: PathLike) -> BuildConfig:
    """Load and validate a build configuration file.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        Validated BuildConfig

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file exists but cannot be read
        ValueError: If the format is unsupported or the content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    text = path.read_text(encoding="utf-8")
    try:
        raw: Any = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Invalid {fmt} in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping: {path}")

    logger.debug("Loaded %s config from %s", fmt, path)
    return BuildConfig.model_validate(raw)
