"""Command-line interface for crxpack.

Usage:
    crxpack build SOURCE_DIR [-o OUTPUT] [--config FILE] [--strict]
    crxpack verify CONTAINER
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .builder import CrxBuilder
from .config import BuildConfig, load_config
from .constants import CrxConstants
from .container import CrxContainer
from .errors import CrxBuildError
from .utils.logging_utils import configure_logging


def build_command(args: argparse.Namespace) -> int:
    """Run a build from parsed arguments.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = load_config(args.config) if args.config else BuildConfig()
        overrides = {}
        if args.strict:
            overrides["strict_manifest"] = True
        if args.key_suffix:
            overrides["key_suffix"] = args.key_suffix
        if overrides:
            config = BuildConfig.model_validate({**config.model_dump(), **overrides})
    except (OSError, ValueError) as e:
        print(f"ERROR: invalid configuration: {e}", file=sys.stderr)
        return 1

    source_dir = Path(args.source_dir)
    output = Path(args.output) if args.output else source_dir / CrxConstants.DEFAULT_OUTPUT_NAME

    try:
        result = CrxBuilder(config).build(source_dir, output)
    except CrxBuildError as e:
        print(f"ERROR: build failed at stage '{e.stage}': {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"CRX file created: {result.container_path}")
    print(f"Private key saved: {result.key_path}")
    print(f"Extension ID: {result.extension_id}")
    if result.skipped:
        print(f"Skipped missing files: {', '.join(result.skipped)}")
    return 0


def verify_command(args: argparse.Namespace) -> int:
    """Check that a container's signature matches its archive.

    Returns:
        Exit code (0 if valid, 1 otherwise)
    """
    path = Path(args.container)
    try:
        container = CrxContainer.from_bytes(path.read_bytes())
    except OSError as e:
        print(f"ERROR: could not read {path}: {e}", file=sys.stderr)
        return 1
    except CrxBuildError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if not container.verify():
        print(f"INVALID: signature does not match archive in {path}", file=sys.stderr)
        return 1

    print(f"OK: {path} ({len(container.archive)} archive bytes)")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crxpack",
        description="Package a browser extension directory into a signed CRX container",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build a signed container")
    build.add_argument("source_dir", help="Directory containing the extension files")
    build.add_argument("-o", "--output", help="Container path (default: SOURCE_DIR/extension.crx)")
    build.add_argument("--config", help="JSON or YAML build configuration")
    build.add_argument("--strict", action="store_true", help="Fail if a manifest file is missing")
    build.add_argument("--key-suffix", help="Extension for the private key file (default: .key)")
    build.set_defaults(func=build_command)

    verify = subparsers.add_parser("verify", help="Verify a container's signature")
    verify.add_argument("container", help="Container file to check")
    verify.set_defaults(func=verify_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
