"""CLI command for copying files into (nested) zip archives."""

import argparse
import glob
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Type

from pydantic import ValidationError
from toml import TomlDecodeError

from .config import NestZipConfig
from .errors import (
    ArchiveNotFoundError,
    NotFoundError,
    SourceNotFoundError,
    UsageError,
)
from .mutator import NestedMutator
from nestzip.common import NestZipError, setup_logging, ConfigLoader

# Application name derived from the top-level package name
_package = __package__ or "nestzip.inserter"
APP_NAME = _package.split('.')[0]

DESCRIPTION = "Copies file to the target zip archive, with nested archives support."

EPILOG = """\
Example:
  nestzip my_photo.png my_photos.zip christmas/this_year.zip/new

will copy 'my_photo.png' to the folder 'new' of the nested file
'this_year.zip' updating 'my_photos.zip' accordingly.
"""

_WILDCARD_CHARS = "*?["


class HelpOnErrorParser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad input."""

    def error(self, message: str) -> None:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = HelpOnErrorParser(
        prog=APP_NAME,
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "source_file",
        help="Source file(s) to copy. Can be a wildcard."
    )
    parser.add_argument(
        "target_file",
        help="Target file(s) to copy to. Can be a wildcard."
    )
    parser.add_argument(
        "target_path",
        help="Path within the target file. Use '/' as a separator or as the root path."
    )
    parser.add_argument(
        "-n", "--no-overwrite",
        action="store_true",
        help="Do not overwrite existing files."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Set output to verbose messages."
    )
    parser.add_argument(
        "--backend",
        choices=["file", "memory"],
        help="Archive back-end (overrides config)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    return parser


def has_wildcard(pattern: str) -> bool:
    return any(char in pattern for char in _WILDCARD_CHARS)


def expand_pattern(pattern: str, not_found: Type[NotFoundError], label: str) -> List[Path]:
    """Expand a file name that may contain wildcards.

    Args:
        pattern: Literal file name or glob pattern
        not_found: Error type raised when nothing can be found
        label: Role of the file in messages ("Source", "Target")

    Returns:
        Matching files, sorted by name

    Raises:
        NotFoundError: If the file, the pattern's directory or any match is missing
    """
    if not has_wildcard(pattern):
        path = Path(pattern)
        if not path.is_file():
            raise not_found(f"{label} file not found: {path.absolute()}.", path=pattern)
        return [path]

    directory = Path(pattern).parent
    if not has_wildcard(str(directory)) and not directory.is_dir():
        raise not_found(
            f"{label} directory not found: {directory.absolute()}.", path=pattern
        )

    matches = sorted(Path(match) for match in glob.glob(pattern) if Path(match).is_file())
    if not matches:
        raise not_found(f"No {label.lower()} file matches {pattern}.", path=pattern)
    return matches


def exit_code_for(error: BaseException) -> int:
    """Process exit code for an error that aborted a unit of work."""
    if isinstance(error, NestZipError):
        return error.exit_code
    if isinstance(error, OSError) and error.errno:
        return error.errno
    return 1


def copy_command(
    config: NestZipConfig,
    source_pattern: str,
    target_pattern: str,
    target_path: str,
) -> int:
    """Copy every matching source into every matching target archive.

    Each (source, target) pair is processed on its own; a failure is
    logged and the remaining pairs still run.

    Returns:
        Exit code (0 for success, otherwise the code of the last failure)
    """
    logger_name = __package__ or __name__
    logger = logging.getLogger(logger_name)

    try:
        sources = expand_pattern(source_pattern, SourceNotFoundError, "Source")
        targets = expand_pattern(target_pattern, ArchiveNotFoundError, "Target")
    except NotFoundError as e:
        logger.error(e.message)
        return e.exit_code

    mutator = NestedMutator(config.insertion)
    exit_code = 0
    failed = 0

    for target in targets:
        for source in sources:
            try:
                mutator.insert(source, target, target_path)
                if config.insertion.verbose:
                    logger.info(f"Copied {source} to {target} at '{target_path}'")
            except Exception as e:
                logger.error(f"{source} -> {target}: {e}")
                exit_code = exit_code_for(e)
                failed += 1

    total = len(sources) * len(targets)
    if total > 1:
        logger.info(f"Copy complete: {total - failed} successful, {failed} failed")

    return exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the copy command."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        parser.print_help()
        return e.exit_code

    # Load config
    loader = ConfigLoader(
        app_name=APP_NAME,
        config_class=NestZipConfig
    )
    try:
        config = loader.load(defaults_path=args.config)
    except (OSError, TomlDecodeError, ValidationError) as e:
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return 1

    # Command line flags take precedence over config files
    updates = {}
    if args.no_overwrite:
        updates["no_overwrite"] = True
    if args.verbose:
        updates["verbose"] = True
    if args.backend:
        updates["backend"] = args.backend
    config = config.model_copy(
        update={"insertion": config.insertion.model_copy(update=updates)}
    )

    level = config.logging.level
    if config.insertion.verbose and level in ("WARNING", "ERROR"):
        level = "INFO"
    setup_logging(
        level=level,
        format=config.logging.format,
        log_file=Path(config.logging.file) if config.logging.file else None,
    )

    return copy_command(
        config=config,
        source_pattern=args.source_file,
        target_pattern=args.target_file,
        target_path=args.target_path,
    )


if __name__ == "__main__":
    sys.exit(main())
