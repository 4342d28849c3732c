"""Recursive insertion of a file into nested zip archives.

A target path such as ``christmas/this_year.zip/new`` is walked one segment
at a time. Directory entries are descended through; a file entry is taken
to be a nested archive, which is staged to a temporary file, mutated by a
recursive call and written back into its parent. When the path is used up
the source file is inserted under the accumulated directory prefix.

An archive is only committed after everything below it has succeeded.
Changes already committed by inner levels are not rolled back if an outer
level fails afterwards.
"""

import logging
import zipfile
from pathlib import Path
from typing import Optional, Type

from .accessor import ArchiveAccessor, Entry, method_name
from .backends import get_accessor
from .config import InsertionConfig
from .errors import EntryExistsError, SourceNotFoundError
from .paths import SEPARATOR, LogicalPath
from .resolver import EntryKind, resolve
from .staging import staged_copy

logger = logging.getLogger(__name__)

INDENT = "  "


class NestedMutator:
    """Inserts a source file into an archive at a possibly nested path."""

    def __init__(
        self,
        config: Optional[InsertionConfig] = None,
        accessor_class: Optional[Type[ArchiveAccessor]] = None,
    ) -> None:
        """Initialize the mutator.

        Args:
            config: Insertion options (overwrite policy, verbosity, back-end)
            accessor_class: Archive back-end; defaults to the one named in config
        """
        self.config = config or InsertionConfig()
        self.accessor_class = accessor_class or get_accessor(self.config.backend)
        self.staging_dir = Path(self.config.staging_dir) if self.config.staging_dir else None

    def insert(self, source_file: Path, target_archive: Path, target_path: str = "") -> None:
        """Insert ``source_file`` into ``target_archive`` at ``target_path``.

        Args:
            source_file: File to copy into the archive
            target_archive: Outermost archive, modified in place
            target_path: Slash-delimited path inside the archive; may cross
                nested archives, empty means the archive root

        Raises:
            SourceNotFoundError: If the source file does not exist
            ArchiveNotFoundError: If the target archive does not exist
            EntryNotFoundError: If a path segment matches no entry
            EntryExistsError: If the entry exists and overwriting is disabled
            CorruptedArchiveError: If an archive on the path cannot be read
        """
        source_file = Path(source_file)
        if not source_file.is_file():
            raise SourceNotFoundError(
                f"Source file not found: {source_file}", source=str(source_file)
            )
        self._process(source_file, Path(target_archive), LogicalPath(target_path), depth=0)

    def _trace(self, depth: int, message: str) -> None:
        if self.config.verbose:
            logger.info(f"{INDENT * depth}{message}")
        else:
            logger.debug(f"{INDENT * depth}{message}")

    def _process(
        self,
        source_file: Path,
        archive_path: Path,
        target_path: LogicalPath,
        depth: int,
    ) -> None:
        self._trace(depth, f"Opening {archive_path} (target path '{target_path}')")

        with self.accessor_class.open(archive_path) as archive:
            zip_path = ""

            for consumed, segment in enumerate(target_path.segments, start=1):
                zip_path += segment
                kind, entry = resolve(archive, zip_path)

                if kind is EntryKind.DIRECTORY:
                    self._trace(depth, f"Found directory {entry.name}")
                    zip_path = entry.name
                    continue

                self._replace_nested(
                    source_file, archive, entry, target_path.remainder(consumed), depth
                )
                return

            self._insert_entry(source_file, archive, zip_path, depth)

    def _replace_nested(
        self,
        source_file: Path,
        archive: ArchiveAccessor,
        entry: Entry,
        remainder: LogicalPath,
        depth: int,
    ) -> None:
        self._trace(depth, f"Processing nested zip {entry.name}...")

        with staged_copy(directory=self.staging_dir, suffix=Path(entry.name).suffix) as staged:
            self._trace(depth, f"Extracting nested zip {archive.path}{SEPARATOR}{entry.name} to {staged}...")
            archive.extract_to_file(entry, staged)

            self._process(source_file, staged, remainder, depth + 1)

            compress_type = entry.compress_type
            self._trace(depth, f"Deleting existing nested entry {archive.path}{SEPARATOR}{entry.name}...")
            archive.delete_entry(entry.name)

            self._trace(
                depth,
                f"Creating nested entry {archive.path}{SEPARATOR}{entry.name} from {staged} "
                f"({method_name(compress_type)})..."
            )
            archive.add_entry_from_file(staged, entry.name, compress_type, template=entry)
            archive.commit()
            self._trace(depth, f"Deleting {staged}...")

    def _insert_entry(
        self,
        source_file: Path,
        archive: ArchiveAccessor,
        prefix: str,
        depth: int,
    ) -> None:
        entry_name = prefix + source_file.name
        existing = archive.get_entry(entry_name)
        compress_type = None

        if existing is not None:
            if self.config.no_overwrite:
                raise EntryExistsError(
                    f"Entry {entry_name} already exists.",
                    archive=str(archive.path), entry=entry_name
                )
            compress_type = existing.compress_type
            self._trace(depth, f"Deleting existing entry {archive.path}{SEPARATOR}{entry_name}...")
            archive.delete_entry(entry_name)

        if compress_type is None:
            if self.accessor_class.is_archive(source_file):
                self._trace(depth, "Zip file detected, adding without compression.")
                compress_type = zipfile.ZIP_STORED
            else:
                compress_type = archive.default_compression

        self._trace(
            depth,
            f"Creating entry {archive.path}{SEPARATOR}{entry_name} ({method_name(compress_type)})..."
        )
        archive.add_entry_from_file(source_file, entry_name, compress_type)
        archive.commit()
