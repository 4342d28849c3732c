"""Capability interface over one physical zip archive."""

import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .paths import SEPARATOR


@dataclass(frozen=True)
class Entry:
    """A member of an archive, addressed by its full internal name.

    ``date_time``, ``external_attr`` and ``extra`` are the metadata carried
    over when the entry is replaced by new content.
    """
    name: str
    compress_type: int
    file_size: int = 0
    date_time: Tuple[int, int, int, int, int, int] = (1980, 1, 1, 0, 0, 0)
    external_attr: int = 0
    extra: bytes = b""

    @property
    def is_dir(self) -> bool:
        return self.name.endswith(SEPARATOR)

    @classmethod
    def from_zipinfo(cls, info: zipfile.ZipInfo) -> "Entry":
        return cls(
            name=info.filename,
            compress_type=info.compress_type,
            file_size=info.file_size,
            date_time=tuple(info.date_time),
            external_attr=info.external_attr,
            extra=info.extra,
        )


def method_name(compress_type: int) -> str:
    """Human-readable name of a zip compression method."""
    return {
        zipfile.ZIP_STORED: "stored",
        zipfile.ZIP_DEFLATED: "deflated",
        zipfile.ZIP_BZIP2: "bzip2",
        zipfile.ZIP_LZMA: "lzma",
    }.get(compress_type, f"method {compress_type}")


class ArchiveAccessor(ABC):
    """Open, mutable handle on one archive file.

    Mutations are pending until :meth:`commit`; closing the handle without
    committing leaves the file on disk untouched. Handles are context
    managers and are never shared between recursion levels.
    """

    default_compression: int = zipfile.ZIP_DEFLATED

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @classmethod
    @abstractmethod
    def open(cls, path: Path) -> "ArchiveAccessor":
        """Open ``path`` for update.

        Raises:
            ArchiveNotFoundError: If the file does not exist
            CorruptedArchiveError: If the file is not a readable archive
        """

    @staticmethod
    def is_archive(path: Path) -> bool:
        """Probe whether ``path`` can be opened as a zip archive."""
        try:
            with zipfile.ZipFile(path, 'r'):
                return True
        except (zipfile.BadZipFile, OSError):
            return False

    @abstractmethod
    def entries(self) -> List[Entry]:
        """All entries, in archive order, including pending changes."""

    @abstractmethod
    def get_entry(self, name: str) -> Optional[Entry]:
        """Entry with exactly ``name``, or None."""

    @abstractmethod
    def extract_to_file(self, entry: Entry, destination: Path) -> None:
        """Write the uncompressed content of ``entry`` to ``destination``."""

    @abstractmethod
    def delete_entry(self, name: str) -> None:
        """Remove the entry called ``name``.

        Raises:
            EntryNotFoundError: If there is no such entry
        """

    @abstractmethod
    def add_entry_from_file(
        self,
        source: Path,
        name: str,
        compress_type: int,
        template: Optional[Entry] = None,
    ) -> Entry:
        """Add ``source`` as a new entry ``name`` compressed with ``compress_type``.

        Timestamp and attributes are taken from ``source`` unless a
        ``template`` entry is given, whose metadata is then kept.
        """

    @abstractmethod
    def commit(self) -> None:
        """Persist pending changes to the archive file."""

    @abstractmethod
    def close(self) -> None:
        """Release the handle, discarding uncommitted changes."""

    def __enter__(self) -> "ArchiveAccessor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __str__(self) -> str:
        return str(self.path)
