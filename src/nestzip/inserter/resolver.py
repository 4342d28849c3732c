"""Classification of target path segments against archive entries."""

from enum import Enum
from typing import NamedTuple, Optional

from .accessor import ArchiveAccessor, Entry
from .errors import EntryNotFoundError
from .paths import SEPARATOR


class EntryKind(Enum):
    """What an accumulated target path names inside an archive."""
    FILE = "file"
    DIRECTORY = "directory"


class Resolution(NamedTuple):
    kind: EntryKind
    entry: Entry


def lookup(archive: ArchiveAccessor, name: str) -> Optional[Entry]:
    """Entry called exactly ``name``, or None."""
    return archive.get_entry(name)


def resolve(archive: ArchiveAccessor, accumulated: str) -> Resolution:
    """Classify ``accumulated`` as a file entry or a directory entry.

    The bare name is tried first; only if no such entry exists is the name
    tried again with a trailing separator. A file match is reported as is,
    without looking at its content: callers treat it as a nested archive.

    Raises:
        EntryNotFoundError: If neither form exists in ``archive``
    """
    entry = lookup(archive, accumulated)
    if entry is not None:
        return Resolution(EntryKind.FILE, entry)

    entry = lookup(archive, accumulated + SEPARATOR)
    if entry is not None:
        return Resolution(EntryKind.DIRECTORY, entry)

    raise EntryNotFoundError(
        f"Entry {archive.path}{SEPARATOR}{accumulated} not found. Check target path.",
        archive=str(archive.path), entry=accumulated
    )
