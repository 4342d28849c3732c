"""Zip archive back-ends implementing :class:`ArchiveAccessor`."""

import io
import logging
import os
import shutil
import struct
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Type

from .accessor import ArchiveAccessor, Entry
from .errors import (
    ArchiveNotFoundError,
    CorruptedArchiveError,
    EntryExistsError,
    EntryNotFoundError,
)

logger = logging.getLogger(__name__)


def _open_zip(path: Path) -> zipfile.ZipFile:
    """Open ``path`` for reading, translating codec failures."""
    if not path.exists():
        raise ArchiveNotFoundError(f"Archive not found: {path}", archive=str(path))
    try:
        return zipfile.ZipFile(path, 'r')
    except zipfile.BadZipFile as e:
        raise CorruptedArchiveError(
            f"Not a valid zip archive: {path} ({e})", archive=str(path)
        ) from e


_ZIP64_EXTRA_ID = 0x0001


def _strip_zip64(extra: bytes) -> bytes:
    """Extra field without ZIP64 records, which zipfile writes itself."""
    kept = []
    offset = 0
    while offset + 4 <= len(extra):
        header_id, size = struct.unpack('<HH', extra[offset:offset + 4])
        end = offset + 4 + size
        if header_id != _ZIP64_EXTRA_ID:
            kept.append(extra[offset:end])
        offset = end
    return b"".join(kept)


def _clone_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    """Fresh ZipInfo carrying the metadata of ``info`` for rewriting.

    Writing mutates offsets and sizes on the ZipInfo it is given, so the
    reader's copy must not be reused.
    """
    clone = zipfile.ZipInfo(info.filename, date_time=info.date_time)
    clone.compress_type = info.compress_type
    clone.comment = info.comment
    clone.extra = _strip_zip64(info.extra)
    clone.create_system = info.create_system
    clone.external_attr = info.external_attr
    clone.internal_attr = info.internal_attr
    clone.file_size = info.file_size
    return clone


def _source_info(
    source: Path,
    name: str,
    compress_type: int,
    template: Optional[Entry] = None,
) -> zipfile.ZipInfo:
    """ZipInfo for adding ``source`` as ``name``, keeping ``template``'s metadata."""
    info = zipfile.ZipInfo.from_file(source, arcname=name, strict_timestamps=False)
    info.compress_type = compress_type
    if template is not None:
        info.date_time = template.date_time
        info.external_attr = template.external_attr
        info.extra = _strip_zip64(template.extra)
    return info


class ZipFileAccessor(ArchiveAccessor):
    """Back-end that rewrites the archive on disk.

    Deletions and additions are recorded until :meth:`commit`, which streams
    every surviving entry (keeping its compression method) plus the new
    ones into a sibling temporary file and then atomically replaces the
    original.
    """

    def __init__(self, path: Path, zip_ref: zipfile.ZipFile) -> None:
        super().__init__(path)
        self._zip_ref = zip_ref
        self._deleted: Set[str] = set()
        self._added: Dict[str, Tuple[Path, zipfile.ZipInfo]] = {}

    @classmethod
    def open(cls, path: Path) -> "ZipFileAccessor":
        path = Path(path)
        return cls(path, _open_zip(path))

    def _original(self, name: str) -> Optional[zipfile.ZipInfo]:
        if name in self._deleted:
            return None
        try:
            return self._zip_ref.getinfo(name)
        except KeyError:
            return None

    def _pending_entry(self, name: str) -> Entry:
        return Entry.from_zipinfo(self._added[name][1])

    def entries(self) -> List[Entry]:
        result = [
            Entry.from_zipinfo(info)
            for info in self._zip_ref.infolist()
            if info.filename not in self._deleted
        ]
        result.extend(self._pending_entry(name) for name in self._added)
        return result

    def get_entry(self, name: str) -> Optional[Entry]:
        if name in self._added:
            return self._pending_entry(name)
        info = self._original(name)
        return Entry.from_zipinfo(info) if info else None

    def extract_to_file(self, entry: Entry, destination: Path) -> None:
        if entry.name in self._added:
            shutil.copyfile(self._added[entry.name][0], destination)
            return
        if self._original(entry.name) is None:
            raise EntryNotFoundError(
                f"Entry {entry.name} not found in {self.path}",
                archive=str(self.path), entry=entry.name
            )
        with self._zip_ref.open(entry.name) as source:
            with open(destination, 'wb') as target:
                shutil.copyfileobj(source, target)

    def delete_entry(self, name: str) -> None:
        if name in self._added:
            del self._added[name]
        elif self._original(name) is not None:
            self._deleted.add(name)
        else:
            raise EntryNotFoundError(
                f"Entry {name} not found in {self.path}",
                archive=str(self.path), entry=name
            )

    def add_entry_from_file(
        self,
        source: Path,
        name: str,
        compress_type: int,
        template: Optional[Entry] = None,
    ) -> Entry:
        if self.get_entry(name) is not None:
            raise EntryExistsError(
                f"Entry {name} already exists in {self.path}",
                archive=str(self.path), entry=name
            )
        source = Path(source)
        self._added[name] = (source, _source_info(source, name, compress_type, template))
        return self._pending_entry(name)

    def commit(self) -> None:
        if not self._deleted and not self._added:
            return

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            self._write_archive(tmp_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        # The reader must be closed before the file can be replaced on Windows
        self._zip_ref.close()
        try:
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        finally:
            self._zip_ref = zipfile.ZipFile(self.path, 'r')

        logger.debug(
            f"Rewrote {self.path}: {len(self._deleted)} deleted, {len(self._added)} added"
        )
        self._deleted.clear()
        self._added.clear()

    def _write_archive(self, destination: Path) -> None:
        with zipfile.ZipFile(destination, 'w') as zout:
            zout.comment = self._zip_ref.comment
            for info in self._zip_ref.infolist():
                if info.filename in self._deleted:
                    continue
                with self._zip_ref.open(info) as source:
                    with zout.open(_clone_info(info), 'w') as target:
                        shutil.copyfileobj(source, target)

            for source, info in self._added.values():
                clone = _clone_info(info)
                clone.file_size = source.stat().st_size
                with open(source, 'rb') as data:
                    with zout.open(clone, 'w') as target:
                        shutil.copyfileobj(data, target)

    def close(self) -> None:
        self._zip_ref.close()
        self._deleted.clear()
        self._added.clear()


class InMemoryZipAccessor(ArchiveAccessor):
    """Back-end that holds every member in memory.

    On :meth:`commit` the whole archive is serialised into a buffer and
    written back over the original file.
    """

    def __init__(
        self,
        path: Path,
        members: Dict[str, Tuple[zipfile.ZipInfo, bytes]],
        comment: bytes = b"",
    ) -> None:
        super().__init__(path)
        self._members = members
        self._comment = comment
        self._dirty = False

    @classmethod
    def open(cls, path: Path) -> "InMemoryZipAccessor":
        path = Path(path)
        with _open_zip(path) as zip_ref:
            members = {info.filename: (info, zip_ref.read(info)) for info in zip_ref.infolist()}
            return cls(path, members, zip_ref.comment)

    def entries(self) -> List[Entry]:
        return [Entry.from_zipinfo(info) for info, _ in self._members.values()]

    def get_entry(self, name: str) -> Optional[Entry]:
        member = self._members.get(name)
        return Entry.from_zipinfo(member[0]) if member else None

    def extract_to_file(self, entry: Entry, destination: Path) -> None:
        member = self._members.get(entry.name)
        if member is None:
            raise EntryNotFoundError(
                f"Entry {entry.name} not found in {self.path}",
                archive=str(self.path), entry=entry.name
            )
        Path(destination).write_bytes(member[1])

    def delete_entry(self, name: str) -> None:
        if self._members.pop(name, None) is None:
            raise EntryNotFoundError(
                f"Entry {name} not found in {self.path}",
                archive=str(self.path), entry=name
            )
        self._dirty = True

    def add_entry_from_file(
        self,
        source: Path,
        name: str,
        compress_type: int,
        template: Optional[Entry] = None,
    ) -> Entry:
        if name in self._members:
            raise EntryExistsError(
                f"Entry {name} already exists in {self.path}",
                archive=str(self.path), entry=name
            )
        data = Path(source).read_bytes()
        info = _source_info(Path(source), name, compress_type, template)
        info.file_size = len(data)
        info.CRC = zlib.crc32(data) & 0xFFFFFFFF
        self._members[name] = (info, data)
        self._dirty = True
        return Entry.from_zipinfo(info)

    def commit(self) -> None:
        if not self._dirty:
            return

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w') as zout:
            zout.comment = self._comment
            for info, data in self._members.values():
                zout.writestr(_clone_info(info), data)

        self.path.write_bytes(buffer.getvalue())
        logger.debug(f"Rewrote {self.path} from memory ({len(self._members)} entries)")
        self._dirty = False

    def close(self) -> None:
        self._members.clear()
        self._dirty = False


BACKENDS: Dict[str, Type[ArchiveAccessor]] = {
    "file": ZipFileAccessor,
    "memory": InMemoryZipAccessor,
}


def get_accessor(backend: str) -> Type[ArchiveAccessor]:
    """Accessor class registered under ``backend``.

    Raises:
        ValueError: If no back-end has that name
    """
    try:
        return BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown archive backend: {backend} (expected one of {', '.join(BACKENDS)})"
        ) from None
