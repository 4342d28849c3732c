"""Shared fixtures for nested insertion tests."""

import io
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from nestzip.inserter.backends import ZipFileAccessor, InMemoryZipAccessor


def build_zip(
    entries: Dict[str, bytes],
    compression: int = zipfile.ZIP_DEFLATED,
    comment: Optional[bytes] = None,
) -> bytes:
    """Build zip bytes; names ending with '/' become directory entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression) as zf:
        for name, data in entries.items():
            zf.writestr(name, b"" if name.endswith("/") else data)
        if comment is not None:
            zf.comment = comment
    return buffer.getvalue()


def write_zip(path: Path, entries: Dict[str, bytes], **kwargs) -> Path:
    path.write_bytes(build_zip(entries, **kwargs))
    return path


def open_nested(outer: Path, name: str) -> zipfile.ZipFile:
    """Open entry ``name`` of ``outer`` as a zip archive."""
    with zipfile.ZipFile(outer) as zf:
        return zipfile.ZipFile(io.BytesIO(zf.read(name)))


@pytest.fixture
def make_zip():
    """Factory writing a zip file from a name -> bytes mapping."""
    return write_zip


@pytest.fixture
def zip_bytes():
    """Factory returning zip bytes from a name -> bytes mapping."""
    return build_zip


@pytest.fixture
def read_nested():
    """Open a nested archive entry for inspection."""
    return open_nested


@pytest.fixture(params=[ZipFileAccessor, InMemoryZipAccessor], ids=["file", "memory"])
def accessor_class(request):
    """Every archive back-end."""
    return request.param


@pytest.fixture
def source_file(tmp_path):
    """A plain (non-archive) source file."""
    path = tmp_path / "file.txt"
    path.write_bytes(b"Hello from the source file\n" * 50)
    return path


@pytest.fixture
def staging_dir(tmp_path):
    """Empty directory used for staged copies so leaks can be detected."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def outer_zip(tmp_path):
    """outer.zip -> a/inner.zip (stored) -> b/ directory.

    Layout::

        outer.zip
            readme.txt
            a/
            a/inner.zip
                b/
                b/old.txt
    """
    inner = build_zip({"b/": b"", "b/old.txt": b"old content"})
    outer = tmp_path / "outer.zip"
    with zipfile.ZipFile(outer, 'w', zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("readme.txt", "outer readme")
        zf.writestr("a/", b"")
        zf.writestr("a/inner.zip", inner, compress_type=zipfile.ZIP_STORED)
    return outer
