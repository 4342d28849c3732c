"""Insert files into zip archives at arbitrarily nested paths."""

from .accessor import ArchiveAccessor, Entry
from .backends import ZipFileAccessor, InMemoryZipAccessor, get_accessor
from .config import InsertionConfig, NestZipConfig
from .mutator import NestedMutator
from .paths import LogicalPath, decompose, remaining_path
from .resolver import EntryKind, Resolution, resolve

__all__ = [
    'ArchiveAccessor',
    'Entry',
    'ZipFileAccessor',
    'InMemoryZipAccessor',
    'get_accessor',
    'InsertionConfig',
    'NestZipConfig',
    'NestedMutator',
    'LogicalPath',
    'decompose',
    'remaining_path',
    'EntryKind',
    'Resolution',
    'resolve',
]
