"""Insertion-specific errors."""

import errno

from nestzip.common import NestZipError


class NotFoundError(NestZipError):
    """A file, archive or archive entry does not exist."""

    exit_code = errno.ENOENT


class SourceNotFoundError(NotFoundError):
    """Source file (or the directory of a source pattern) is missing."""
    pass


class ArchiveNotFoundError(NotFoundError):
    """Target archive (or the directory of a target pattern) is missing."""
    pass


class EntryNotFoundError(NotFoundError):
    """A target path segment matches neither a file nor a directory entry."""
    pass


class EntryExistsError(NestZipError):
    """Entry already exists and overwriting is disabled."""

    exit_code = errno.EEXIST


class ArchiveError(NestZipError):
    """Archive processing failed."""
    pass


class CorruptedArchiveError(ArchiveError):
    """File could not be read as a zip archive."""
    pass


class UsageError(NestZipError):
    """Command line arguments could not be parsed."""

    exit_code = -1
