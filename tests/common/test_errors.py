"""Tests for standardized error handling."""

import errno
import pytest
from nestzip.common import NestZipError
from nestzip.inserter.errors import (
    NotFoundError, SourceNotFoundError, ArchiveNotFoundError, EntryNotFoundError,
    EntryExistsError, ArchiveError, CorruptedArchiveError, UsageError
)


class TestStandardizedErrors:
    """Test standardized error types."""
    
    def test_base_error(self):
        """Test base NestZipError functionality."""
        error = NestZipError("Test error", archive="/test/outer.zip")
        
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.context == {"archive": "/test/outer.zip"}
        assert error.exit_code == 1
    
    @pytest.mark.parametrize("error_class", [
        SourceNotFoundError, ArchiveNotFoundError, EntryNotFoundError
    ])
    def test_not_found_errors(self, error_class):
        """All missing-thing errors share the NotFound exit code."""
        error = error_class("missing", path="/x")
        
        assert isinstance(error, NotFoundError)
        assert isinstance(error, NestZipError)
        assert error.exit_code == errno.ENOENT
    
    def test_entry_exists(self):
        error = EntryExistsError("Entry a/b.txt already exists.", entry="a/b.txt")
        
        assert error.exit_code == errno.EEXIST
        assert error.context["entry"] == "a/b.txt"
    
    def test_archive_errors(self):
        error = CorruptedArchiveError("bad zip", archive="/x.zip")
        
        assert isinstance(error, ArchiveError)
        assert error.exit_code == 1
    
    def test_usage_error(self):
        assert UsageError("bad arguments").exit_code == -1
    
    def test_error_context_preservation(self):
        """Test that error context is preserved."""
        error = EntryNotFoundError(
            "Entry not found",
            archive="/test/outer.zip",
            entry="a/inner.zip/b"
        )
        
        assert error.context["archive"] == "/test/outer.zip"
        assert error.context["entry"] == "a/inner.zip/b"
