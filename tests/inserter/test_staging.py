"""Tests for scoped staged copies."""

import tempfile
import pytest
from pathlib import Path

from nestzip.inserter.staging import STAGING_PREFIX, staged_copy


class TestStagedCopy:
    """Test temporary file allocation and cleanup."""

    def test_removed_after_block(self, staging_dir):
        with staged_copy(directory=staging_dir) as path:
            assert path.exists()
            assert path.parent == staging_dir
            path.write_bytes(b"data")

        assert not path.exists()
        assert list(staging_dir.iterdir()) == []

    def test_removed_on_exception(self, staging_dir):
        with pytest.raises(RuntimeError):
            with staged_copy(directory=staging_dir) as path:
                path.write_bytes(b"data")
                raise RuntimeError("boom")

        assert not path.exists()

    def test_already_removed_is_fine(self, staging_dir):
        with staged_copy(directory=staging_dir) as path:
            path.unlink()
        assert not path.exists()

    def test_name_and_suffix(self, staging_dir):
        with staged_copy(directory=staging_dir, suffix=".jar") as path:
            assert path.name.startswith(STAGING_PREFIX)
            assert path.suffix == ".jar"

    def test_defaults_to_system_temp(self):
        with staged_copy() as path:
            assert path.parent == Path(tempfile.gettempdir())
        assert not path.exists()
