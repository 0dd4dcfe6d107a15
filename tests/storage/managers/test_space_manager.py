"""
Space Manager Tests

Directory accounting: allocated sizes, recursion, missing paths.
"""

import os

import pytest

from storage.managers.space_manager import SpaceManager


def _allocated(path):
    return SpaceManager.allocated_size(os.lstat(path))


@pytest.mark.unit
class TestSpaceManager:
    """Test directory size accounting"""

    def test_empty_directory(self, space_manager):
        assert space_manager.total_occupied_bytes() == 0

    def test_missing_directory(self, tmp_path):
        manager = SpaceManager(tmp_path / "does-not-exist")
        assert manager.total_occupied_bytes() == 0

    def test_sums_allocated_sizes(self, space_manager, data_dir, write_capture):
        first = write_capture(data_dir, 1, size=1000)
        second = write_capture(data_dir, 2, size=50000)

        expected = _allocated(first) + _allocated(second)
        assert space_manager.total_occupied_bytes() == expected

    def test_counts_nested_files(self, space_manager, data_dir):
        nested = data_dir / "sub" / "deeper"
        nested.mkdir(parents=True)
        nested_file = nested / "blob.bin"
        nested_file.write_bytes(b"x" * 4096)

        assert space_manager.total_occupied_bytes() == _allocated(nested_file)

    def test_measures_fresh_each_call(self, space_manager, data_dir, write_capture):
        path = write_capture(data_dir, 1, size=4096)
        assert space_manager.total_occupied_bytes() == _allocated(path)

        path.unlink()

        assert space_manager.total_occupied_bytes() == 0

    def test_allocated_size_falls_back_to_st_size(self):
        class _Stat:
            st_size = 1234

        assert SpaceManager.allocated_size(_Stat()) == 1234

    def test_allocated_size_uses_blocks(self):
        class _Stat:
            st_size = 10
            st_blocks = 8

        assert SpaceManager.allocated_size(_Stat()) == 4096


@pytest.mark.unit
class TestFileLengths:
    """Test per-file size helpers"""

    def test_file_length(self, space_manager, data_dir, write_capture):
        path = write_capture(data_dir, 1, size=1500)
        assert space_manager.file_length(path) == 1500

    def test_existing_file_length_missing(self, space_manager, data_dir):
        assert space_manager.existing_file_length(data_dir / "latest.jpg") == 0

    def test_size_of_missing_raises(self, space_manager, data_dir):
        with pytest.raises(FileNotFoundError):
            space_manager.size_of(data_dir / "nope.jpg")

    def test_log_usage_with_quota(self, space_manager, data_dir, write_capture, caplog):
        caplog.set_level("INFO")
        write_capture(data_dir, 1, size=1024)

        space_manager.log_usage(max_bytes=1024**2)

        assert "Data dir usage" in caplog.text
        assert "%" in caplog.text

    def test_log_usage_unlimited(self, space_manager, caplog):
        caplog.set_level("INFO")
        space_manager.log_usage(0)
        assert "no size limit" in caplog.text
