"""
Storage Test Configuration and Fixtures

Fixtures shared across storage tests: managers bound to a temp
directory and a fixed clock for age-based pruning.
"""

import pytest

from storage.managers.cleanup_manager import CleanupManager
from storage.managers.space_manager import SpaceManager

# Fixed "now" for age-based tests (10 days after the epoch)
FIXED_NOW = 10 * 86400.0


@pytest.fixture
def space_manager(data_dir):
    """SpaceManager measuring the temp data directory"""
    return SpaceManager(data_dir)


@pytest.fixture
def cleanup_manager(data_dir, space_manager):
    """
    CleanupManager with a frozen clock.

    Usage:
        def test_max_age(cleanup_manager, write_capture, data_dir):
            write_capture(data_dir, 1, mtime=FIXED_NOW - 3 * 86400)
    """
    return CleanupManager(data_dir, space_manager, clock=lambda: FIXED_NOW)


@pytest.fixture
def five_captures(data_dir, write_capture):
    """
    Five captures with mtimes 1000..5000 plus non-capture files.

    Returns the capture paths oldest first.
    """
    paths = [
        write_capture(data_dir, epoch=1000 * i, size=2048, mtime=1000.0 * i)
        for i in range(1, 6)
    ]
    (data_dir / "latest.jpg").write_bytes(b"latest")
    (data_dir / "notes.txt").write_text("not a capture")
    return paths
