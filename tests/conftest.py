"""
Shared Test Configuration and Fixtures

Fixtures used across the capture, storage, upload and service tests.

To use pytest:
    pip install -e ".[test]"
    pytest tests/
"""

import os
from dataclasses import replace
from pathlib import Path

import pytest

from capture.implementations.mock_capture import MockCapture
from config.daemon_config import DaemonConfig
from upload.implementations.mock_uploader import MockUploader


# =============================================================================
# DIRECTORY FIXTURES
# =============================================================================

@pytest.fixture
def data_dir(tmp_path):
    """Persistent storage directory (created)"""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def frame_tmp_dir(tmp_path):
    """Temporary capture directory (created)"""
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def write_capture():
    """
    Factory writing a capture_<epoch>.jpg with a given size and mtime.

    Usage:
        def test_prune(data_dir, write_capture):
            write_capture(data_dir, epoch=1000, size=2048, mtime=1000)
    """

    def _write(directory: Path, epoch: int, size: int = 1024, mtime: float = None) -> Path:
        path = directory / f"capture_{epoch}.jpg"
        path.write_bytes(b"\xff\xd8" + b"\x00" * max(size - 4, 0) + b"\xff\xd9")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def base_config(data_dir, frame_tmp_dir):
    """
    DaemonConfig in persist mode pointing at temp directories.

    Server disabled so tests never bind a port unless they ask to.
    """
    return DaemonConfig(
        data_dir=data_dir,
        tmp_dir=frame_tmp_dir,
        camera_device="/dev/null",
        serve_latest=False,
    )


@pytest.fixture
def make_config(base_config):
    """
    Factory for DaemonConfig variants.

    Usage:
        def test_upload(make_config):
            config = make_config(push_to_api=True, api_url="http://x")
    """

    def _make(**overrides) -> DaemonConfig:
        return replace(base_config, **overrides)

    return _make


# =============================================================================
# TEST DOUBLES
# =============================================================================

@pytest.fixture
def mock_capture():
    """Fresh MockCapture writing 1024-byte frames"""
    return MockCapture(frame_size=1024)


@pytest.fixture
def mock_uploader():
    """Fresh MockUploader that always succeeds"""
    return MockUploader()


@pytest.fixture
def failing_uploader():
    """MockUploader that reports a network error on every upload"""
    return MockUploader(should_fail=True)


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """
    Configure pytest with custom markers.

    Markers let you categorize and selectively run tests:
        pytest -m unit          # Only unit tests
        pytest -m integration   # Only integration tests
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (real filesystem, sockets)")
    config.addinivalue_line("markers", "slow: Slow tests (use sparingly)")
