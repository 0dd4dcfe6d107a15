"""
Frame Capture Tests

Tests for the fswebcam command line, FswebcamCapture error mapping
(subprocess patched), MockCapture and the factory.

To run:
    pytest tests/capture/test_frame_capture.py -v
"""

import subprocess

import pytest

from capture import (
    CameraNotFoundError,
    CaptureError,
    CaptureFactory,
    CaptureProcessError,
    CaptureTimeoutError,
    create_capture,
)
from capture.constants import JPEG_EOI, JPEG_SOI, get_fswebcam_command
from capture.implementations.fswebcam_capture import FswebcamCapture
from capture.implementations.mock_capture import MockCapture

RUN_TARGET = "capture.implementations.fswebcam_capture.subprocess.run"


@pytest.fixture
def camera_device(tmp_path):
    """Stand-in device node that exists on disk"""
    device = tmp_path / "video0"
    device.touch()
    return device


@pytest.fixture
def fswebcam(camera_device):
    return FswebcamCapture(
        camera_device=str(camera_device),
        resolution="640x480",
        jpeg_quality=75,
        timeout=5,
    )


def _completed(returncode=0, stderr=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=b"", stderr=stderr)


# =============================================================================
# COMMAND TESTS
# =============================================================================

@pytest.mark.unit
def test_fswebcam_command():
    command = get_fswebcam_command("/dev/video0", "/tmp/out.jpg", "1280x720", 90)

    assert command == [
        "fswebcam",
        "--no-banner",
        "-d", "/dev/video0",
        "-r", "1280x720",
        "--jpeg", "90",
        "/tmp/out.jpg",
    ]


# =============================================================================
# FSWEBCAM TESTS
# =============================================================================

@pytest.mark.unit
class TestFswebcamCapture:
    """Test subprocess handling with subprocess.run patched"""

    def test_successful_capture(self, fswebcam, tmp_path, monkeypatch):
        output = tmp_path / "capture_1.jpg"
        calls = []

        def fake_run(command, **kwargs):
            calls.append((command, kwargs))
            output.write_bytes(JPEG_SOI + b"data" + JPEG_EOI)
            return _completed()

        monkeypatch.setattr(RUN_TARGET, fake_run)

        assert fswebcam.capture_frame(output) == output
        command, kwargs = calls[0]
        assert command[-1] == str(output)
        assert "--no-banner" in command
        assert kwargs["timeout"] == 5

    def test_nonzero_exit(self, fswebcam, tmp_path, monkeypatch):
        output = tmp_path / "capture_1.jpg"

        def fake_run(command, **kwargs):
            output.write_bytes(b"partial")
            return _completed(returncode=1, stderr=b"Unable to find a compatible palette")

        monkeypatch.setattr(RUN_TARGET, fake_run)

        with pytest.raises(CaptureProcessError, match="compatible palette"):
            fswebcam.capture_frame(output)
        assert not output.exists()

    def test_exit_zero_without_file(self, fswebcam, tmp_path, monkeypatch):
        monkeypatch.setattr(RUN_TARGET, lambda command, **kwargs: _completed())

        with pytest.raises(CaptureProcessError, match="no image"):
            fswebcam.capture_frame(tmp_path / "capture_1.jpg")

    def test_timeout(self, fswebcam, tmp_path, monkeypatch):
        def fake_run(command, **kwargs):
            raise subprocess.TimeoutExpired(command, kwargs["timeout"])

        monkeypatch.setattr(RUN_TARGET, fake_run)

        with pytest.raises(CaptureTimeoutError):
            fswebcam.capture_frame(tmp_path / "capture_1.jpg")

    def test_binary_missing(self, fswebcam, tmp_path, monkeypatch):
        def fake_run(command, **kwargs):
            raise FileNotFoundError(command[0])

        monkeypatch.setattr(RUN_TARGET, fake_run)

        with pytest.raises(CaptureError, match="not found"):
            fswebcam.capture_frame(tmp_path / "capture_1.jpg")

    def test_camera_missing(self, tmp_path):
        capture = FswebcamCapture(camera_device=str(tmp_path / "video7"))

        with pytest.raises(CameraNotFoundError):
            capture.capture_frame(tmp_path / "capture_1.jpg")

    def test_binary_not_executable(self, camera_device, tmp_path):
        binary = tmp_path / "fswebcam"
        binary.write_text("#!/bin/sh\nexit 0\n")
        binary.chmod(0o644)
        capture = FswebcamCapture(camera_device=str(camera_device), binary=str(binary))

        with pytest.raises(CaptureProcessError, match="Failed to run"):
            capture.capture_frame(tmp_path / "capture_1.jpg")

    def test_spawn_failure(self, fswebcam, tmp_path, monkeypatch):
        def fake_run(command, **kwargs):
            raise BlockingIOError(11, "Resource temporarily unavailable")

        monkeypatch.setattr(RUN_TARGET, fake_run)

        with pytest.raises(CaptureProcessError):
            fswebcam.capture_frame(tmp_path / "capture_1.jpg")

    def test_output_directory_unusable(self, fswebcam, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file")

        with pytest.raises(CaptureError, match="Cannot create capture directory"):
            fswebcam.capture_frame(blocker / "frames" / "capture_1.jpg")

    def test_errors_are_capture_errors(self):
        for error in (CameraNotFoundError, CaptureProcessError, CaptureTimeoutError):
            assert issubclass(error, CaptureError)


# =============================================================================
# MOCK CAPTURE TESTS
# =============================================================================

@pytest.mark.unit
class TestMockCapture:
    """Test the capture test double"""

    def test_writes_jpeg_of_requested_size(self, tmp_path):
        capture = MockCapture(frame_size=1500)
        output = capture.capture_frame(tmp_path / "capture_1.jpg")

        content = output.read_bytes()
        assert len(content) == 1500
        assert content.startswith(JPEG_SOI)
        assert content.endswith(JPEG_EOI)
        assert capture.captured == [output]

    def test_fail_next(self, tmp_path):
        capture = MockCapture()
        capture.fail_next(2)

        for _ in range(2):
            with pytest.raises(CaptureError):
                capture.capture_frame(tmp_path / "capture_1.jpg")

        capture.capture_frame(tmp_path / "capture_1.jpg")
        assert capture.attempts == 3
        assert len(capture.captured) == 1

    def test_frame_sizes_sequence(self, tmp_path):
        capture = MockCapture()
        capture.set_frame_sizes([100, 200])

        first = capture.capture_frame(tmp_path / "capture_1.jpg")
        second = capture.capture_frame(tmp_path / "capture_2.jpg")
        third = capture.capture_frame(tmp_path / "capture_3.jpg")

        assert [p.stat().st_size for p in (first, second, third)] == [100, 200, 200]


# =============================================================================
# FACTORY TESTS
# =============================================================================

@pytest.mark.unit
class TestCaptureFactory:
    """Test implementation selection"""

    def test_default_is_fswebcam(self, base_config):
        capture = create_capture(base_config)
        assert isinstance(capture, FswebcamCapture)
        assert capture.camera_device == base_config.camera_device
        assert capture.resolution == base_config.resolution

    def test_force_mock(self, base_config):
        assert isinstance(create_capture(base_config, force_mock=True), MockCapture)

    def test_unknown_mode(self, base_config):
        with pytest.raises(RuntimeError):
            CaptureFactory.create_capture(base_config, mode="webcam")
