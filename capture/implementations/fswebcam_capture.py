"""
fswebcam Frame Capture Implementation

Real still capture using the fswebcam utility as a subprocess.
Grabs one JPEG from a V4L2 webcam per call.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from capture.constants import (
    MIN_JPEG_SIZE_BYTES,
    get_fswebcam_command,
    validate_camera_device,
)
from capture.interfaces.frame_capture_interface import (
    CameraNotFoundError,
    CaptureError,
    CaptureProcessError,
    CaptureTimeoutError,
    FrameCaptureInterface,
)
from config.settings import (
    CAPTURE_BINARY,
    CAPTURE_TIMEOUT_SECONDS,
    DEFAULT_CAMERA_DEVICE,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_RESOLUTION,
)


class FswebcamCapture(FrameCaptureInterface):
    """
    Frame capture using fswebcam.

    Usage:
        capture = FswebcamCapture(camera_device="/dev/video0")
        capture.capture_frame(Path("/tmp/capture_1700000000.jpg"))
    """

    def __init__(
        self,
        camera_device: str = DEFAULT_CAMERA_DEVICE,
        resolution: str = DEFAULT_RESOLUTION,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
        timeout: float = CAPTURE_TIMEOUT_SECONDS,
        binary: str = CAPTURE_BINARY,
    ):
        """
        Initialize fswebcam capture.

        Args:
            camera_device: Path to camera device (e.g., /dev/video0)
            resolution: WIDTHxHEIGHT string
            jpeg_quality: JPEG quality passed to --jpeg
            timeout: Seconds before a hung capture is killed
            binary: fswebcam executable name or path
        """
        self.logger = logging.getLogger(__name__)

        self.camera_device = camera_device
        self.resolution = resolution
        self.jpeg_quality = jpeg_quality
        self.timeout = timeout
        self.binary = binary

        self.logger.info(
            f"fswebcam Capture initialized "
            f"(camera: {camera_device}, resolution: {resolution}, "
            f"quality: {jpeg_quality})",
        )

    def capture_frame(self, output_file: Path) -> Path:
        """
        Capture one frame with fswebcam.

        Blocks until fswebcam exits or the timeout expires.
        """
        if not validate_camera_device(self.camera_device):
            raise CameraNotFoundError(
                f"Camera device not found: {self.camera_device}",
            )

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CaptureError(f"Cannot create capture directory {output_file.parent}: {e}") from e

        command = get_fswebcam_command(
            input_device=self.camera_device,
            output_file=str(output_file),
            resolution=self.resolution,
            jpeg_quality=self.jpeg_quality,
            binary=self.binary,
        )
        self.logger.debug(f"fswebcam command: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CaptureError(
                f"{self.binary} not found. Install with: sudo apt-get install fswebcam",
            ) from e
        except subprocess.TimeoutExpired as e:
            output_file.unlink(missing_ok=True)
            raise CaptureTimeoutError(
                f"{self.binary} did not finish within {self.timeout}s",
            ) from e
        except OSError as e:
            # Not executable, fork failure, out of memory
            raise CaptureProcessError(f"Failed to run {self.binary}: {e}") from e

        if result.returncode != 0:
            error_msg = result.stderr.decode("utf-8", errors="ignore").strip()
            output_file.unlink(missing_ok=True)
            raise CaptureProcessError(
                f"{self.binary} exited with code {result.returncode}: {error_msg}",
            )

        # fswebcam can exit 0 without writing when no frame was grabbed
        if not output_file.exists() or output_file.stat().st_size < MIN_JPEG_SIZE_BYTES:
            output_file.unlink(missing_ok=True)
            raise CaptureProcessError(f"{self.binary} produced no image")

        return output_file

    def is_available(self) -> bool:
        """Check fswebcam is installed and camera device exists"""
        if shutil.which(self.binary) is None:
            self.logger.warning(f"{self.binary} not found in PATH")
            return False

        if not validate_camera_device(self.camera_device):
            self.logger.warning(f"Camera not found: {self.camera_device}")
            return False

        return True
