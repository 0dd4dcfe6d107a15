"""
Frame Capture Interface

Abstract interface for still-frame capture implementations.
Defines the contract that any capture system must follow.

The capture service depends on this abstraction, not on fswebcam directly,
so tests can use MockCapture instead of a real camera.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class FrameCaptureInterface(ABC):
    """
    Abstract base class for still-frame capture systems.

    Any capture implementation (fswebcam, ffmpeg, OpenCV, etc.)
    must implement these methods to work with CaptureService.
    """

    @abstractmethod
    def capture_frame(self, output_file: Path) -> Path:
        """
        Capture one JPEG frame to output_file.

        This is BLOCKING - returns once the file is complete.

        Args:
            output_file: Path where the JPEG will be written

        Returns:
            Path of the written file

        Raises:
            CaptureError: If the frame could not be captured

        Example:
            capture.capture_frame(Path("/tmp/capture_1700000000.jpg"))
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if capture system is available.

        Should check:
        - Is the capture utility installed?
        - Is the camera device present?

        Returns:
            True if capture can be used, False otherwise
        """


class CaptureError(Exception):
    """
    Exception raised for frame capture errors.

    Capture errors are never fatal for the daemon: the cycle is skipped
    and retried after the next interval.
    """


class CameraNotFoundError(CaptureError):
    """Camera device not found or not accessible"""


class CaptureProcessError(CaptureError):
    """Capture utility exited with an error or produced no file"""


class CaptureTimeoutError(CaptureError):
    """Capture utility did not finish in time"""
