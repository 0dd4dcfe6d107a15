"""
Capture Factory

Factory pattern for creating frame capture implementations.
Single place to decide between fswebcam and the mock.
"""

import logging
from typing import TYPE_CHECKING, Literal

from capture.implementations.fswebcam_capture import FswebcamCapture
from capture.implementations.mock_capture import MockCapture
from capture.interfaces.frame_capture_interface import FrameCaptureInterface

if TYPE_CHECKING:
    from config.daemon_config import DaemonConfig

# Type alias for better type hints
CaptureMode = Literal["auto", "real", "mock"]


class CaptureFactory:
    """
    Factory for creating frame capture implementations.

    Usage:
        # fswebcam (default)
        capture = CaptureFactory.create_capture(config)

        # Auto-detect (fswebcam if installed, mock otherwise)
        capture = CaptureFactory.create_capture(config, mode="auto")

        # Force mock mode (useful for testing)
        capture = CaptureFactory.create_capture(config, mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_capture(
        cls,
        config: "DaemonConfig",
        mode: CaptureMode = "real",
    ) -> FrameCaptureInterface:
        """
        Create a frame capture instance.

        Args:
            config: Validated daemon configuration (camera settings)
            mode: "real" (fswebcam), "mock" (fake frames),
                  "auto" (fswebcam if available, mock otherwise)

        Returns:
            FrameCaptureInterface implementation

        Raises:
            RuntimeError: If mode is not one of auto, real, mock
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Capture (forced)")
            return MockCapture()

        capture = FswebcamCapture(
            camera_device=config.camera_device,
            resolution=config.resolution,
            jpeg_quality=config.jpeg_quality,
            timeout=config.capture_timeout,
        )

        if mode == "real":
            cls._logger.info("Creating fswebcam Capture")
            return capture

        if mode == "auto":
            if capture.is_available():
                cls._logger.info("Creating fswebcam Capture (auto-detected)")
                return capture
            cls._logger.warning("fswebcam or camera not available, using Mock Capture")
            return MockCapture()

        raise RuntimeError(f"Unknown capture mode: {mode}")


def create_capture(config: "DaemonConfig", force_mock: bool = False) -> FrameCaptureInterface:
    """
    Quick capture creation with simple mock override.

    Example:
        capture = create_capture(config)
    """
    mode = "mock" if force_mock else "real"
    return CaptureFactory.create_capture(config, mode=mode)
