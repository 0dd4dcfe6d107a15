"""
Capture Module

Still-frame capture from a V4L2 webcam.

Public API:
    - CaptureFactory / create_capture: Build a capture implementation
    - FrameCaptureInterface: Capture contract
    - CaptureError: Custom exceptions (never fatal to the daemon)

Usage:
    from capture import create_capture

    capture = create_capture(config)
    capture.capture_frame(Path("/tmp/capture_1700000000.jpg"))
"""

from capture.factory import CaptureFactory, create_capture
from capture.interfaces.frame_capture_interface import (
    CameraNotFoundError,
    CaptureError,
    CaptureProcessError,
    CaptureTimeoutError,
    FrameCaptureInterface,
)

__all__ = [
    "CameraNotFoundError",
    "CaptureError",
    "CaptureFactory",
    "CaptureProcessError",
    "CaptureTimeoutError",
    "FrameCaptureInterface",
    "create_capture",
]
