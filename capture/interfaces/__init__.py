"""
Capture Interfaces

Abstract base classes defining the capture contract.
"""

from capture.interfaces.frame_capture_interface import (
    CaptureError,
    FrameCaptureInterface,
)

__all__ = [
    "CaptureError",
    "FrameCaptureInterface",
]
