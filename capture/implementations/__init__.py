"""
Capture Implementations

Concrete capture implementations (real and mock).
"""

from capture.implementations.fswebcam_capture import FswebcamCapture
from capture.implementations.mock_capture import MockCapture

__all__ = [
    "FswebcamCapture",
    "MockCapture",
]
