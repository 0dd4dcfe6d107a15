"""
Mock Frame Capture Implementation

Simulated capture for testing without a real camera or fswebcam.

This is a "Fake" (test double) - it writes real files with fake JPEG
content so the storage and upload paths can be exercised end to end.
"""

import logging
from pathlib import Path
from typing import List, Optional

from capture.constants import JPEG_EOI, JPEG_SOI
from capture.interfaces.frame_capture_interface import (
    CaptureError,
    FrameCaptureInterface,
)


class MockCapture(FrameCaptureInterface):
    """
    Mock frame capture for testing.

    Usage:
        capture = MockCapture(frame_size=1500)
        capture.capture_frame(Path("/tmp/capture_1.jpg"))  # 1500-byte file

        capture.fail_next(2)  # Next two captures raise CaptureError
    """

    def __init__(self, frame_size: int = 1024, available: bool = True):
        """
        Initialize mock capture.

        Args:
            frame_size: Size in bytes of every written frame
            available: Value returned by is_available()
        """
        self.logger = logging.getLogger(__name__)
        self.frame_size = max(frame_size, len(JPEG_SOI) + len(JPEG_EOI))
        self._available = available

        # Track capture history for testing
        self.captured: List[Path] = []
        self.attempts = 0

        # Configuration for test scenarios
        self._failures_remaining = 0
        self._fail_always = False
        self._sizes: Optional[List[int]] = None

        self.logger.info(f"Mock Capture initialized (frame_size: {self.frame_size})")

    def fail_next(self, count: int = 1) -> None:
        """Make the next count captures fail"""
        self._failures_remaining = count

    def fail_always(self, enabled: bool = True) -> None:
        """Make every capture fail until disabled"""
        self._fail_always = enabled

    def set_frame_sizes(self, sizes: List[int]) -> None:
        """Use these sizes for successive frames (last one repeats)"""
        self._sizes = list(sizes)

    def _next_size(self) -> int:
        if not self._sizes:
            return self.frame_size
        if len(self._sizes) > 1:
            return self._sizes.pop(0)
        return self._sizes[0]

    def capture_frame(self, output_file: Path) -> Path:
        """Write a fake JPEG of the configured size"""
        self.attempts += 1

        if self._fail_always or self._failures_remaining > 0:
            if self._failures_remaining > 0:
                self._failures_remaining -= 1
            self.logger.error("[MOCK] Simulated capture failure")
            raise CaptureError("Simulated camera failure")

        size = self._next_size()
        body = b"\x00" * max(size - len(JPEG_SOI) - len(JPEG_EOI), 0)

        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_bytes(JPEG_SOI + body + JPEG_EOI)

        self.captured.append(output_file)
        self.logger.info(f"[MOCK] Captured {output_file} ({size} bytes)")
        return output_file

    def is_available(self) -> bool:
        """Mock is available unless configured otherwise"""
        return self._available
