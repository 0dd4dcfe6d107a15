"""
Mock Uploader Implementation

Simulated uploader for testing without a real endpoint.
Similar to MockCapture in the capture module.
"""

import logging
import os
import time
from typing import Optional

from upload.constants import UploadStatus
from upload.interfaces.uploader_interface import (
    UploaderError,
    UploaderInterface,
    UploadResult,
)


class MockUploader(UploaderInterface):
    """
    Mock frame uploader for testing.

    Useful for:
    - Unit tests
    - Development without an endpoint
    """

    def __init__(self, should_fail: bool = False):
        """
        Initialize mock uploader.

        Args:
            should_fail: If True, every upload reports a network error

        Example:
            # Always succeeds
            uploader = MockUploader()

            # Test error handling
            uploader = MockUploader(should_fail=True)
        """
        self.logger = logging.getLogger(__name__)
        self.should_fail = should_fail

        # Track upload history for testing
        self.upload_history: list[dict] = []

        self.logger.info(f"Mock Uploader initialized (should_fail: {should_fail})")

    def upload_frame(
        self,
        frame_path: str,
        filename: str,
        timestamp: int,
    ) -> UploadResult:
        """Simulate frame upload"""
        start_time = time.time()
        file_size = 0

        try:
            if not os.path.exists(frame_path):
                raise UploaderError(
                    f"Frame file not found: {frame_path}",
                    status=UploadStatus.INVALID_FILE,
                )
            file_size = os.path.getsize(frame_path)

            if self.should_fail:
                raise UploaderError(
                    "Simulated upload failure",
                    status=UploadStatus.NETWORK_ERROR,
                )

            self.upload_history.append(
                {
                    "frame_path": frame_path,
                    "filename": filename,
                    "timestamp": timestamp,
                    "file_size": file_size,
                },
            )

            self.logger.info(f"[MOCK] Upload successful: {filename}")

            return UploadResult(
                success=True,
                status=UploadStatus.SUCCESS,
                http_status=200,
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

        except UploaderError as e:
            self.logger.error(f"[MOCK] Upload failed: {e}")

            return UploadResult(
                success=False,
                status=e.status,
                error_message=str(e),
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

    def is_available(self) -> bool:
        """Mock uploader is always available"""
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def get_last_upload(self) -> Optional[dict]:
        """
        Get most recent upload.

        Returns:
            Last upload record, or None
        """
        return self.upload_history[-1] if self.upload_history else None

    def was_uploaded(self, filename: str) -> bool:
        """Check if a frame with this filename was uploaded"""
        return any(record["filename"] == filename for record in self.upload_history)
