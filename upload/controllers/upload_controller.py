"""
Upload Controller

High-level coordinator for frame uploads.
Simplifies upload operations for the capture service.

- Clean, simple API for the main service
- Owns the temp-file lifecycle: delete on success, keep on failure
- Proper error handling and logging
"""

import logging
from pathlib import Path
from typing import Any, Dict

from storage.models.capture_file import CapturedFrame
from upload.interfaces.uploader_interface import UploaderInterface, UploadResult


class UploadController:
    """
    High-level frame upload controller.

    This class:
    - Sends a captured frame with its filename and timestamp
    - Deletes the temporary frame after a successful upload
    - Keeps the frame on failure for operator inspection (no retry)

    Usage:
        controller = UploadController(uploader)

        result = controller.upload_frame(frame)
        if not result.success:
            print(f"Kept for debugging: {frame.path}")
    """

    def __init__(self, uploader: UploaderInterface):
        """
        Initialize upload controller.

        Args:
            uploader: UploaderInterface implementation

        Example:
            controller = UploadController(create_uploader(config))

            # Custom uploader (testing)
            controller = UploadController(uploader=MockUploader())
        """
        self.logger = logging.getLogger(__name__)
        self.uploader = uploader

        # Verify uploader is ready
        if not self.uploader.is_available():
            self.logger.warning(
                "Uploader initialized but not available. Check API_URL.",
            )

        self.upload_count = 0
        self.failure_count = 0

        self.logger.info("Upload Controller initialized")

    def upload_frame(self, frame: CapturedFrame) -> UploadResult:
        """
        Upload a frame and settle its temporary file.

        Args:
            frame: Captured frame on the temporary filesystem

        Returns:
            UploadResult with success status and details
        """
        self.logger.info(f"Uploading {frame.filename}")

        result = self.uploader.upload_frame(
            frame_path=str(frame.path),
            filename=frame.filename,
            timestamp=frame.epoch,
        )

        if result.success:
            self.upload_count += 1
            self.logger.info(
                f"Upload successful: {frame.filename} "
                f"({result.upload_duration:.1f}s, {result.file_size} bytes)",
            )
            self._remove_temp_file(frame.path)
        else:
            self.failure_count += 1
            self.logger.error(
                f"Upload failed: {result.error_message} "
                f"(status: {result.status.value}); "
                f"keeping file at {frame.path} for debugging",
            )

        return result

    def _remove_temp_file(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not remove uploaded frame {path}: {e}")

    def get_status(self) -> Dict[str, Any]:
        """
        Get current controller status.

        Returns:
            Dictionary with status information
        """
        return {
            "ready": self.uploader.is_available(),
            "uploader_type": type(self.uploader).__name__,
            "upload_count": self.upload_count,
            "failure_count": self.failure_count,
        }
