"""
Uploader Interface

Abstract interface for frame upload implementations.
Follows Dependency Inversion Principle - the capture service depends on this
abstraction, not on a concrete HTTP client.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from upload.constants import UploadStatus


@dataclass
class UploadResult:
    """
    Result of an upload operation.

    Attributes:
        success: True if the endpoint answered with a 2xx status
        status: Upload status code
        http_status: HTTP status code returned (if a response was received)
        error_message: Error description (if failed)
        upload_duration: Time taken to upload in seconds
        file_size: Size of uploaded file in bytes
    """

    success: bool
    status: UploadStatus = UploadStatus.SUCCESS
    http_status: Optional[int] = None
    error_message: Optional[str] = None
    upload_duration: float = 0.0
    file_size: int = 0


class UploaderInterface(ABC):
    """
    Abstract base class for frame uploaders.

    Any uploader implementation (HTTP multipart, mock, etc.)
    must implement these methods.
    """

    @abstractmethod
    def upload_frame(
        self,
        frame_path: str,
        filename: str,
        timestamp: int,
    ) -> UploadResult:
        """
        Upload a captured frame.

        Must never raise for network or endpoint failures: they are
        reported through UploadResult(success=False).

        Args:
            frame_path: Path to the JPEG to upload
            filename: Original filename sent as metadata
            timestamp: Capture epoch sent as metadata

        Returns:
            UploadResult with success status and details

        Example:
            result = uploader.upload_frame(
                frame_path="/tmp/capture_1700000000.jpg",
                filename="capture_1700000000.jpg",
                timestamp=1700000000,
            )
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if uploader is configured and ready to upload.

        Returns:
            True if an endpoint is configured
        """


class UploaderError(Exception):
    """
    Exception raised for upload-related errors.

    Examples:
    - Endpoint unreachable
    - Endpoint returned a non-2xx status
    - Frame file missing
    """

    def __init__(
        self,
        message: str,
        status: UploadStatus = UploadStatus.FAILED,
        http_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.status = status
        self.http_status = http_status
