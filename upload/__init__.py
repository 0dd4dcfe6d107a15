"""
Upload Module

Frame upload to an HTTP endpoint (multipart POST, optional bearer token).

Public API:
    - UploadController: High-level upload coordinator
    - UploadResult: Upload operation result
    - UploadStatus: Status codes
    - create_uploader: Factory function

Usage:
    from upload import UploadController, create_uploader

    controller = UploadController(create_uploader(config))
    result = controller.upload_frame(frame)
"""

from upload.constants import UploadStatus
from upload.controllers.upload_controller import UploadController
from upload.factory import UploaderFactory, create_uploader
from upload.interfaces.uploader_interface import UploaderError, UploadResult

# Public API
__all__ = [
    "UploadController",
    "UploadResult",
    "UploadStatus",
    "UploaderError",
    "UploaderFactory",
    "create_uploader",
]
