"""
Controllers Package

High-level coordinator for uploading captured frames.
"""

from upload.controllers.upload_controller import UploadController

__all__ = [
    "UploadController",
]
