"""
Interfaces Package

Upload contract and result types for frame uploaders.
"""

from upload.interfaces.uploader_interface import (
    UploaderError,
    UploaderInterface,
    UploadResult,
)

__all__ = [
    "UploaderInterface",
    "UploadResult",
    "UploaderError",
]
