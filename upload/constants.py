"""
Upload Constants

Centralized configuration for the HTTP frame upload module.
Endpoint and token come from config/settings.py via DaemonConfig.
"""

from enum import Enum

from config.settings import UPLOAD_CONTENT_TYPE, UPLOAD_TIMEOUT_SECONDS

# =============================================================================
# MULTIPART FORM FIELDS
# =============================================================================

# Field names expected by the receiving endpoint
FIELD_FILE = "file"
FIELD_FILENAME = "filename"
FIELD_TIMESTAMP = "timestamp"

# Content type of the uploaded file part
FILE_CONTENT_TYPE = UPLOAD_CONTENT_TYPE

# HTTP request timeout (seconds)
HTTP_TIMEOUT = UPLOAD_TIMEOUT_SECONDS

# =============================================================================
# UPLOAD STATUS
# =============================================================================


class UploadStatus(Enum):
    """Upload operation status codes"""

    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    INVALID_FILE = "invalid_file"
