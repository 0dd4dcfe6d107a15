"""
HTTP Uploader Implementation

Concrete implementation of UploaderInterface posting frames as
multipart/form-data to a configured endpoint.
"""

import logging
import os
import time
from typing import Dict, Optional

import requests

from upload.constants import (
    FIELD_FILE,
    FIELD_FILENAME,
    FIELD_TIMESTAMP,
    FILE_CONTENT_TYPE,
    HTTP_TIMEOUT,
    UploadStatus,
)
from upload.interfaces.uploader_interface import (
    UploaderError,
    UploaderInterface,
    UploadResult,
)


class HttpUploader(UploaderInterface):
    """
    Frame uploader using a plain HTTP POST.

    Sends fields:
    - file: JPEG content (image/jpeg)
    - filename: original filename
    - timestamp: capture epoch

    and an "Authorization: Bearer <token>" header when a token is set.
    Any 2xx response counts as success.
    """

    def __init__(
        self,
        api_url: str,
        api_token: Optional[str] = None,
        timeout: float = HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP uploader.

        Args:
            api_url: Endpoint receiving the multipart POST
            api_token: Optional bearer token
            timeout: Request timeout in seconds
            session: requests session (None = module-level requests.post)
        """
        self.logger = logging.getLogger(__name__)
        self.api_url = api_url
        self.api_token = api_token or None
        self.timeout = timeout
        self.session = session

        self.logger.info(
            f"HTTP Uploader initialized (url: {api_url}, "
            f"auth: {'bearer' if self.api_token else 'none'})",
        )

    def _headers(self) -> Dict[str, str]:
        if not self.api_token:
            return {}
        return {"Authorization": f"Bearer {self.api_token}"}

    def _post(self, **kwargs) -> requests.Response:
        if self.session is not None:
            return self.session.post(self.api_url, **kwargs)
        return requests.post(self.api_url, **kwargs)

    def upload_frame(
        self,
        frame_path: str,
        filename: str,
        timestamp: int,
    ) -> UploadResult:
        """Post the frame; failures are returned, never raised"""
        start_time = time.time()
        file_size = 0

        try:
            if not os.path.isfile(frame_path):
                raise UploaderError(
                    f"Frame file not found: {frame_path}",
                    status=UploadStatus.INVALID_FILE,
                )
            file_size = os.path.getsize(frame_path)

            with open(frame_path, "rb") as f:
                response = self._post(
                    headers=self._headers(),
                    files={FIELD_FILE: (filename, f, FILE_CONTENT_TYPE)},
                    data={
                        FIELD_FILENAME: filename,
                        FIELD_TIMESTAMP: str(timestamp),
                    },
                    timeout=self.timeout,
                )

            self._check_response(response)

            return UploadResult(
                success=True,
                status=UploadStatus.SUCCESS,
                http_status=response.status_code,
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

        except UploaderError as e:
            return self._failure(e.status, str(e), start_time, file_size, e)

        except requests.exceptions.Timeout as e:
            return self._failure(
                UploadStatus.TIMEOUT,
                f"Upload timed out after {self.timeout}s",
                start_time,
                file_size,
                e,
            )

        except requests.exceptions.ConnectionError as e:
            return self._failure(
                UploadStatus.NETWORK_ERROR,
                f"Failed to connect to {self.api_url}: {e}",
                start_time,
                file_size,
                e,
            )

        except requests.exceptions.RequestException as e:
            return self._failure(
                UploadStatus.FAILED,
                f"Upload request failed: {e}",
                start_time,
                file_size,
                e,
            )

        except OSError as e:
            # After RequestException, which subclasses OSError
            return self._failure(
                UploadStatus.INVALID_FILE,
                f"Cannot read frame {frame_path}: {e}",
                start_time,
                file_size,
                e,
            )

    def _check_response(self, response: requests.Response) -> None:
        """Raise UploaderError for non-2xx responses"""
        if 200 <= response.status_code < 300:
            return

        if response.status_code in (401, 403):
            status = UploadStatus.AUTH_ERROR
        else:
            status = UploadStatus.HTTP_ERROR

        raise UploaderError(
            f"Endpoint returned HTTP {response.status_code}: {response.text[:200]}",
            status=status,
            http_status=response.status_code,
        )

    def _failure(
        self,
        status: UploadStatus,
        message: str,
        start_time: float,
        file_size: int,
        error: Exception,
    ) -> UploadResult:
        self.logger.debug(f"Upload failure detail: {error!r}")
        return UploadResult(
            success=False,
            status=status,
            http_status=getattr(error, "http_status", None),
            error_message=message,
            upload_duration=time.time() - start_time,
            file_size=file_size,
        )

    def is_available(self) -> bool:
        """Available whenever an endpoint is configured"""
        return bool(self.api_url)
