"""
Upload Factory

Factory pattern for creating uploader implementations.
Follows same pattern as capture/factory.py for consistency.
"""

import logging
from typing import TYPE_CHECKING, Literal

from upload.implementations.http_uploader import HttpUploader
from upload.implementations.mock_uploader import MockUploader
from upload.interfaces.uploader_interface import UploaderInterface

if TYPE_CHECKING:
    from config.daemon_config import DaemonConfig

# Type alias
UploaderMode = Literal["http", "mock"]


class UploaderFactory:
    """
    Factory for creating uploader implementations.

    Usage:
        # From validated configuration (API_URL, API_TOKEN)
        uploader = UploaderFactory.create_uploader(config)

        # Force mock for testing
        uploader = UploaderFactory.create_uploader(config, mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_uploader(
        cls,
        config: "DaemonConfig",
        mode: UploaderMode = "http",
    ) -> UploaderInterface:
        """
        Create an uploader instance.

        Args:
            config: Validated daemon configuration
            mode: "http" (real endpoint) or "mock" (simulation)

        Returns:
            UploaderInterface implementation

        Raises:
            RuntimeError: If mode="http" but no API_URL is configured
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Uploader (forced)")
            return MockUploader()

        if not config.api_url:
            raise RuntimeError("HTTP uploader requested but API_URL is not set")

        cls._logger.info("Creating HTTP Uploader")
        return HttpUploader(
            api_url=config.api_url,
            api_token=config.api_token,
            timeout=config.upload_timeout,
        )


# Convenience function for quick creation
def create_uploader(
    config: "DaemonConfig",
    force_mock: bool = False,
) -> UploaderInterface:
    """
    Quick uploader creation with simple mock override.

    Example:
        uploader = create_uploader(config)
    """
    mode = "mock" if force_mock else "http"
    return UploaderFactory.create_uploader(config, mode=mode)
