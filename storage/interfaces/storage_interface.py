"""
Storage Errors and Interface

Abstract persistence interface following Dependency Inversion Principle.
The capture service depends on this interface, not on the local filesystem
implementation, so tests can swap in a fake.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storage.models.capture_file import CapturedFrame


class StorageInterface(ABC):
    """
    Abstract base class for frame persistence.

    Any persister must provide these methods.
    """

    @abstractmethod
    def initialize(self) -> None:
        """
        Prepare the storage directory.

        Raises:
            StorageError: If the directory cannot be created
        """

    @abstractmethod
    def persist(self, frame: "CapturedFrame") -> Path:
        """
        Store a captured frame permanently.

        Enforces the directory quota before writing.

        Args:
            frame: Frame sitting on the temporary filesystem

        Returns:
            Final path of the stored frame

        Raises:
            QuotaExceededError: If pruning could not bring usage under quota
            StorageError: If the move or mirror update fails
        """


class StorageError(Exception):
    """
    Exception raised for storage-related errors.

    Examples:
    - Storage directory cannot be created
    - Frame cannot be moved into place
    """


class QuotaExceededError(StorageError):
    """
    Directory usage is predicted to stay at or over quota after pruning.

    This is fatal for the capture loop: the configured prune policy cannot
    keep pace with incoming frames.
    """

    def __init__(self, predicted_bytes: int, max_bytes: int, current_bytes: int):
        super().__init__(
            f"Max data size reached and pruning insufficient "
            f"(predicted={predicted_bytes}B >= max={max_bytes}B)",
        )
        self.predicted_bytes = predicted_bytes
        self.max_bytes = max_bytes
        self.current_bytes = current_bytes


class InvalidSizeError(ValueError):
    """Size string is not bytes or a number with a K/M/G/T suffix"""
