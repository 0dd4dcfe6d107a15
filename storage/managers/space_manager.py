"""
Space Manager

Measures how much disk the storage directory occupies.
Single responsibility: Directory size accounting only.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from storage.utils.size_utils import format_size

# st_blocks is always counted in 512-byte units, regardless of fs block size
STAT_BLOCK_SIZE = 512


class SpaceManager:
    """
    Measures occupied bytes of the storage directory.

    Responsibilities:
    - Sum the on-disk footprint of the directory (like du)
    - Report per-file allocated size and logical length
    - Log usage against the quota

    Nothing is cached: every call measures the filesystem again.
    """

    def __init__(self, storage_dir: Path):
        """
        Initialize space manager.

        Args:
            storage_dir: Directory to account for
        """
        self.logger = logging.getLogger(__name__)
        self.storage_dir = Path(storage_dir)

        self.logger.info(f"Space manager initialized (path: {self.storage_dir})")

    @staticmethod
    def allocated_size(stat_result: os.stat_result) -> int:
        """
        Real disk footprint of a stat result.

        Falls back to the logical size on platforms without st_blocks.
        """
        blocks = getattr(stat_result, "st_blocks", None)
        if blocks is None:
            return stat_result.st_size
        return blocks * STAT_BLOCK_SIZE

    def total_occupied_bytes(self) -> int:
        """
        Get total on-disk bytes used by the storage directory.

        Returns:
            Allocated size of every regular file under the directory,
            or 0 if the directory does not exist yet
        """
        if not self.storage_dir.is_dir():
            return 0

        total = 0
        for root, _dirs, files in os.walk(self.storage_dir):
            for name in files:
                file_path = os.path.join(root, name)
                try:
                    stat_result = os.lstat(file_path)
                except FileNotFoundError:
                    # Removed between listing and stat
                    continue
                except OSError as e:
                    self.logger.warning(f"Cannot stat {file_path}: {e}")
                    continue
                total += self.allocated_size(stat_result)

        return total

    def size_of(self, path: Path) -> int:
        """
        Get allocated size of a single file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        return self.allocated_size(os.stat(path))

    def file_length(self, path: Path) -> int:
        """
        Get logical length of a single file in bytes.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        return os.stat(path).st_size

    def existing_file_length(self, path: Path) -> int:
        """Logical length of path, or 0 if it does not exist"""
        try:
            return self.file_length(path)
        except FileNotFoundError:
            return 0

    def log_usage(self, max_bytes: Optional[int] = None) -> None:
        """Log current directory usage (against quota if one is set)"""
        current = self.total_occupied_bytes()

        if not max_bytes:
            self.logger.info(
                f"Data dir usage: {format_size(current)} (no size limit)",
            )
            return

        usage_pct = current / max_bytes * 100
        self.logger.info(
            f"Data dir usage: {format_size(current)} of "
            f"{format_size(max_bytes)} ({usage_pct:.1f}%)",
        )
