"""
Storage Controller

High-level persistence coordination for captured frames.
Provides a simple API to the capture service: hand it a frame, get back
its final path, or a QuotaExceededError when the quota cannot be held.
"""

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from storage.constants import LATEST_FILENAME, QuotaDecision
from storage.interfaces.storage_interface import StorageError, StorageInterface
from storage.managers.cleanup_manager import CleanupManager, PrunePolicy
from storage.managers.quota_manager import QuotaManager, incoming_delta
from storage.managers.space_manager import SpaceManager
from storage.models.capture_file import CapturedFrame
from storage.utils.path_utils import atomic_copy, ensure_directory
from storage.utils.size_utils import format_size

if TYPE_CHECKING:
    from config.daemon_config import DaemonConfig


class StorageController(StorageInterface):
    """
    Stores captured frames in the data directory.

    This class:
    - Predicts the net growth of each write (frame + latest mirror)
    - Enforces the quota before anything is written
    - Moves the frame into place under its timestamped name
    - Refreshes the latest mirror with an atomic replace

    Usage:
        storage = StorageController(Path("/data"), max_bytes=5 * 1024**3,
                                    policy=PrunePolicy.keep_last(1000))
        storage.initialize()
        path = storage.persist(frame)  # may raise QuotaExceededError
    """

    def __init__(
        self,
        data_dir: Path,
        max_bytes: int = 0,
        policy: Optional[PrunePolicy] = None,
        write_latest: bool = True,
        space_manager: Optional[SpaceManager] = None,
        cleanup_manager: Optional[CleanupManager] = None,
    ):
        """
        Initialize storage controller.

        Args:
            data_dir: Storage directory
            max_bytes: Directory quota in bytes (0 = unlimited)
            policy: Prune policy used on quota violation (None = no pruning)
            write_latest: Maintain the latest mirror file
            space_manager: Custom accountant (testing)
            cleanup_manager: Custom prune engine (testing)
        """
        self.logger = logging.getLogger(__name__)

        self.data_dir = Path(data_dir)
        self.max_bytes = max_bytes
        self.policy = policy or PrunePolicy.none()
        self.write_latest = write_latest

        self.space = space_manager or SpaceManager(self.data_dir)
        self.cleanup = cleanup_manager or CleanupManager(self.data_dir, self.space)
        self.quota = QuotaManager(self.space, self.cleanup, self.policy)

        self.logger.info(
            f"Storage controller initialized (dir: {self.data_dir}, "
            f"max: {format_size(max_bytes) if max_bytes else 'unlimited'}, "
            f"prune: {self.policy.describe()}, latest: {write_latest})",
        )

    @classmethod
    def from_config(cls, config: "DaemonConfig") -> "StorageController":
        """Build a controller from the validated daemon configuration"""
        policy = PrunePolicy.from_mode(
            config.prune_mode,
            keep_last_n=config.keep_last_n,
            max_age_days=config.max_age_days,
        )
        return cls(
            data_dir=config.data_dir,
            max_bytes=config.max_bytes,
            policy=policy,
            write_latest=config.write_latest,
        )

    @property
    def latest_path(self) -> Path:
        """Path of the rolling latest mirror"""
        return self.data_dir / LATEST_FILENAME

    def initialize(self) -> None:
        """
        Create the data directory if needed.

        Raises:
            StorageError: If the directory cannot be created
        """
        if not ensure_directory(self.data_dir):
            raise StorageError(f"Cannot create data directory: {self.data_dir}")

        self.space.log_usage(self.max_bytes)

    def predict_delta(self, frame: CapturedFrame) -> int:
        """
        Net growth storing this frame will cause.

        Raises:
            FileNotFoundError: If the frame vanished from the temp dir
        """
        incoming = self.space.file_length(frame.path)

        if not self.write_latest:
            return incoming_delta(incoming)

        existing_latest = self.space.existing_file_length(self.latest_path)
        return incoming_delta(incoming, existing_latest)

    def check_quota(self, frame: CapturedFrame) -> QuotaDecision:
        """
        Run the quota protocol for a frame without writing it.

        Raises:
            QuotaExceededError: If pruning cannot make room
        """
        try:
            delta = self.predict_delta(frame)
        except FileNotFoundError as e:
            raise StorageError(f"Captured frame missing: {frame.path}") from e

        return self.quota.enforce_or_fail(self.max_bytes, delta)

    def persist(self, frame: CapturedFrame) -> Path:
        """
        Store a frame permanently.

        Args:
            frame: Frame on the temporary filesystem

        Returns:
            Final path inside the data directory

        Raises:
            QuotaExceededError: If the quota cannot be held (fatal)
            StorageError: If moving the frame fails
        """
        decision = self.check_quota(frame)
        self.logger.debug(f"Quota check for {frame.filename}: {decision.value}")

        return self.write(frame)

    def write(self, frame: CapturedFrame) -> Path:
        """
        Move a frame into the data directory and refresh the mirror.

        Does not check the quota; callers run check_quota() first.

        The mirror refresh stages a full copy of the frame as a hidden
        .latest.jpg.*.tmp file in the data directory before renaming it
        over latest.jpg. For that instant usage is one frame above the
        predicted delta, so MAX_DATA_SIZE needs one frame of headroom on
        a filesystem that is exactly that size.

        Raises:
            StorageError: If moving the frame or updating the mirror fails
        """
        destination = self.data_dir / frame.filename
        try:
            shutil.move(str(frame.path), str(destination))
        except OSError as e:
            raise StorageError(f"Failed to move {frame.path} to {destination}: {e}") from e

        self.logger.info(f"Saved to disk: {destination}")

        if self.write_latest:
            self._update_latest(destination)

        return destination

    def _update_latest(self, source: Path) -> None:
        """Replace the latest mirror with a copy of source"""
        try:
            atomic_copy(source, self.latest_path)
        except OSError as e:
            raise StorageError(f"Failed to update {self.latest_path}: {e}") from e

        self.logger.info(f"Updated latest image: {self.latest_path}")
