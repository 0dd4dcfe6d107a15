"""
Cleanup Manager

Deletes stored captures according to the configured prune policy.
Single responsibility: Pruning operations only.
"""

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from storage.constants import SECONDS_PER_DAY, PruneMode
from storage.managers.space_manager import SpaceManager
from storage.models.capture_file import CaptureFile
from storage.utils.path_utils import is_capture_filename
from storage.utils.size_utils import format_size


@dataclass(frozen=True)
class PrunePolicy:
    """
    Which captures may be deleted to reclaim space.

    Build with from_mode() from the PRUNE_MODE setting; invalid
    parameters are kept as-is and reported by validate() when applied.
    """

    mode: PruneMode = PruneMode.NONE
    keep_last_n: int = 0
    max_age_days: int = 0
    mode_name: str = PruneMode.NONE.value  # As configured, for warnings

    @classmethod
    def none(cls) -> "PrunePolicy":
        return cls()

    @classmethod
    def keep_last(cls, n: int) -> "PrunePolicy":
        return cls(
            mode=PruneMode.KEEP_LAST,
            keep_last_n=n,
            mode_name=PruneMode.KEEP_LAST.value,
        )

    @classmethod
    def max_age(cls, days: int) -> "PrunePolicy":
        return cls(
            mode=PruneMode.MAX_AGE,
            max_age_days=days,
            mode_name=PruneMode.MAX_AGE.value,
        )

    @classmethod
    def from_mode(
        cls,
        mode_name: str,
        keep_last_n: int = 0,
        max_age_days: int = 0,
    ) -> "PrunePolicy":
        """
        Select a policy by mode name (case-insensitive).

        An unrecognized name yields a PruneMode.UNKNOWN policy that never
        deletes anything; it does not raise.

        Example:
            policy = PrunePolicy.from_mode("keep_last", keep_last_n=100)
        """
        raw = (mode_name or "").strip()
        try:
            mode = PruneMode(raw.lower())
        except ValueError:
            mode = PruneMode.UNKNOWN

        if mode == PruneMode.UNKNOWN:
            return cls(mode=PruneMode.UNKNOWN, mode_name=raw)

        return cls(
            mode=mode,
            keep_last_n=keep_last_n,
            max_age_days=max_age_days,
            mode_name=mode.value,
        )

    def validate(self) -> Optional[str]:
        """
        Check policy parameters.

        Returns:
            Warning message if the policy cannot prune, None if usable
        """
        if self.mode == PruneMode.UNKNOWN:
            return (
                f"Unknown PRUNE_MODE='{self.mode_name}' "
                f"(expected none|keep_last|max_age). No pruning done."
            )
        if self.mode == PruneMode.KEEP_LAST and self.keep_last_n < 1:
            return (
                f"PRUNE keep_last skipped: KEEP_LAST_N must be >= 1 "
                f"(got: {self.keep_last_n})"
            )
        if self.mode == PruneMode.MAX_AGE and self.max_age_days < 1:
            return (
                f"PRUNE max_age skipped: MAX_AGE_DAYS must be >= 1 "
                f"(got: {self.max_age_days})"
            )
        return None

    def describe(self) -> str:
        """Short label for log lines"""
        if self.mode == PruneMode.KEEP_LAST:
            return f"keep_last(n={self.keep_last_n})"
        if self.mode == PruneMode.MAX_AGE:
            return f"max_age(days={self.max_age_days})"
        return self.mode_name or PruneMode.NONE.value


class CleanupManager:
    """
    Applies prune policies to the storage directory.

    Responsibilities:
    - List capture files (non-recursive, capture_*.jpg only)
    - Plan which files a policy removes
    - Delete them, logging and skipping individual failures

    The latest mirror never matches the capture naming convention, so it
    is never pruned.
    """

    def __init__(
        self,
        storage_dir: Path,
        space_manager: Optional[SpaceManager] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cleanup manager.

        Args:
            storage_dir: Directory holding capture files
            space_manager: Used for per-file allocated sizes
            clock: Time source (seconds since epoch), injectable for tests
        """
        self.logger = logging.getLogger(__name__)
        self.storage_dir = Path(storage_dir)
        self.space_manager = space_manager or SpaceManager(self.storage_dir)
        self.clock = clock

        self.logger.info("Cleanup manager initialized")

    def list_capture_files(self) -> List[CaptureFile]:
        """
        List capture files in the storage directory.

        Returns:
            CaptureFile snapshots (unordered); empty if directory is missing
        """
        if not self.storage_dir.is_dir():
            return []

        captures = []
        with os.scandir(self.storage_dir) as entries:
            for entry in entries:
                if not is_capture_filename(entry.name):
                    continue
                try:
                    if not entry.is_file(follow_symlinks=False):
                        continue
                    stat_result = entry.stat(follow_symlinks=False)
                except FileNotFoundError:
                    continue

                captures.append(
                    CaptureFile(
                        path=Path(entry.path),
                        mtime=stat_result.st_mtime,
                        size_bytes=SpaceManager.allocated_size(stat_result),
                    ),
                )

        return captures

    @staticmethod
    def sort_newest_first(captures: List[CaptureFile]) -> List[CaptureFile]:
        """Order by mtime descending, ties broken by filename descending"""
        return sorted(captures, key=lambda c: (c.mtime, c.filename), reverse=True)

    def plan(self, policy: PrunePolicy) -> List[CaptureFile]:
        """
        Get captures a policy would delete, without deleting.

        Args:
            policy: Prune policy to evaluate

        Returns:
            Files to remove (oldest first); empty for none/invalid policies
        """
        if policy.mode == PruneMode.NONE or policy.validate() is not None:
            return []

        captures = self.list_capture_files()

        if policy.mode == PruneMode.KEEP_LAST:
            ranked = self.sort_newest_first(captures)
            to_remove = ranked[policy.keep_last_n:]
        else:
            now = self.clock()
            max_age_seconds = policy.max_age_days * SECONDS_PER_DAY
            to_remove = [c for c in captures if c.age_seconds(now) > max_age_seconds]

        to_remove.sort(key=lambda c: (c.mtime, c.filename))
        return to_remove

    def apply(self, policy: PrunePolicy) -> int:
        """
        Prune the storage directory.

        Args:
            policy: Prune policy to apply

        Returns:
            Number of files actually removed

        Never raises for policy problems: invalid or unknown policies log a
        warning and remove nothing.
        """
        if policy.mode == PruneMode.NONE:
            self.logger.debug("PRUNE none: nothing to do")
            return 0

        warning = policy.validate()
        if warning:
            self.logger.warning(warning)
            return 0

        to_remove = self.plan(policy)

        if policy.mode == PruneMode.KEEP_LAST:
            total = len(self.list_capture_files())
            if not to_remove:
                self.logger.info(
                    f"PRUNE keep_last: {total} files <= {policy.keep_last_n}, "
                    f"nothing to delete",
                )
                return 0
            self.logger.info(
                f"PRUNE keep_last: keeping newest {policy.keep_last_n} of "
                f"{total} files, deleting {len(to_remove)} older files",
            )
        else:
            self.logger.info(
                f"PRUNE max_age: deleting {len(to_remove)} capture files "
                f"older than {policy.max_age_days} days",
            )

        return self._delete_files(to_remove)

    def _delete_files(self, captures: List[CaptureFile]) -> int:
        """Delete captures one by one; failures are logged and skipped"""
        deleted = 0
        errors = 0
        freed = 0

        for capture in captures:
            try:
                capture.path.unlink()
            except FileNotFoundError:
                self.logger.debug(f"Already gone: {capture.filename}")
                continue
            except OSError as e:
                errors += 1
                self.logger.error(f"Failed to delete {capture.filename}: {e}")
                continue

            deleted += 1
            freed += capture.size_bytes
            self.logger.debug(f"Deleted: {capture.filename}")

        self.logger.info(
            f"Prune complete: deleted {deleted}/{len(captures)} files "
            f"({format_size(freed)}), {errors} errors",
        )
        return deleted
