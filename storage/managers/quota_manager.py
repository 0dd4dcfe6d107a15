"""
Quota Manager

Keeps the storage directory under its configured maximum size.
Single responsibility: The check → prune → recheck → decide protocol.
"""

import logging
from typing import Optional

from storage.constants import QuotaDecision
from storage.interfaces.storage_interface import QuotaExceededError
from storage.managers.cleanup_manager import CleanupManager, PrunePolicy
from storage.managers.space_manager import SpaceManager


def incoming_delta(incoming_bytes: int, existing_latest_bytes: Optional[int] = None) -> int:
    """
    Net directory growth caused by storing one frame.

    With a latest mirror, the write adds the timestamped frame and
    grows the mirror by (new - old) when the new frame is larger.

    Args:
        incoming_bytes: Size of the frame being stored
        existing_latest_bytes: Current mirror size, or None if no mirror is kept

    Returns:
        Bytes to add to the current usage when predicting

    Example:
        incoming_delta(1500, 1000)  # 2000
        incoming_delta(800, 1000)   # 800
        incoming_delta(800)         # 800
    """
    if existing_latest_bytes is None:
        return incoming_bytes
    return incoming_bytes + max(0, incoming_bytes - existing_latest_bytes)


class QuotaManager:
    """
    Enforces the data directory size limit.

    Protocol (one call per frame, no retry loop):
    1. Unlimited quota -> UNLIMITED, nothing measured
    2. Measure; if current + delta < max -> OK
    3. Prune once, measure again
    4. Still current + delta >= max -> QuotaExceededError (fatal)
    5. Otherwise -> PRUNED_OK

    Usage:
        quota = QuotaManager(space_manager, cleanup_manager, policy)
        quota.enforce_or_fail(max_bytes, incoming_delta(size, latest_size))
    """

    def __init__(
        self,
        space_manager: SpaceManager,
        cleanup_manager: CleanupManager,
        policy: PrunePolicy,
    ):
        """
        Initialize quota manager.

        Args:
            space_manager: Measures directory usage
            cleanup_manager: Prunes when over quota
            policy: Prune policy to apply on violation
        """
        self.logger = logging.getLogger(__name__)
        self.space_manager = space_manager
        self.cleanup_manager = cleanup_manager
        self.policy = policy

    def _predict(self, delta: int) -> tuple[int, int]:
        """Measure the directory now; returns (current, predicted)"""
        current = self.space_manager.total_occupied_bytes()
        return current, current + delta

    def enforce_or_fail(self, max_bytes: int, delta: int) -> QuotaDecision:
        """
        Decide whether a write of delta bytes may proceed.

        Args:
            max_bytes: Quota in bytes (0 = unlimited)
            delta: Net growth the write will cause (see incoming_delta)

        Returns:
            QuotaDecision describing how the write was allowed

        Raises:
            QuotaExceededError: If usage is still predicted at or over
                max_bytes after one prune attempt
        """
        if max_bytes <= 0:
            return QuotaDecision.UNLIMITED

        current, predicted = self._predict(delta)

        if predicted < max_bytes:
            return QuotaDecision.OK

        self.logger.warning(
            f"Data dir would exceed MAX_DATA_SIZE "
            f"(current={current}B + incoming+extra={delta}B >= max={max_bytes}B). "
            f"Attempting prune mode: {self.policy.describe()}",
        )

        removed = self.cleanup_manager.apply(self.policy)

        current, predicted = self._predict(delta)

        if predicted >= max_bytes:
            self.logger.error(
                f"Max data size reached and pruning insufficient "
                f"(predicted={predicted}B >= max={max_bytes}B, "
                f"removed {removed} files). Stopping.",
            )
            raise QuotaExceededError(predicted, max_bytes, current)

        self.logger.info(
            f"Prune freed enough space (removed {removed} files, "
            f"predicted={predicted}B < max={max_bytes}B)",
        )
        return QuotaDecision.PRUNED_OK
