"""
Quota Manager Tests

The check → prune → recheck protocol with scripted measurements.

To run:
    pytest tests/storage/managers/test_quota_manager.py -v
"""

import pytest

from storage.constants import QuotaDecision
from storage.interfaces.storage_interface import QuotaExceededError
from storage.managers.cleanup_manager import PrunePolicy
from storage.managers.quota_manager import QuotaManager, incoming_delta


class FakeSpaceManager:
    """Returns scripted directory sizes; the last value repeats"""

    def __init__(self, *readings):
        self.readings = list(readings)
        self.calls = 0

    def total_occupied_bytes(self):
        self.calls += 1
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


class FakeCleanupManager:
    """Counts prune attempts"""

    def __init__(self, removes=0):
        self.removes = removes
        self.applied = []

    def apply(self, policy):
        self.applied.append(policy)
        return self.removes


def _quota(space, cleanup, policy=None):
    return QuotaManager(space, cleanup, policy or PrunePolicy.keep_last(10))


# =============================================================================
# DELTA TESTS
# =============================================================================

@pytest.mark.unit
class TestIncomingDelta:
    """Test predicted growth arithmetic"""

    def test_larger_frame_grows_mirror(self):
        assert incoming_delta(1500, 1000) == 2000

    def test_smaller_frame_does_not_shrink_prediction(self):
        assert incoming_delta(800, 1000) == 800

    def test_first_frame_with_mirror(self):
        assert incoming_delta(1000, 0) == 2000

    def test_without_mirror(self):
        assert incoming_delta(800) == 800


# =============================================================================
# ENFORCEMENT TESTS
# =============================================================================

@pytest.mark.unit
class TestEnforceOrFail:
    """Test the three quota scenarios and edge cases"""

    def test_unlimited_never_measures(self):
        space = FakeSpaceManager(10**12)
        cleanup = FakeCleanupManager()

        decision = _quota(space, cleanup).enforce_or_fail(0, 10**9)

        assert decision == QuotaDecision.UNLIMITED
        assert space.calls == 0
        assert cleanup.applied == []

    def test_under_quota(self):
        # 1000 + 2000 < 10000
        space = FakeSpaceManager(1000)
        cleanup = FakeCleanupManager()

        decision = _quota(space, cleanup).enforce_or_fail(10000, 2000)

        assert decision == QuotaDecision.OK
        assert cleanup.applied == []

    def test_over_quota_prune_frees_enough(self):
        # 9000 + 2000 >= 10000, then 4000 + 2000 < 10000
        space = FakeSpaceManager(9000, 4000)
        cleanup = FakeCleanupManager(removes=5)
        policy = PrunePolicy.keep_last(3)

        decision = _quota(space, cleanup, policy).enforce_or_fail(10000, 2000)

        assert decision == QuotaDecision.PRUNED_OK
        assert cleanup.applied == [policy]
        assert space.calls == 2

    def test_over_quota_prune_insufficient(self):
        space = FakeSpaceManager(9500, 9000)
        cleanup = FakeCleanupManager(removes=1)

        with pytest.raises(QuotaExceededError) as exc_info:
            _quota(space, cleanup).enforce_or_fail(10000, 2000)

        assert len(cleanup.applied) == 1
        assert exc_info.value.predicted_bytes == 11000
        assert exc_info.value.max_bytes == 10000
        assert exc_info.value.current_bytes == 9000

    def test_exactly_at_quota_triggers_prune(self):
        space = FakeSpaceManager(8000, 8000)
        cleanup = FakeCleanupManager()

        with pytest.raises(QuotaExceededError):
            _quota(space, cleanup).enforce_or_fail(10000, 2000)

        assert len(cleanup.applied) == 1

    def test_unknown_policy_is_still_fatal(self):
        space = FakeSpaceManager(9999)
        cleanup = FakeCleanupManager()
        policy = PrunePolicy.from_mode("bogus")

        with pytest.raises(QuotaExceededError):
            _quota(space, cleanup, policy).enforce_or_fail(10000, 2000)

    def test_ok_check_is_idempotent(self):
        space = FakeSpaceManager(1000)
        cleanup = FakeCleanupManager()
        quota = _quota(space, cleanup)

        first = quota.enforce_or_fail(10000, 2000)
        second = quota.enforce_or_fail(10000, 2000)

        assert first == second == QuotaDecision.OK
        assert cleanup.applied == []

    def test_warning_logged_before_prune(self, caplog):
        caplog.set_level("WARNING")
        space = FakeSpaceManager(9000, 1000)

        _quota(space, FakeCleanupManager()).enforce_or_fail(10000, 2000)

        assert "would exceed MAX_DATA_SIZE" in caplog.text
