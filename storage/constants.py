"""
Storage Module Enums

Type definitions for the storage module.
Configuration values live in config/settings.py
following the "ALL config in config/settings.py" principle.
"""

from enum import Enum

from config.settings import (
    CAPTURE_FILENAME_EXTENSION,
    CAPTURE_FILENAME_PREFIX,
    LATEST_FILENAME,
    SECONDS_PER_DAY,
)

# Re-exported so storage code only imports from storage.constants
__all__ = [
    "CAPTURE_FILENAME_EXTENSION",
    "CAPTURE_FILENAME_PREFIX",
    "LATEST_FILENAME",
    "SECONDS_PER_DAY",
    "PruneMode",
    "QuotaDecision",
]

# =============================================================================
# ENUMS
# =============================================================================


class PruneMode(Enum):
    """Pruning policy modes (value = PRUNE_MODE setting)"""

    NONE = "none"  # Never delete anything
    KEEP_LAST = "keep_last"  # Keep the newest N captures
    MAX_AGE = "max_age"  # Delete captures older than D days
    UNKNOWN = "unknown"  # Unrecognized mode name (warns, never prunes)


class QuotaDecision(Enum):
    """Outcome of a successful quota check"""

    UNLIMITED = "unlimited"  # No quota configured, nothing measured
    OK = "ok"  # Under quota on first measurement
    PRUNED_OK = "pruned_ok"  # Over quota, pruning freed enough space
