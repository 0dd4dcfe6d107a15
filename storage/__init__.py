"""
Storage Module

Frame persistence and disk quota enforcement for the capture daemon.

Architecture mirrors the upload and capture modules:
- interfaces/: Abstract base classes and errors (contracts)
- controllers/: High-level coordination (persist a frame)
- managers/: Specialized domain logic (accounting, pruning, quota)
- models/: Data structures
- utils/: Shared utilities (size parsing, paths)
"""

from storage.constants import PruneMode, QuotaDecision
from storage.controllers.storage_controller import StorageController
from storage.interfaces.storage_interface import (
    InvalidSizeError,
    QuotaExceededError,
    StorageError,
    StorageInterface,
)
from storage.managers.cleanup_manager import CleanupManager, PrunePolicy
from storage.managers.quota_manager import QuotaManager, incoming_delta
from storage.managers.space_manager import SpaceManager
from storage.models.capture_file import CapturedFrame, CaptureFile
from storage.utils.size_utils import format_size, parse_size

# Public API - what users import
__all__ = [
    "CaptureFile",
    "CapturedFrame",
    "CleanupManager",
    "InvalidSizeError",
    "PruneMode",
    "PrunePolicy",
    "QuotaDecision",
    "QuotaExceededError",
    "QuotaManager",
    "SpaceManager",
    # Main controller (primary API)
    "StorageController",
    "StorageError",
    "StorageInterface",
    "format_size",
    "incoming_delta",
    "parse_size",
]
