"""
Capture File Models

Data classes representing captured frames and stored capture files.
"""

import time
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CapturedFrame:
    """
    A freshly captured JPEG waiting on the temporary filesystem.

    Lifecycle: created by the capture implementation, consumed exactly once
    by the uploader or the persister, then deleted (upload) or moved into
    the storage directory (persist).
    """

    path: Path  # /tmp/capture_1700000000.jpg
    epoch: int  # Capture time, also the frame identifier

    @property
    def filename(self) -> str:
        """Just the filename: capture_1700000000.jpg"""
        return self.path.name

    @property
    def exists(self) -> bool:
        """Check if frame is still on disk"""
        return self.path.exists()

    @property
    def size_bytes(self) -> int:
        """Logical file length in bytes"""
        return self.path.stat().st_size


@dataclass(frozen=True)
class CaptureFile:
    """
    A capture file already stored in the data directory.

    Snapshot taken when the directory was listed; used by the prune engine
    to rank and select files.
    """

    path: Path
    mtime: float  # Modification time (seconds since epoch)
    size_bytes: int  # Allocated size on disk

    @property
    def filename(self) -> str:
        return self.path.name

    def age_seconds(self, now: float = None) -> float:
        """Seconds elapsed since last modification"""
        if now is None:
            now = time.time()
        return now - self.mtime

    @property
    def age_days(self) -> float:
        """Age in days (fractional)"""
        return self.age_seconds() / 86400

    def __repr__(self) -> str:
        """Human-readable representation"""
        return (
            f"CaptureFile(filename='{self.filename}', "
            f"mtime={self.mtime:.0f}, size={self.size_bytes})"
        )
