"""
Path Utilities

Helper functions for directory operations and capture file naming.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from config.settings import CAPTURE_FILENAME_PATTERN
from storage.constants import (
    CAPTURE_FILENAME_EXTENSION,
    CAPTURE_FILENAME_PREFIX,
)

logger = logging.getLogger(__name__)


def ensure_directory(path: Path, create: bool = True) -> bool:
    """
    Ensure directory exists.

    Args:
        path: Directory path
        create: If True, create if doesn't exist

    Returns:
        True if directory exists or was created

    Example:
        ensure_directory(Path("/data"))
    """
    try:
        if path.exists():
            if not path.is_dir():
                logger.error(f"Path exists but is not a directory: {path}")
                return False
            return True

        if create:
            path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {path}")
            return True

        return False

    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        return False


def capture_filename(epoch: int) -> str:
    """
    Build the on-disk name of a frame captured at epoch.

    Example:
        capture_filename(1700000000)  # "capture_1700000000.jpg"
    """
    return CAPTURE_FILENAME_PATTERN.format(epoch=int(epoch))


def is_capture_filename(filename: str) -> bool:
    """Check if filename follows the capture_*.jpg convention"""
    return (
        filename.startswith(CAPTURE_FILENAME_PREFIX)
        and filename.endswith(CAPTURE_FILENAME_EXTENSION)
        and len(filename) > len(CAPTURE_FILENAME_PREFIX) + len(CAPTURE_FILENAME_EXTENSION)
    )


def atomic_copy(source: Path, destination: Path) -> None:
    """
    Copy source over destination without exposing a partial file.

    Writes to a temporary file in the destination directory, then
    renames it into place with os.replace.
    The temporary file briefly holds a second full copy of source.

    Raises:
        OSError: If the copy or rename fails (temp file is removed)
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.",
        suffix=".tmp",
        dir=destination.parent,
    )
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        shutil.copyfile(source, tmp_path)
        # mkstemp creates 0600; keep the source's permissions for readers
        shutil.copymode(source, tmp_path)
        os.replace(tmp_path, destination)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
