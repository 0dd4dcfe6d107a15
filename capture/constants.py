"""
Capture Constants

fswebcam-specific constants and helpers.
Camera defaults (device, resolution, quality) live in config/settings.py.
"""

from pathlib import Path
from typing import List

from config.settings import CAPTURE_BINARY

# Smallest plausible JPEG (SOI + EOI markers); anything shorter is a failed write
MIN_JPEG_SIZE_BYTES = 4

JPEG_SOI = b"\xff\xd8"
JPEG_EOI = b"\xff\xd9"


def get_fswebcam_command(
    input_device: str,
    output_file: str,
    resolution: str,
    jpeg_quality: int,
    binary: str = CAPTURE_BINARY,
) -> List[str]:
    """
    Build the fswebcam command line for one frame.

    Example:
        get_fswebcam_command("/dev/video0", "/tmp/x.jpg", "1280x720", 90)
        # ["fswebcam", "--no-banner", "-d", "/dev/video0", "-r", "1280x720",
        #  "--jpeg", "90", "/tmp/x.jpg"]
    """
    return [
        binary,
        "--no-banner",
        "-d", input_device,
        "-r", resolution,
        "--jpeg", str(jpeg_quality),
        output_file,
    ]


def validate_camera_device(device_path: str) -> bool:
    """
    Check if camera device exists.

    Example:
        if validate_camera_device("/dev/video0"):
            print("Camera found!")
    """
    return Path(device_path).exists()
