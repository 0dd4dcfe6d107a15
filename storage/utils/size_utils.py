"""
Size Utilities

Parsing and formatting of human-readable byte sizes.
"""

import re

from storage.interfaces.storage_interface import InvalidSizeError

# Base-1024 multipliers; the *IB forms are synonyms of the short suffixes
SIZE_MULTIPLIERS = {
    "K": 1024,
    "KIB": 1024,
    "M": 1024**2,
    "MIB": 1024**2,
    "G": 1024**3,
    "GIB": 1024**3,
    "T": 1024**4,
    "TIB": 1024**4,
}

_SIZE_PATTERN = re.compile(r"^([0-9]+)(K|M|G|T|KIB|MIB|GIB|TIB)$")
_DIGITS_PATTERN = re.compile(r"^[0-9]+$")
_WHITESPACE = re.compile(r"\s+")


def parse_size(text: str) -> int:
    """
    Parse a size string into bytes.

    Args:
        text: "500M", "5G", "10KiB", "1000000", "0" or ""

    Returns:
        Size in bytes (0 means unlimited)

    Raises:
        InvalidSizeError: If the string is not a recognised size

    Example:
        parse_size("500M")  # 524288000
        parse_size("5Gi")   # raises InvalidSizeError
    """
    if text is None:
        return 0

    normalized = _WHITESPACE.sub("", str(text)).upper()

    if normalized in ("", "0"):
        return 0

    if _DIGITS_PATTERN.match(normalized):
        return int(normalized)

    match = _SIZE_PATTERN.match(normalized)
    if not match:
        raise InvalidSizeError(
            f"Size must be bytes or use suffix K/M/G/T (e.g., 500M, 5G). Got: {text!r}",
        )

    number, suffix = match.groups()
    return int(number) * SIZE_MULTIPLIERS[suffix]


def format_size(size_bytes: int) -> str:
    """
    Format byte size as human-readable string.

    Example:
        print(format_size(1_500_000_000))  # "1.40 GB"
    """
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"
