"""
Daemon Configuration

Resolves the runtime configuration once at startup:
defaults (config/settings.py) <- optional YAML file <- environment.

The result is an immutable DaemonConfig passed to every component.
Validation failures raise ConfigError; the service exits with code 1.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from config import settings
from storage.interfaces.storage_interface import InvalidSizeError
from storage.utils.size_utils import parse_size

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "1", "yes", "y", "on")
RESOLUTION_PATTERN = re.compile(r"^[0-9]+x[0-9]+$")


class ConfigError(ValueError):
    """
    Invalid startup configuration.

    Examples:
    - INTERVAL_SECONDS is not a positive integer
    - MAX_DATA_SIZE cannot be parsed
    - PUSH_TO_API is set without API_URL
    - Camera device does not exist
    """


@dataclass(frozen=True)
class DaemonConfig:
    """
    Validated configuration for the capture daemon.

    Attributes mirror the environment keys (INTERVAL_SECONDS ->
    interval_seconds). max_bytes is MAX_DATA_SIZE already parsed.
    """

    interval_seconds: int = settings.DEFAULT_INTERVAL_SECONDS
    push_to_api: bool = settings.DEFAULT_PUSH_TO_API
    data_dir: Path = settings.DEFAULT_DATA_DIR
    api_url: str = settings.DEFAULT_API_URL
    api_token: str = ""
    camera_device: str = settings.DEFAULT_CAMERA_DEVICE
    resolution: str = settings.DEFAULT_RESOLUTION
    jpeg_quality: int = settings.DEFAULT_JPEG_QUALITY
    max_data_size: str = settings.DEFAULT_MAX_DATA_SIZE
    max_bytes: int = 0
    prune_mode: str = settings.DEFAULT_PRUNE_MODE
    keep_last_n: int = settings.DEFAULT_KEEP_LAST_N
    max_age_days: int = settings.DEFAULT_MAX_AGE_DAYS
    serve_latest: bool = settings.DEFAULT_SERVE_LATEST
    server_port: int = settings.DEFAULT_SERVER_PORT
    write_latest: bool = settings.DEFAULT_WRITE_LATEST
    tmp_dir: Path = settings.DEFAULT_TMP_DIR
    upload_timeout: int = settings.UPLOAD_TIMEOUT_SECONDS
    capture_timeout: int = settings.CAPTURE_TIMEOUT_SECONDS
    log_level: str = settings.DEFAULT_LOG_LEVEL

    @property
    def latest_path(self) -> Path:
        """Rolling mirror of the newest persisted frame"""
        return self.data_dir / settings.LATEST_FILENAME

    def summary(self) -> str:
        """One-line description for the startup log (no secrets)"""
        return (
            f"INTERVAL_SECONDS={self.interval_seconds} | "
            f"PUSH_TO_API={self.push_to_api} | "
            f"MAX_DATA_SIZE={self.max_data_size} ({self.max_bytes}B) | "
            f"PRUNE_MODE={self.prune_mode} | "
            f"SERVE_LATEST={self.serve_latest} PORT={self.server_port}"
        )


def is_true(value: Any) -> bool:
    """
    Interpret a config value as a boolean.

    Example:
        is_true("Yes")  # True
        is_true("off")  # False
    """
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _defaults() -> Dict[str, Any]:
    """Default raw values keyed by environment name"""
    return {
        "INTERVAL_SECONDS": str(settings.DEFAULT_INTERVAL_SECONDS),
        "PUSH_TO_API": str(settings.DEFAULT_PUSH_TO_API).lower(),
        "DATA_DIR": str(settings.DEFAULT_DATA_DIR),
        "API_URL": settings.DEFAULT_API_URL,
        "API_TOKEN": "",
        "CAMERA_DEVICE": settings.DEFAULT_CAMERA_DEVICE,
        "RESOLUTION": settings.DEFAULT_RESOLUTION,
        "JPEG_QUALITY": str(settings.DEFAULT_JPEG_QUALITY),
        "MAX_DATA_SIZE": settings.DEFAULT_MAX_DATA_SIZE,
        "PRUNE_MODE": settings.DEFAULT_PRUNE_MODE,
        "KEEP_LAST_N": str(settings.DEFAULT_KEEP_LAST_N),
        "MAX_AGE_DAYS": str(settings.DEFAULT_MAX_AGE_DAYS),
        "SERVE_LATEST": str(settings.DEFAULT_SERVE_LATEST).lower(),
        "SERVER_PORT": str(settings.DEFAULT_SERVER_PORT),
        "WRITE_LATEST": str(settings.DEFAULT_WRITE_LATEST).lower(),
        "TMP_DIR": str(settings.DEFAULT_TMP_DIR),
        "UPLOAD_TIMEOUT": str(settings.UPLOAD_TIMEOUT_SECONDS),
        "CAPTURE_TIMEOUT": str(settings.CAPTURE_TIMEOUT_SECONDS),
        "LOG_LEVEL": settings.DEFAULT_LOG_LEVEL,
    }


def load_yaml_file(config_path: Path) -> Dict[str, Any]:
    """
    Read a YAML mapping of configuration overrides.

    Keys are matched case-insensitively against the environment names
    (interval_seconds and INTERVAL_SECONDS are the same key).

    Raises:
        ConfigError: If the file is unreadable or not a mapping
    """
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    return {str(key).upper(): value for key, value in data.items()}


def _positive_int(raw: Any, name: str) -> int:
    value = _strict_int(raw, name)
    if value < 1:
        raise ConfigError(f"{name} must be an integer >= 1 (got: {raw})")
    return value


def _strict_int(raw: Any, name: str) -> int:
    text = str(raw).strip()
    if not text.isdigit():
        raise ConfigError(f"{name} must be an integer >= 0 (got: {raw})")
    return int(text)


def _lenient_int(raw: Any, name: str) -> int:
    """Prune parameters degrade to 0 (a prune warning), never fail startup"""
    text = str(raw).strip()
    if text.isdigit():
        return int(text)
    logger.warning(f"{name} is not an integer (got: {raw}); treating as 0")
    return 0


def parse_log_level(raw: Any, name: str = "LOG_LEVEL") -> str:
    """Normalize a logging level name; logging.setLevel rejects anything else"""
    level = str(raw).strip().upper()
    if level not in settings.LOG_LEVELS:
        raise ConfigError(
            f"{name} must be one of {', '.join(settings.LOG_LEVELS)} (got: {raw})",
        )
    return level


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path] = None,
    check_device: bool = True,
) -> DaemonConfig:
    """
    Build and validate the daemon configuration.

    Args:
        environ: Environment mapping (None = os.environ)
        config_path: Optional YAML file (None = CONFIG_FILE from environ)
        check_device: Verify the camera device exists (disable in tests)

    Returns:
        Immutable DaemonConfig

    Raises:
        ConfigError: If any startup validation fails
    """
    if environ is None:
        environ = os.environ

    raw = _defaults()

    if config_path is None and environ.get("CONFIG_FILE"):
        config_path = Path(environ["CONFIG_FILE"])

    if config_path is not None:
        raw.update(load_yaml_file(Path(config_path)))
        logger.info(f"Loaded config from {config_path}")

    for key in raw:
        if key in environ:
            raw[key] = environ[key]

    interval = _positive_int(raw["INTERVAL_SECONDS"], "INTERVAL_SECONDS")

    max_data_size = "" if raw["MAX_DATA_SIZE"] is None else str(raw["MAX_DATA_SIZE"])
    try:
        max_bytes = parse_size(max_data_size)
    except InvalidSizeError as e:
        raise ConfigError(
            f"MAX_DATA_SIZE must be bytes or use suffix K/M/G/T "
            f"(e.g., 500M, 5G). Got: {max_data_size}",
        ) from e

    push_to_api = is_true(raw["PUSH_TO_API"])
    api_url = str(raw["API_URL"] or "").strip()
    if push_to_api and not api_url:
        raise ConfigError("PUSH_TO_API=true requires API_URL to be set")

    camera_device = str(raw["CAMERA_DEVICE"])
    if check_device and not Path(camera_device).exists():
        raise ConfigError(
            f"Camera device not found at {camera_device} "
            f"(hint: run container with --device={camera_device}:{camera_device})",
        )

    resolution = str(raw["RESOLUTION"]).strip()
    if not RESOLUTION_PATTERN.match(resolution):
        raise ConfigError(f"RESOLUTION must look like WIDTHxHEIGHT (got: {resolution})")

    return DaemonConfig(
        interval_seconds=interval,
        push_to_api=push_to_api,
        data_dir=Path(str(raw["DATA_DIR"])),
        api_url=api_url,
        api_token=str(raw["API_TOKEN"] or ""),
        camera_device=camera_device,
        resolution=resolution,
        jpeg_quality=_strict_int(raw["JPEG_QUALITY"], "JPEG_QUALITY"),
        max_data_size=max_data_size,
        max_bytes=max_bytes,
        prune_mode=str(raw["PRUNE_MODE"] or ""),
        keep_last_n=_lenient_int(raw["KEEP_LAST_N"], "KEEP_LAST_N"),
        max_age_days=_lenient_int(raw["MAX_AGE_DAYS"], "MAX_AGE_DAYS"),
        serve_latest=is_true(raw["SERVE_LATEST"]),
        server_port=_positive_int(raw["SERVER_PORT"], "SERVER_PORT"),
        write_latest=is_true(raw["WRITE_LATEST"]),
        tmp_dir=Path(str(raw["TMP_DIR"])),
        upload_timeout=_positive_int(raw["UPLOAD_TIMEOUT"], "UPLOAD_TIMEOUT"),
        capture_timeout=_positive_int(raw["CAPTURE_TIMEOUT"], "CAPTURE_TIMEOUT"),
        log_level=parse_log_level(raw["LOG_LEVEL"]),
    )
