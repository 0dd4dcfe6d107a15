"""
Central Configuration File

ALL default configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (API tokens) should be in .env or the environment, NOT here
- Runtime values are resolved once at startup by config.daemon_config
- Keep values generic and domain-agnostic
"""

from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# CAPTURE LOOP CONFIGURATION
# =============================================================================

DEFAULT_INTERVAL_SECONDS = 60  # One frame per minute
DEFAULT_PUSH_TO_API = False  # False = persist to DATA_DIR

# =============================================================================
# CAMERA CONFIGURATION
# =============================================================================

DEFAULT_CAMERA_DEVICE = "/dev/video0"
DEFAULT_RESOLUTION = "1280x720"
DEFAULT_JPEG_QUALITY = 90  # fswebcam --jpeg (0-95)
CAPTURE_TIMEOUT_SECONDS = 30  # Kill a hung capture utility after this long
CAPTURE_BINARY = "fswebcam"

# Temporary location for freshly captured frames
# /tmp is intentional - frames live here until dispatched
DEFAULT_TMP_DIR = Path("/tmp")  # noqa: S108

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

DEFAULT_DATA_DIR = Path("/data")

# Frame File Naming
CAPTURE_FILENAME_PREFIX = "capture_"
CAPTURE_FILENAME_EXTENSION = ".jpg"
CAPTURE_FILENAME_PATTERN = (
    f"{CAPTURE_FILENAME_PREFIX}{{epoch}}{CAPTURE_FILENAME_EXTENSION}"
)

# Rolling mirror of the newest persisted frame
LATEST_FILENAME = "latest.jpg"
DEFAULT_WRITE_LATEST = True

# Directory quota ("0" = unlimited)
DEFAULT_MAX_DATA_SIZE = "0"

# Pruning
DEFAULT_PRUNE_MODE = "none"  # none | keep_last | max_age
DEFAULT_KEEP_LAST_N = 0
DEFAULT_MAX_AGE_DAYS = 0
SECONDS_PER_DAY = 86400

# =============================================================================
# UPLOAD CONFIGURATION
# =============================================================================

DEFAULT_API_URL = ""
UPLOAD_TIMEOUT_SECONDS = 30
UPLOAD_CONTENT_TYPE = "image/jpeg"

# =============================================================================
# LATEST FRAME SERVER
# =============================================================================

DEFAULT_SERVE_LATEST = True
DEFAULT_SERVER_PORT = 8080
SERVER_BIND_ADDRESS = "0.0.0.0"  # noqa: S104
SERVER_TITLE = "Minute Monitor"

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s | %(name)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# =============================================================================
# PROCESS EXIT CODES
# =============================================================================

EXIT_OK = 0  # --once run completed
EXIT_CONFIG_ERROR = 1
EXIT_QUOTA_EXCEEDED = 2
EXIT_SIGNAL_BASE = 128  # Stopped by signal N exits 128 + N, like a shell
