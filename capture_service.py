"""
Capture Service

Main service coordinator for the periodic webcam capture daemon.
This is the central orchestrator that wires capture, storage and upload.

Architecture:
- Single sequential loop, one cycle at a time (no worker threads)
- Dispatch route fixed at startup: upload OR persist
- Optional read-only latest frame server in a daemon thread

State Flow:
    IDLE → CAPTURING → UPLOADING ──────────────→ SLEEPING → IDLE
                     ↘ ENFORCING → PERSISTING ↗
    Capture failure:   CAPTURING → SLEEPING
    Quota violation:   ENFORCING → STOPPED (exit code 2)

Failure handling:
- Capture failures are logged and retried after the interval, forever
- Upload failures keep the temp frame for inspection, no retry
- Quota violations that pruning cannot fix stop the process
"""

import argparse
import logging
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from capture import CaptureError, FrameCaptureInterface, create_capture
from config.daemon_config import ConfigError, DaemonConfig, load_config, parse_log_level
from config.settings import (
    DEFAULT_LOG_LEVEL,
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_QUOTA_EXCEEDED,
    EXIT_SIGNAL_BASE,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
)
from core.state_machine import LoopState, LoopStateMachine
from server.latest_server import LatestFrameServer
from storage import (
    CapturedFrame,
    QuotaExceededError,
    StorageController,
    StorageError,
)
from storage.utils.path_utils import capture_filename, ensure_directory
from upload import UploadController, create_uploader
from upload.interfaces.uploader_interface import UploaderInterface


class CaptureService:
    """
    Main service coordinator.

    Wires together:
    - Frame capture (fswebcam or mock)
    - Upload controller (upload mode) or storage controller (persist mode)
    - Latest frame server (optional)
    - Loop state tracking and shutdown

    Usage:
        service = CaptureService(config)
        exit_code = service.run()  # Blocks until stopped
    """

    def __init__(
        self,
        config: DaemonConfig,
        capture: Optional[FrameCaptureInterface] = None,
        storage: Optional[StorageController] = None,
        uploader: Optional[UploaderInterface] = None,
        server: Optional[LatestFrameServer] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize all controllers.

        Args:
            config: Validated daemon configuration
            capture: Capture implementation (None = fswebcam from config)
            storage: Storage controller (None = built from config, persist mode)
            uploader: Uploader implementation (None = HTTP from config, upload mode)
            server: Latest frame server (None = built from config if SERVE_LATEST)
            clock: Time source used for frame timestamps
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Capture Service...")

        self.config = config
        self.clock = clock
        self.state = LoopStateMachine()
        self._stop_event = threading.Event()
        self.exit_code = EXIT_OK

        self.capture = capture or create_capture(config)

        # Dispatch route is decided once for the process lifetime
        self.push_to_api = config.push_to_api
        self.uploads: Optional[UploadController] = None
        self.storage: Optional[StorageController] = None

        if self.push_to_api:
            self.uploads = UploadController(uploader or create_uploader(config))
        else:
            self.storage = storage or StorageController.from_config(config)

        if server is None and config.serve_latest:
            server = LatestFrameServer(config.latest_path, config.server_port)
        self.server = server

        self.logger.info("Capture Service initialized successfully")

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def install_signal_handlers(self) -> None:
        """Register SIGTERM/SIGINT for a clean stop (main thread only)"""
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.exit_code = EXIT_SIGNAL_BASE + signum
        self.stop()

    def stop(self) -> None:
        """Request the loop to stop after the current step"""
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        """
        Prepare directories and start the latest frame server.

        Raises:
            StorageError: If the data or temp directory cannot be created
            OSError: If the server port cannot be bound
        """
        if not ensure_directory(self.config.tmp_dir):
            raise StorageError(f"Cannot create temp directory: {self.config.tmp_dir}")

        if self.storage is not None:
            self.storage.initialize()

        if self.server is not None:
            self.server.start()

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Main service loop.

        Runs until a stop is requested, max_cycles cycles completed,
        or the quota cannot be held.

        Args:
            max_cycles: Stop after this many cycles (None = forever)

        Returns:
            Process exit code: 2 on quota violation, 128 + signum after a
            signal, 0 when max_cycles completed or stop() was called directly
        """
        self.logger.info("Starting capture loop")
        self.logger.info(self.config.summary())

        cycles = 0
        try:
            while not self.stop_requested:
                self.run_once()

                if self.state.is_stopped:
                    break

                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    self.logger.info(f"Completed {cycles} cycle(s), stopping")
                    break

                self._sleep()

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

        return self.exit_code

    def _shutdown(self) -> None:
        """Stop the server and mark the loop stopped"""
        if self.server is not None:
            self.server.stop()

        if not self.state.is_stopped:
            self.state.transition_to(LoopState.STOPPED, "shutdown")

        self.logger.info("Capture Service shutdown complete")

    # =========================================================================
    # CAPTURE CYCLE
    # =========================================================================

    def run_once(self) -> LoopState:
        """
        Run one capture cycle up to (not including) the interval sleep.

        Returns:
            State after the cycle: SLEEPING, or STOPPED on quota violation
        """
        if self.state.get_current_state() == LoopState.SLEEPING:
            self.state.transition_to(LoopState.IDLE, "next cycle")

        self.state.transition_to(LoopState.CAPTURING)
        frame = self._capture_frame()

        if frame is None:
            self.logger.warning("Capture failed. Retrying after interval...")
            self.state.transition_to(LoopState.SLEEPING, "capture failed")
            return self.state.get_current_state()

        if self.push_to_api:
            self._upload(frame)
        else:
            self._persist(frame)

        if not self.state.is_stopped:
            self.state.transition_to(LoopState.SLEEPING)

        return self.state.get_current_state()

    def _capture_frame(self) -> Optional[CapturedFrame]:
        """Capture to the temp dir; None on failure"""
        epoch = int(self.clock())
        tmp_file = Path(self.config.tmp_dir) / capture_filename(epoch)

        try:
            self.capture.capture_frame(tmp_file)
        except CaptureError as e:
            self.logger.warning(f"Capture error: {e}")
            return None

        self.logger.info(f"Captured {tmp_file}")
        return CapturedFrame(path=tmp_file, epoch=epoch)

    def _upload(self, frame: CapturedFrame) -> None:
        self.state.transition_to(LoopState.UPLOADING)
        self.logger.info(f"Uploading to API: {self.config.api_url}")
        self.uploads.upload_frame(frame)

    def _persist(self, frame: CapturedFrame) -> None:
        self.state.transition_to(LoopState.ENFORCING)

        try:
            self.storage.check_quota(frame)
        except QuotaExceededError as e:
            self.logger.error(f"Fatal: {e}")
            self.exit_code = EXIT_QUOTA_EXCEEDED
            self.state.transition_to(LoopState.STOPPED, "quota exceeded")
            return
        except StorageError as e:
            self.logger.error(f"Quota check failed for {frame.filename}: {e}")
            return

        self.state.transition_to(LoopState.PERSISTING)

        try:
            self.storage.write(frame)
        except StorageError as e:
            self.logger.error(f"Failed to store {frame.filename}: {e}")

    def _sleep(self) -> None:
        """Wait for the interval; returns early when a stop is requested"""
        self._stop_event.wait(self.config.interval_seconds)

        if not self.stop_requested:
            self.state.transition_to(LoopState.IDLE, "interval elapsed")


def setup_logging(level: str = DEFAULT_LOG_LEVEL):
    """
    Setup logging to stdout.

    Every line is timestamped; container runtimes collect stdout.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers when called twice (tests, --once reruns)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT),
    )
    logger.addHandler(console_handler)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Capture a webcam frame at a fixed interval, then upload or store it.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with configuration overrides (environment wins)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single capture cycle and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main entry point for the service.

    Exit codes:
        0: --once cycle completed
        1: Startup validation failure
        2: Quota exceeded and pruning insufficient
        128 + N: Stopped by signal N (143 for SIGTERM, 130 for SIGINT)
    """
    args = parse_args(argv)

    try:
        if args.log_level:
            log_level = parse_log_level(args.log_level, "--log-level")
        else:
            log_level = parse_log_level(os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(log_level)

    logger = logging.getLogger(__name__)

    try:
        config = load_config(config_path=args.config)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if not args.log_level:
        logging.getLogger().setLevel(config.log_level)

    try:
        service = CaptureService(config)
        service.start()
    except (StorageError, OSError, RuntimeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    service.install_signal_handlers()
    logger.info("Webcam Capture Service Starting")

    return service.run(max_cycles=1 if args.once else None)


if __name__ == "__main__":
    sys.exit(main())
