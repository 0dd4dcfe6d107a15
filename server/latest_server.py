#!/usr/bin/env python3
"""
Latest Frame Server

Serves the rolling latest mirror over HTTP, read-only.

Routes:
- /latest.jpg: newest persisted frame (image/jpeg, never cached)
- / and /index.html: informational page pointing at /latest.jpg
- anything else: 404 (no directory listing)

The capture loop replaces latest.jpg atomically, so a request always
reads either the previous or the new frame in full.

Usage:
    python -m server.latest_server
    # Frame available at http://localhost:8080/latest.jpg
"""

import html
import logging
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

from config.settings import LATEST_FILENAME, SERVER_BIND_ADDRESS, SERVER_TITLE

logger = logging.getLogger(__name__)

LATEST_ROUTE = f"/{LATEST_FILENAME}"
INDEX_ROUTES = ("/", "/index.html")


def render_index(title: str = SERVER_TITLE) -> bytes:
    """Minimal index page pointing at the latest frame"""
    safe_title = html.escape(title)
    page = (
        '<!doctype html><html lang="en"><meta charset="utf-8">\n'
        f"<title>{safe_title}</title>\n"
        f"<body><p>Fetch the current image at <code>{LATEST_ROUTE}</code>.</p></body>\n"
        "</html>\n"
    )
    return page.encode("utf-8")


class LatestFrameHTTPServer(HTTPServer):
    """HTTPServer that knows which file is the latest frame"""

    def __init__(self, server_address, latest_path: Path, title: str = SERVER_TITLE):
        self.latest_path = Path(latest_path)
        self.index_page = render_index(title)
        super().__init__(server_address, LatestFrameHandler)


class LatestFrameHandler(BaseHTTPRequestHandler):
    """
    HTTP request handler for the latest frame.

    Serves exactly one file plus the index page.
    Returns 404 for all other paths.
    """

    server: LatestFrameHTTPServer

    def _route(self) -> str:
        return urlsplit(self.path).path

    def _send_body(self, status: int, content_type: str, body: bytes, head_only: bool):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        self.end_headers()
        if not head_only:
            self.wfile.write(body)

    def _handle(self, head_only: bool = False):
        route = self._route()

        if route in INDEX_ROUTES:
            self._send_body(200, "text/html; charset=utf-8", self.server.index_page, head_only)
            return

        if route != LATEST_ROUTE:
            self.send_error(404)
            return

        try:
            body = self.server.latest_path.read_bytes()
        except FileNotFoundError:
            self.send_error(404, "No frame captured yet")
            return
        except OSError as e:
            logger.error(f"Error reading {self.server.latest_path}: {e}")
            self.send_error(500)
            return

        self._send_body(200, "image/jpeg", body, head_only)

    def do_GET(self):
        """Handle GET requests"""
        self._handle()

    def do_HEAD(self):
        """Handle HEAD requests"""
        self._handle(head_only=True)

    def log_message(self, format, *args):
        """Route access logs through logging at debug level"""
        logger.debug(f"{self.address_string()} - {format % args}")


class LatestFrameServer:
    """
    Background server for the latest frame.

    Runs in a daemon thread so it never keeps the process alive on its own
    and shares nothing with the capture loop except the data directory.

    Usage:
        server = LatestFrameServer(Path("/data/latest.jpg"), port=8080)
        server.start()
        ...
        server.stop()
    """

    def __init__(
        self,
        latest_path: Path,
        port: int,
        bind_address: str = SERVER_BIND_ADDRESS,
    ):
        self.logger = logging.getLogger(__name__)
        self.latest_path = Path(latest_path)
        self.bind_address = bind_address
        self.port = port

        self._httpd: Optional[LatestFrameHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def server_port(self) -> Optional[int]:
        """Bound port (useful when started with port 0)"""
        return self._httpd.server_address[1] if self._httpd else None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Bind and start serving in a background thread.

        Raises:
            OSError: If the port cannot be bound
        """
        if self.is_running:
            self.logger.warning("Latest frame server already running")
            return

        self._httpd = LatestFrameHTTPServer(
            (self.bind_address, self.port),
            self.latest_path,
        )
        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name="latest-frame-server",
            daemon=True,
        )
        self._thread.start()

        self.logger.info(
            f"Latest frame server started on port {self.server_port} "
            f"(serving only {LATEST_ROUTE})",
        )

    def stop(self) -> None:
        """Stop serving and release the port"""
        if self._httpd is None:
            return

        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)

        self._httpd = None
        self._thread = None
        self.logger.info("Latest frame server stopped")


def run_server():
    """
    Run the latest frame server in the foreground.

    Reads DATA_DIR and SERVER_PORT from the environment (.env supported).
    Runs until interrupted.
    """
    from config.daemon_config import ConfigError, load_config

    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s - %(message)s | %(name)s",
    )

    try:
        config = load_config(check_device=False)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        raise SystemExit(1) from e

    httpd = LatestFrameHTTPServer(
        (SERVER_BIND_ADDRESS, config.server_port),
        config.latest_path,
    )
    logger.info(f"Latest frame server listening on port {config.server_port}")
    logger.info(
        f"Frame available at http://localhost:{config.server_port}{LATEST_ROUTE}",
    )

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Latest frame server stopped")
    finally:
        httpd.server_close()


if __name__ == "__main__":
    run_server()
