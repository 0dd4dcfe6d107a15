"""
Server Module

Read-only HTTP access to the latest captured frame.
"""

from server.latest_server import LatestFrameServer, run_server

__all__ = [
    "LatestFrameServer",
    "run_server",
]
