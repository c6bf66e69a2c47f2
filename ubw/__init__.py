"""Concurrent HTTP/1.1 traffic generator with per-second status-class counts."""

__version__ = "0.1.0"