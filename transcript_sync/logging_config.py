"""Logging setup shared by the API server and scripts."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once and quiet noisy third-party loggers."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=numeric, format=LOG_FORMAT)
    root.setLevel(numeric)

    # Keep multipart parser internals and HTTP clients out of debug output
    for name in ("python_multipart", "multipart", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
