"""Logging setup shared by the CLI and the web backend."""

from __future__ import annotations

import logging

NOISY_LIBRARIES = (
    "httpx",
    "httpcore",
    "anthropic",
)


def configure_logging(level_name: str = "WARNING") -> logging.Logger:
    """Configure root logging once and return the package logger."""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s %(message)s",
    )
    for lib in NOISY_LIBRARIES:
        logging.getLogger(lib).setLevel(max(level, logging.WARNING))

    return logging.getLogger("alumod")
