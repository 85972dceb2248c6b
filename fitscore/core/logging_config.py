"""Logging setup."""

from __future__ import annotations

import logging

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the service process."""

    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


__all__ = ["configure_logging"]
