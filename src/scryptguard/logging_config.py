"""Lightweight logging setup for applications embedding scryptguard."""

import logging
import sys
from typing import Optional

from .config import load_settings


def configure_logging(level: Optional[int] = None) -> None:
    # Configure root logger once; level falls back to SCRYPTGUARD_LOG_LEVEL.
    if level is None:
        level = load_settings().log_level
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
