"""Runtime settings and default resource budgets.

Settings come from environment variables so that deployments can tune the
CPU probe and log verbosity without code changes:

- ``SCRYPTGUARD_LOG_LEVEL``: name of a :mod:`logging` level (default WARNING)
- ``SCRYPTGUARD_CPUPERF_WINDOW``: seconds spent timing the CPU before picking
  or checking cost parameters (default 0.25)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional


# Decryption accepts whatever cost the encryptor chose, up to these ceilings.
ENCRYPT_MAXTIME = 5.0
ENCRYPT_MAXMEMFRAC = 0.125
DECRYPT_MAXTIME = 300.0
DECRYPT_MAXMEMFRAC = 0.5
# 0 means "use the primitive's default memory ceiling", not "no memory".
DEFAULT_MAXMEM = 0

HASH_N = 1 << 14
HASH_R = 8
HASH_P = 1
HASH_LENGTH = 64

# header (96) + trailing HMAC-SHA256 (32)
CONTAINER_OVERHEAD = 128

DEFAULT_CPUPERF_WINDOW = 0.25


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.WARNING
    cpuperf_window: float = DEFAULT_CPUPERF_WINDOW


def _parse_level(raw: Optional[str]) -> int:
    if not raw:
        return logging.WARNING
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {raw!r}")
    return level


def _parse_window(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_CPUPERF_WINDOW
    window = float(raw)
    if window <= 0:
        raise ValueError("SCRYPTGUARD_CPUPERF_WINDOW must be positive")
    return window


def load_settings() -> Settings:
    """Read settings from the environment on every call (no caching)."""
    return Settings(
        log_level=_parse_level(os.getenv("SCRYPTGUARD_LOG_LEVEL")),
        cpuperf_window=_parse_window(os.getenv("SCRYPTGUARD_CPUPERF_WINDOW")),
    )
