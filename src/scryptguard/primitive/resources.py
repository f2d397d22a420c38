"""Memory and CPU probes used to pick or check scrypt cost parameters.

Both directions share one model of cost:

- memory: a derivation touches ``128 * N * r`` bytes
- CPU: a derivation runs ``4 * N * r * p`` salsa20/8 cores

``pickparams`` chooses ``(logN, r, p)`` that fit a budget when encrypting and
``checkparams`` refuses parameters read from a header that do not fit.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Optional, Tuple

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..config import load_settings
from .status import PrimitiveFailure, Status

if sys.platform == "win32":
    resource = None
else:
    import resource

logger = logging.getLogger(__name__)

SIZE_MAX = sys.maxsize * 2 + 1
MIN_MEMLIMIT = 1 << 20
MAX_MEMFRAC = 0.5
MIN_OPSLIMIT = 32768
RP_LIMIT = 1 << 30

# a single N=16, r=1, p=1 derivation is counted as this many salsa20/8 cores
_OPS_PER_PROBE = 512
_PROBE_SALT = bytes(16)


def memlimit_sys() -> int:
    """Return the smallest memory ceiling the OS will enforce on this process."""
    limits = []
    if hasattr(os, "sysconf"):
        try:
            pages = os.sysconf("SC_PHYS_PAGES")
            page_size = os.sysconf("SC_PAGE_SIZE")
        except (ValueError, OSError) as exc:
            logger.debug("physical memory probe failed: %s", exc)
            raise PrimitiveFailure(Status.RESOURCE_PROBE) from exc
        if pages > 0 and page_size > 0:
            limits.append(pages * page_size)

    if resource is not None:
        for name in ("RLIMIT_AS", "RLIMIT_DATA"):
            rlimit = getattr(resource, name, None)
            if rlimit is None:
                continue
            try:
                soft, _hard = resource.getrlimit(rlimit)
            except (ValueError, OSError) as exc:
                logger.debug("getrlimit(%s) failed: %s", name, exc)
                raise PrimitiveFailure(Status.RESOURCE_PROBE) from exc
            if soft != resource.RLIM_INFINITY and soft > 0:
                limits.append(soft)

    return min(limits) if limits else SIZE_MAX


def memtouse(maxmem: int, maxmemfrac: float, sysmem: Optional[int] = None) -> int:
    """Return how many bytes a derivation may use.

    ``maxmemfrac`` outside ``(0, 0.5]`` is treated as 0.5, ``maxmem == 0``
    means no explicit ceiling, and the result is never below 1 MiB.
    """
    if sysmem is None:
        sysmem = memlimit_sys()

    if maxmemfrac > MAX_MEMFRAC or maxmemfrac == 0.0:
        maxmemfrac = MAX_MEMFRAC

    memavail = int(maxmemfrac * sysmem)
    if maxmem > 0 and memavail > maxmem:
        memavail = maxmem
    if memavail < MIN_MEMLIMIT:
        memavail = MIN_MEMLIMIT
    return memavail


def _probe_once() -> None:
    Scrypt(salt=_PROBE_SALT, length=16, n=16, r=1, p=1).derive(_PROBE_SALT)


def cpu_ops_per_second(window: Optional[float] = None) -> float:
    """Estimate salsa20/8 cores per second by timing tiny derivations."""
    if window is None:
        window = load_settings().cpuperf_window
    try:
        resolution = time.get_clock_info("perf_counter").resolution
        start = time.perf_counter()
    except (OSError, ValueError) as exc:
        raise PrimitiveFailure(Status.CLOCK) from exc
    if resolution <= 0:
        raise PrimitiveFailure(Status.CLOCK)

    ops = 0
    elapsed = 0.0
    while elapsed < window:
        try:
            _probe_once()
        except Exception as exc:
            logger.debug("cpu probe derivation failed: %s", exc)
            raise PrimitiveFailure(Status.KEY_DERIVATION) from exc
        ops += _OPS_PER_PROBE
        elapsed = time.perf_counter() - start

    opps = ops / elapsed
    logger.debug("cpu probe: %.0f salsa20/8 cores per second", opps)
    return opps


def _log2_fitting(max_n: float) -> int:
    # smallest logN in [1, 63) with 2**logN > max_n / 2
    log_n = 1
    while log_n < 63:
        if (1 << log_n) > max_n / 2:
            break
        log_n += 1
    return log_n


def pickparams(
    maxmem: int,
    maxmemfrac: float,
    maxtime: float,
    opps: Optional[float] = None,
    memlimit: Optional[int] = None,
) -> Tuple[int, int, int]:
    """Choose ``(logN, r, p)`` for encryption under the given budget."""
    if memlimit is None:
        memlimit = memtouse(maxmem, maxmemfrac)
    if opps is None:
        opps = cpu_ops_per_second()

    opslimit = max(opps * maxtime, MIN_OPSLIMIT)
    r = 8

    # 128Nr <= memlimit and 4Nrp <= opslimit; the CPU bound wins when
    # opslimit < memlimit / 32.
    if opslimit < memlimit / 32:
        p = 1
        log_n = _log2_fitting(opslimit / (r * 4))
    else:
        log_n = _log2_fitting(memlimit / (r * 128))
        maxrp = (opslimit / 4) / (1 << log_n)
        if maxrp > RP_LIMIT - 1:
            maxrp = RP_LIMIT - 1
        p = max(int(maxrp) // r, 1)

    logger.debug(
        "picked logN=%d r=%d p=%d (memlimit=%d, opslimit=%.0f)",
        log_n, r, p, memlimit, opslimit,
    )
    return log_n, r, p


def checkparams(
    maxmem: int,
    maxmemfrac: float,
    maxtime: float,
    log_n: int,
    r: int,
    p: int,
    opps: Optional[float] = None,
    memlimit: Optional[int] = None,
) -> Status:
    """Return ``Status.OK`` if ``(logN, r, p)`` fits the budget."""
    if memlimit is None:
        memlimit = memtouse(maxmem, maxmemfrac)
    if opps is None:
        opps = cpu_ops_per_second()
    opslimit = opps * maxtime

    if log_n < 1 or log_n > 63:
        return Status.INVALID_BLOCK
    if r * p >= RP_LIMIT or r < 1 or p < 1:
        return Status.INVALID_BLOCK

    n = 1 << log_n
    if (memlimit // n) // r < 128:
        logger.debug("logN=%d r=%d needs more than %d bytes", log_n, r, memlimit)
        return Status.TOO_MUCH_MEMORY
    if (opslimit / n) / (r * p) < 4:
        logger.debug("logN=%d r=%d p=%d needs more than %.0f ops", log_n, r, p, opslimit)
        return Status.TOO_MUCH_TIME
    return Status.OK
