"""Cost-parameter guard.

Runs before any buffer is allocated or any primitive is called. Derivation
parameters are checked strictly; encryption budgets are only coerced to their
types because enforcing them is the primitive's job.
"""

from __future__ import annotations

import logging
import math
import numbers
import operator
from dataclasses import dataclass

from .. import config
from .exceptions import ErrorKind, ScryptError
from .translate import invalid_params

logger = logging.getLogger(__name__)

RP_LIMIT = 1 << 30
U32_LIMIT = 1 << 32
U64_LIMIT = 1 << 64


@dataclass(frozen=True)
class CostParameters:
    N: int
    r: int
    p: int

    @property
    def memory_bytes(self) -> int:
        # approximate working set of one derivation
        return 128 * self.N * self.r


@dataclass(frozen=True)
class ResourceBudget:
    maxtime: float
    maxmem: int
    maxmemfrac: float


ENCRYPT_DEFAULTS = ResourceBudget(
    maxtime=config.ENCRYPT_MAXTIME,
    maxmem=config.DEFAULT_MAXMEM,
    maxmemfrac=config.ENCRYPT_MAXMEMFRAC,
)
DECRYPT_DEFAULTS = ResourceBudget(
    maxtime=config.DECRYPT_MAXTIME,
    maxmem=config.DEFAULT_MAXMEM,
    maxmemfrac=config.DECRYPT_MAXMEMFRAC,
)


def _as_int(name: str, value) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, not bool")
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"{name} must be an integer, not {type(value).__name__}") from None


def _as_float(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a real number, not {type(value).__name__}")
    return float(value)


def validate_derivation_params(N, r, p) -> CostParameters:
    """Return the parameters as a :class:`CostParameters` or raise ``INVALID_PARAMS``.

    ``r * p`` is computed on Python integers, so a product that would wrap in
    32-bit arithmetic is still rejected.

    ``r`` and ``p`` must each be at least 1; a zero factor is refused here
    instead of being left for the KDF to fail on.
    """
    N = _as_int("N", N)
    r = _as_int("r", r)
    p = _as_int("p", p)

    if N <= 1:
        constraint = "N must be greater than 1"
    elif N >= U64_LIMIT:
        constraint = "N must fit in 64 bits"
    elif N & (N - 1):
        constraint = "N must be a power of two"
    elif not (0 < r < U32_LIMIT and 0 < p < U32_LIMIT):
        constraint = "r and p must be between 1 and 2**32 - 1"
    elif r * p >= RP_LIMIT:
        constraint = "r*p must be less than 2**30"
    else:
        return CostParameters(N=N, r=r, p=p)

    logger.debug("rejected cost parameters N=%d r=%d p=%d: %s", N, r, p, constraint)
    raise invalid_params(constraint)


def _as_budget_float(name: str, value) -> float:
    value = _as_float(name, value)
    if math.isnan(value):
        logger.debug("rejected budget: %s is NaN", name)
        raise ScryptError(ErrorKind.INVALID_PARAMS, f"resource budget is wrong: {name} must not be NaN")
    return value


def validate_budget(maxtime, maxmem, maxmemfrac) -> ResourceBudget:
    """Coerce a caller budget; ``maxmem == 0`` keeps its "default ceiling" meaning.

    NaN has no place in the memory or time arithmetic and is refused as
    ``INVALID_PARAMS``; other ranges are left to the primitive.
    """
    maxmem = _as_int("maxmem", maxmem)
    if maxmem < 0:
        raise OverflowError("maxmem must not be negative")
    return ResourceBudget(
        maxtime=_as_budget_float("maxtime", maxtime),
        maxmem=maxmem,
        maxmemfrac=_as_budget_float("maxmemfrac", maxmemfrac),
    )
