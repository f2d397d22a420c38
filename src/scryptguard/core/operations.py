"""The three public operations, each composed as guard, primitive call,
buffer lifecycle and error translation.

Nothing here keeps state between calls: every invocation builds its own
parameter objects and buffer, so calls may run concurrently on any thread.
"""

from __future__ import annotations

import logging

from .. import config
from .. import primitive
from .buffers import run_with_buffer
from .guard import (
    DECRYPT_DEFAULTS,
    ENCRYPT_DEFAULTS,
    ResourceBudget,
    validate_derivation_params,
)
from .translate import derivation_failed, raise_for_status, translate_status

logger = logging.getLogger(__name__)


def encrypt(plaintext: bytes, password: bytes, budget: ResourceBudget = ENCRYPT_DEFAULTS) -> bytes:
    """Encrypt ``plaintext`` under ``password``.

    Returns ``len(plaintext) + 128`` bytes: header, ciphertext and MAC.
    """

    def call(out: bytearray):
        status = primitive.encrypt_buf(
            plaintext, out, password, budget.maxmem, budget.maxmemfrac, budget.maxtime
        )
        return len(out), status

    capacity = len(plaintext) + config.CONTAINER_OVERHEAD
    data, status = run_with_buffer(capacity, call)
    if status != primitive.Status.OK:
        logger.debug("encrypt failed: %s", translate_status(status))
    raise_for_status(status)
    return data


def decrypt(ciphertext: bytes, password: bytes, budget: ResourceBudget = DECRYPT_DEFAULTS) -> bytes:
    """Decrypt a block produced by :func:`encrypt`.

    The cost parameters embedded in the block must fit ``budget``; otherwise
    this fails with ``MEMORY_BUDGET_EXCEEDED`` or ``TIME_BUDGET_EXCEEDED``
    before any key is derived.
    """

    def call(out: bytearray):
        status, used_len = primitive.decrypt_buf(
            ciphertext, out, password, budget.maxmem, budget.maxmemfrac, budget.maxtime
        )
        return used_len, status

    data, status = run_with_buffer(len(ciphertext), call)
    if status != primitive.Status.OK:
        logger.debug("decrypt failed: %s", translate_status(status))
    raise_for_status(status)
    return data


def hash(
    password: bytes,
    salt: bytes,
    N: int = config.HASH_N,
    r: int = config.HASH_R,
    p: int = config.HASH_P,
) -> bytes:
    """Derive a 64-byte scrypt hash; invalid parameters never reach the KDF."""
    params = validate_derivation_params(N, r, p)

    def call(out: bytearray):
        status = primitive.derive(password, salt, params.N, params.r, params.p, out)
        return len(out), status

    data, status = run_with_buffer(config.HASH_LENGTH, call)
    if status != primitive.Status.OK:
        raise derivation_failed()
    return data
