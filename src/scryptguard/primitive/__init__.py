"""Primitive layer: scrypt derivation and the scrypt-encrypted block format.

This package stands in the place of the tarsnap ``scryptenc`` C library. Its
functions write into caller-owned buffers and return numeric
:class:`~scryptguard.primitive.status.Status` codes; turning those codes into
exceptions is the job of :mod:`scryptguard.core`.
"""

from .status import Status
from .kdf import derive
from .container import encrypt_buf, decrypt_buf, OVERHEAD

__all__ = [
    "Status",
    "derive",
    "encrypt_buf",
    "decrypt_buf",
    "OVERHEAD",
]
