"""scryptguard: password-based encryption and key derivation on top of scrypt.

Three operations are exposed::

    encrypt(input, password, maxtime=5.0, maxmem=0, maxmemfrac=0.125) -> bytes
    decrypt(input, password, maxtime=300.0, maxmem=0, maxmemfrac=0.5, encoding=None)
    hash(password, salt, N=2**14, r=8, p=1) -> bytes  # always 64 bytes

Text arguments are encoded as UTF-8; any bytes-like object is accepted as
raw bytes. Every failure is raised as :class:`ScryptError` (also available
as ``error``) carrying an :class:`ErrorKind`.
"""

from typing import Optional, Union

from . import config
from .core import operations
from .core.exceptions import ErrorKind, ScryptError
from .core.guard import validate_budget

__version__ = "0.1.0"

BytesLike = Union[str, bytes, bytearray, memoryview]

# legacy name for the exception
error = ScryptError


def _as_bytes(name: str, value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{name} must be str or bytes-like, not {type(value).__name__}")


def encrypt(
    input: BytesLike,
    password: BytesLike,
    maxtime: float = config.ENCRYPT_MAXTIME,
    maxmem: int = config.DEFAULT_MAXMEM,
    maxmemfrac: float = config.ENCRYPT_MAXMEMFRAC,
) -> bytes:
    """Encrypt ``input`` with ``password``; output is ``len(input) + 128`` bytes."""
    budget = validate_budget(maxtime, maxmem, maxmemfrac)
    return operations.encrypt(_as_bytes("input", input), _as_bytes("password", password), budget)


def decrypt(
    input: BytesLike,
    password: BytesLike,
    maxtime: float = config.DECRYPT_MAXTIME,
    maxmem: int = config.DEFAULT_MAXMEM,
    maxmemfrac: float = config.DECRYPT_MAXMEMFRAC,
    encoding: Optional[str] = None,
) -> Union[bytes, str]:
    """Decrypt ``input`` with ``password``.

    Returns bytes, or text when ``encoding`` is given.
    """
    budget = validate_budget(maxtime, maxmem, maxmemfrac)
    data = operations.decrypt(_as_bytes("input", input), _as_bytes("password", password), budget)
    if encoding is None:
        return data
    return data.decode(encoding)


def hash(
    password: BytesLike,
    salt: BytesLike,
    N: int = config.HASH_N,
    r: int = config.HASH_R,
    p: int = config.HASH_P,
) -> bytes:
    """Compute a 64-byte scrypt hash of ``password`` with ``salt``."""
    return operations.hash(_as_bytes("password", password), _as_bytes("salt", salt), N, r, p)


__all__ = [
    "encrypt",
    "decrypt",
    "hash",
    "error",
    "ScryptError",
    "ErrorKind",
    "__version__",
]
