import logging

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .status import Status

logger = logging.getLogger(__name__)


def derive_key(password: bytes, salt: bytes, n: int, r: int, p: int, length: int) -> bytes:
    """
    Run scrypt over ``password`` and ``salt``.
    Returns raw derived key bytes; raises whatever ``cryptography`` raises.
    """
    kdf = Scrypt(salt=salt, length=length, n=n, r=r, p=p)
    return kdf.derive(password)


def derive(password: bytes, salt: bytes, n: int, r: int, p: int, out: bytearray) -> Status:
    """Fill ``out`` with ``len(out)`` bytes of scrypt output.

    Parameters are assumed to be validated by the caller; any failure inside
    the KDF (including running out of memory) is reported as
    ``Status.KEY_DERIVATION`` and leaves ``out`` untouched.
    """
    try:
        key = derive_key(password, salt, n, r, p, len(out))
    except Exception as exc:
        logger.debug("scrypt(N=%d, r=%d, p=%d) failed: %s", n, r, p, exc)
        return Status.KEY_DERIVATION
    out[:] = key
    return Status.OK
