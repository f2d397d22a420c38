"""scrypt-encrypted block format, compatible with the tarsnap ``scrypt`` tool.

Header layout (96 bytes, integers big-endian):
- 6 bytes: magic b'scrypt'
- 1 byte: version (0)
- 1 byte: logN
- 4 bytes: r
- 4 bytes: p
- 32 bytes: salt
- 16 bytes: first half of SHA-256 over bytes 0..47
- 32 bytes: HMAC-SHA256 over bytes 0..63, keyed with dk[32:64]

Body: AES-256-CTR (zero initial counter) under dk[0:32].
Trailer: 32-byte HMAC-SHA256 over header + body, keyed with dk[32:64].

``dk`` is 64 bytes of scrypt output over the password and salt. Functions
here follow the C library's calling convention: they write into a caller
buffer and report a :class:`~scryptguard.primitive.status.Status` instead of
raising.
"""

import hashlib
import hmac
import logging
import os
import struct
from typing import Tuple

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .kdf import derive_key
from .resources import checkparams, pickparams
from .status import PrimitiveFailure, Status

logger = logging.getLogger(__name__)

MAGIC = b"scrypt"
VERSION = 0
SALT_LEN = 32
DK_LEN = 64
HEADER_LEN = 96
MAC_LEN = 32
OVERHEAD = HEADER_LEN + MAC_LEN

_PARAMS = struct.Struct(">BII")


def _derive(password: bytes, salt: bytes, log_n: int, r: int, p: int) -> bytes:
    try:
        return derive_key(password, salt, 1 << log_n, r, p, DK_LEN)
    except Exception as exc:
        logger.debug("key derivation failed (logN=%d r=%d p=%d): %s", log_n, r, p, exc)
        raise PrimitiveFailure(Status.KEY_DERIVATION) from exc


def _mac(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha256).digest()


def _ctr(key: bytes, data: bytes) -> bytes:
    try:
        encryptor = Cipher(algorithms.AES(key), modes.CTR(b"\x00" * 16)).encryptor()
        return encryptor.update(data) + encryptor.finalize()
    except (InternalError, UnsupportedAlgorithm, ValueError) as exc:
        logger.debug("AES-CTR failed: %s", exc)
        raise PrimitiveFailure(Status.CRYPTO_LIBRARY) from exc


def build_header(log_n: int, r: int, p: int, salt: bytes, dk: bytes) -> bytes:
    header = bytearray()
    header += MAGIC
    header += struct.pack("B", VERSION)
    header += _PARAMS.pack(log_n, r, p)
    header += salt
    header += hashlib.sha256(bytes(header)).digest()[:16]
    header += _mac(dk[32:], bytes(header))
    return bytes(header)


def _seal(plaintext: bytes, password: bytes, maxmem: int, maxmemfrac: float, maxtime: float) -> bytes:
    log_n, r, p = pickparams(maxmem, maxmemfrac, maxtime)
    try:
        salt = os.urandom(SALT_LEN)
    except (OSError, NotImplementedError) as exc:
        raise PrimitiveFailure(Status.ENTROPY) from exc

    dk = _derive(password, salt, log_n, r, p)
    header = build_header(log_n, r, p, salt, dk)
    body = _ctr(dk[:32], plaintext)
    return header + body + _mac(dk[32:], header + body)


def _open(ciphertext: bytes, password: bytes, maxmem: int, maxmemfrac: float, maxtime: float) -> bytes:
    if len(ciphertext) < 7 or ciphertext[:6] != MAGIC:
        raise PrimitiveFailure(Status.INVALID_BLOCK)
    if ciphertext[6] != VERSION:
        raise PrimitiveFailure(Status.UNRECOGNIZED_FORMAT)
    if len(ciphertext) < OVERHEAD:
        raise PrimitiveFailure(Status.INVALID_BLOCK)

    header = ciphertext[:HEADER_LEN]
    log_n, r, p = _PARAMS.unpack_from(header, 7)
    salt = header[16:48]
    checksum = hashlib.sha256(header[:48]).digest()[:16]
    if not hmac.compare_digest(checksum, header[48:64]):
        raise PrimitiveFailure(Status.INVALID_BLOCK)

    logger.debug("embedded cost parameters: logN=%d r=%d p=%d", log_n, r, p)
    status = checkparams(maxmem, maxmemfrac, maxtime, log_n, r, p)
    if status != Status.OK:
        raise PrimitiveFailure(status)

    dk = _derive(password, salt, log_n, r, p)
    if not hmac.compare_digest(_mac(dk[32:], header[:64]), header[64:HEADER_LEN]):
        raise PrimitiveFailure(Status.PASSWORD_INCORRECT)

    # authenticate the whole block before any plaintext exists
    if not hmac.compare_digest(_mac(dk[32:], ciphertext[:-MAC_LEN]), ciphertext[-MAC_LEN:]):
        raise PrimitiveFailure(Status.INVALID_BLOCK)
    return _ctr(dk[:32], ciphertext[HEADER_LEN:-MAC_LEN])


def encrypt_buf(
    plaintext: bytes,
    out: bytearray,
    password: bytes,
    maxmem: int,
    maxmemfrac: float,
    maxtime: float,
) -> Status:
    """Encrypt ``plaintext`` into ``out``, which must hold ``len(plaintext) + 128`` bytes."""
    if len(out) < len(plaintext) + OVERHEAD:
        raise ValueError("output buffer too small for encrypted block")
    try:
        block = _seal(plaintext, password, maxmem, maxmemfrac, maxtime)
    except PrimitiveFailure as failure:
        return failure.status
    except MemoryError:
        return Status.ALLOCATION
    out[: len(block)] = block
    return Status.OK


def decrypt_buf(
    ciphertext: bytes,
    out: bytearray,
    password: bytes,
    maxmem: int,
    maxmemfrac: float,
    maxtime: float,
) -> Tuple[Status, int]:
    """Decrypt ``ciphertext`` into ``out``; returns ``(status, plaintext length)``.

    Nothing is written to ``out`` unless the status is ``Status.OK``.
    """
    try:
        plaintext = _open(ciphertext, password, maxmem, maxmemfrac, maxtime)
    except PrimitiveFailure as failure:
        return failure.status, 0
    except MemoryError:
        return Status.ALLOCATION, 0
    out[: len(plaintext)] = plaintext
    return Status.OK, len(plaintext)
