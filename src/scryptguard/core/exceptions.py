"""
Exceptions for scryptguard
Every failure a caller can see is a ScryptError tagged with one ErrorKind
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    # value is the fixed, caller-facing message
    RESOURCE_PROBE_FAILED = "getrlimit or sysctl(hw.usermem) failed"
    CLOCK_FAILED = "clock_getres or clock_gettime failed"
    DERIVATION_FAILED = "error computing derived key"
    ENTROPY_SOURCE_FAILED = "could not read salt from /dev/urandom"
    CRYPTO_LIBRARY_ERROR = "error in OpenSSL"
    ALLOCATION_FAILED = "malloc failed"
    MALFORMED_CIPHERTEXT = "data is not a valid scrypt-encrypted block"
    UNRECOGNIZED_FORMAT = "unrecognized scrypt format"
    MEMORY_BUDGET_EXCEEDED = "decrypting file would take too much memory"
    TIME_BUDGET_EXCEEDED = "decrypting file would take too long"
    PASSWORD_INCORRECT = "password is incorrect"
    OUTPUT_WRITE_FAILED = "error writing output file"
    INPUT_READ_FAILED = "error reading input file"
    INVALID_PARAMS = (
        "hash parameters are wrong "
        "(r*p should be < 2**30, and N should be a power of two > 1)"
    )
    INTERNAL_ERROR = "primitive reported more output than the buffer holds"

    @property
    def message(self) -> str:
        return self.value


class ScryptError(Exception):
    """Raised by every public operation; ``kind`` says which failure it was."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message if message is not None else kind.message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"ScryptError({self.kind.name}, {self.message!r})"
