"""Numeric status codes returned by the primitive layer.

The numbering matches the tarsnap ``scryptenc`` library so that callers
translating codes (see :mod:`scryptguard.core.translate`) can rely on it.
"""

from enum import IntEnum


class Status(IntEnum):
    OK = 0
    RESOURCE_PROBE = 1
    CLOCK = 2
    KEY_DERIVATION = 3
    ENTROPY = 4
    CRYPTO_LIBRARY = 5
    ALLOCATION = 6
    INVALID_BLOCK = 7
    UNRECOGNIZED_FORMAT = 8
    TOO_MUCH_MEMORY = 9
    TOO_MUCH_TIME = 10
    PASSWORD_INCORRECT = 11
    WRITE_FAILED = 12
    READ_FAILED = 13


class PrimitiveFailure(Exception):
    # carries a Status out of nested helpers; never escapes the primitive package
    def __init__(self, status: Status):
        super().__init__(status.name)
        self.status = status
