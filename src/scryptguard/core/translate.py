"""Map primitive status codes onto :class:`ErrorKind`.

This is a pure lookup and never retries.
"""

from typing import Dict, Optional

from ..primitive.status import Status
from .exceptions import ErrorKind, ScryptError

_STATUS_KINDS: Dict[int, ErrorKind] = {
    Status.RESOURCE_PROBE: ErrorKind.RESOURCE_PROBE_FAILED,
    Status.CLOCK: ErrorKind.CLOCK_FAILED,
    Status.KEY_DERIVATION: ErrorKind.DERIVATION_FAILED,
    Status.ENTROPY: ErrorKind.ENTROPY_SOURCE_FAILED,
    Status.CRYPTO_LIBRARY: ErrorKind.CRYPTO_LIBRARY_ERROR,
    Status.ALLOCATION: ErrorKind.ALLOCATION_FAILED,
    Status.INVALID_BLOCK: ErrorKind.MALFORMED_CIPHERTEXT,
    Status.UNRECOGNIZED_FORMAT: ErrorKind.UNRECOGNIZED_FORMAT,
    Status.TOO_MUCH_MEMORY: ErrorKind.MEMORY_BUDGET_EXCEEDED,
    Status.TOO_MUCH_TIME: ErrorKind.TIME_BUDGET_EXCEEDED,
    Status.PASSWORD_INCORRECT: ErrorKind.PASSWORD_INCORRECT,
    Status.WRITE_FAILED: ErrorKind.OUTPUT_WRITE_FAILED,
    Status.READ_FAILED: ErrorKind.INPUT_READ_FAILED,
}

HASH_FAILED_MESSAGE = "could not compute hash"


def translate_status(status: int) -> Optional[ErrorKind]:
    """Return the error kind for ``status``, or ``None`` on success.

    Codes the table does not know are reported as ``INTERNAL_ERROR`` rather
    than being mistaken for success.
    """
    if status == Status.OK:
        return None
    return _STATUS_KINDS.get(status, ErrorKind.INTERNAL_ERROR)


def raise_for_status(status: int) -> None:
    kind = translate_status(status)
    if kind is not None:
        raise ScryptError(kind)


def derivation_failed() -> ScryptError:
    return ScryptError(ErrorKind.DERIVATION_FAILED, HASH_FAILED_MESSAGE)


def invalid_params(constraint: str) -> ScryptError:
    return ScryptError(
        ErrorKind.INVALID_PARAMS,
        f"{ErrorKind.INVALID_PARAMS.message}: {constraint}",
    )


def internal_error(detail: str) -> ScryptError:
    return ScryptError(ErrorKind.INTERNAL_ERROR, f"{ErrorKind.INTERNAL_ERROR.message}: {detail}")
