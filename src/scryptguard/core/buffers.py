"""Output-buffer lifecycle.

Every operation writes into exactly one buffer sized for it. The buffer is
owned by the call until its used prefix is copied out as immutable ``bytes``
and it is released exactly once, whichever way the call exits.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Tuple

from .exceptions import ErrorKind, ScryptError
from .translate import internal_error

logger = logging.getLogger(__name__)


class Allocator:
    """Hands out zeroed buffers and wipes them on release."""

    def allocate(self, capacity: int) -> bytearray:
        return bytearray(capacity)

    def release(self, data: bytearray) -> None:
        data[:] = bytes(len(data))
        del data[:]


# module-level allocator; tests swap in an instrumented one
default_allocator = Allocator()


class OutputBuffer:
    __slots__ = ("capacity", "data", "_allocator", "_released")

    def __init__(self, capacity: int, allocator: Optional[Allocator] = None):
        if capacity < 0:
            raise ValueError("buffer capacity must not be negative")
        self._allocator = allocator if allocator is not None else default_allocator
        self.capacity = capacity
        try:
            self.data = self._allocator.allocate(capacity)
        except MemoryError as exc:
            logger.debug("could not allocate %d-byte output buffer", capacity)
            raise ScryptError(ErrorKind.ALLOCATION_FAILED) from exc
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def view(self, used_len: int) -> bytes:
        """Copy out the first ``used_len`` bytes; larger lengths are an internal error."""
        if self._released:
            raise RuntimeError("output buffer already released")
        if used_len < 0 or used_len > self.capacity:
            raise internal_error(f"{used_len} bytes reported for a {self.capacity}-byte buffer")
        return bytes(self.data[:used_len])

    def release(self) -> None:
        if self._released:
            raise RuntimeError("output buffer released twice")
        self._released = True
        self._allocator.release(self.data)


@contextmanager
def output_buffer(capacity: int, allocator: Optional[Allocator] = None) -> Iterator[OutputBuffer]:
    buf = OutputBuffer(capacity, allocator)
    logger.debug("allocated %d-byte output buffer", capacity)
    try:
        yield buf
    finally:
        buf.release()


def run_with_buffer(
    capacity: int,
    operation: Callable[[bytearray], Tuple[int, int]],
    allocator: Optional[Allocator] = None,
) -> Tuple[bytes, int]:
    """Run ``operation`` against a fresh buffer of ``capacity`` bytes.

    ``operation`` returns ``(used_len, status)``. The used prefix is only
    copied out when ``status`` is zero, so a failing call never leaks
    partial output.
    """
    with output_buffer(capacity, allocator) as buf:
        used_len, status = operation(buf.data)
        if status != 0:
            return b"", status
        return buf.view(used_len), status
