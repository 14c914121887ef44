"""Additive image checksum."""
from __future__ import annotations

import io
import logging
from functools import partial
from typing import BinaryIO

from .protocol import U32_MASK

_logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024  # 64KB


def sum_bytes(data: bytes, seed: int = 0) -> int:
    return (seed + sum(data)) & U32_MASK


def checksum(sink: BinaryIO, seed: int = 0) -> int:
    """Sum every byte of ``sink`` from offset 0 to end of stream, mod 2**32.

    The read cursor is left at end of stream.
    """
    sink.seek(0, io.SEEK_SET)
    value = seed & U32_MASK
    for chunk in iter(partial(sink.read, CHUNK_SIZE), b""):
        value = sum_bytes(chunk, value)
    return value


def apply_test_offset(value: int, offset: int) -> int:
    """Fold a signed test offset into a checksum.

    Only nonzero when deliberately producing an image that must fail
    verification.
    """
    if offset:
        _logger.warning("checksum offset %d only for testing purpose", offset)
    return (value + offset) & U32_MASK
