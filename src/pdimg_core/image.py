"""Image serializer.

Layout, all words little-endian u32:

    magic | total_payload_len | record* (slot order) | checksum record

``total_payload_len`` counts the identity records only (headers included);
the checksum record is appended after the checksum has been computed over
every byte written before it.
"""
from __future__ import annotations

import io
import logging
import struct
from typing import BinaryIO, Iterable

from .checksum import apply_test_offset, checksum
from .errors import DuplicateRecord, ImageIOError
from .protocol import (
    CHECKSUM_FMT,
    CHECKSUM_LEN,
    CHECKSUM_REC_LEN,
    IMAGE_HEADER_LEN,
    IMAGE_MAGIC,
    REC_HEADER_FMT,
    SLOT_ORDER,
    U32_MASK,
)
from .records import Record, RecordKind

_logger = logging.getLogger(__name__)


def write_all(sink: BinaryIO, data: bytes) -> None:
    """Append ``data`` to ``sink``.

    An interrupted write is retried with whatever has not been written yet.
    A short write or an OS error aborts with ``ImageIOError``.
    """
    view = memoryview(data)
    while view:
        try:
            n = sink.write(view)
        except InterruptedError:
            continue
        except OSError as e:
            raise ImageIOError(f"Write file failed because {e.strerror or e}") from e
        if n is None or n < len(view):
            written = 0 if n is None else n
            raise ImageIOError(f"Write file failed: short write ({written} of {len(view)} bytes)")
        view = view[n:]


def total_payload_length(records: Iterable[Record]) -> int:
    return sum(r.size for r in records if r.kind != RecordKind.CHECKSUM)


def pack_checksum_record(value: int) -> bytes:
    return struct.pack(REC_HEADER_FMT, int(RecordKind.CHECKSUM), CHECKSUM_LEN) + struct.pack(
        CHECKSUM_FMT, value & U32_MASK
    )


def image_size(total_length: int) -> int:
    return IMAGE_HEADER_LEN + total_length + CHECKSUM_REC_LEN


def _in_slot_order(records: Iterable[Record]) -> list[Record]:
    by_kind: dict[RecordKind, Record] = {}
    for record in records:
        if record.kind == RecordKind.CHECKSUM:
            continue
        if record.kind in by_kind:
            raise DuplicateRecord(record.kind)
        by_kind[record.kind] = record
    return [by_kind[RecordKind(tag)] for tag in SLOT_ORDER if RecordKind(tag) in by_kind]


def serialize(records: Iterable[Record], sink: BinaryIO, test_offset: int = 0) -> int:
    """Write a complete image for ``records`` into ``sink`` and return the stored checksum.

    Records are written in slot order whatever order they arrive in; a kind
    given twice raises ``DuplicateRecord``. Checksum records are ignored,
    the real one is appended last. ``sink`` must be empty, seekable and
    readable: the checksum is computed by reading back everything written
    before the checksum record.
    """
    records = _in_slot_order(records)
    total = total_payload_length(records)

    _logger.debug("Start to write the data blocks")
    write_all(sink, struct.pack("<I", IMAGE_MAGIC))
    _logger.debug("write image header 0x%x - done!", IMAGE_MAGIC)
    write_all(sink, struct.pack("<I", total))
    _logger.debug("write total data length %d - done!", total)

    for record in records:
        write_all(sink, record.pack())
        _logger.debug("write type 0x%x -- done!", int(record.kind))

    try:
        sink.flush()
        raw = checksum(sink, 0)
        sink.seek(0, io.SEEK_END)
    except OSError as e:
        raise ImageIOError(f"Read back failed because {e.strerror or e}") from e
    value = apply_test_offset(raw, test_offset)
    _logger.debug("checksum is 0x%x, offset is %d", raw, test_offset)

    write_all(sink, pack_checksum_record(value))
    _logger.debug("The persistent data image is generated!")
    return value
