from __future__ import annotations

import logging
import os
import struct
from pathlib import Path

from pdimg_core.checksum import sum_bytes
from pdimg_core.mac import is_valid_mac
from pdimg_core.protocol import (
    CHECKSUM_FMT,
    CHECKSUM_LEN,
    CHECKSUM_REC_LEN,
    IMAGE_HEADER_FMT,
    IMAGE_HEADER_LEN,
    IMAGE_MAGIC,
    REC_HEADER_FMT,
    REC_HEADER_LEN,
    SLOT_ORDER,
)
from pdimg_core.records import MAC_KINDS, RecordKind

from .const import ERRORS

_logger = logging.getLogger(__name__)


def _fail(code: str, **detail) -> dict:
    err = {"code": code, "message": ERRORS[code], **detail}
    return {"status": "FAIL", "error_count": 1, "errors": [err]}


def _text(payload: bytes) -> str:
    return payload.decode("utf-8", "backslashreplace")


def _describe(kind: RecordKind, payload: bytes) -> dict:
    return {
        "type": f"0x{int(kind):04X}",
        "name": kind.name.lower(),
        "length": len(payload),
        "value": _text(payload),
    }


def verify_bytes(data: bytes) -> dict:
    """Check a whole image held in memory. Stops at the first problem."""
    if len(data) < IMAGE_HEADER_LEN:
        return _fail("E_TRUNCATED", offset=0, size=len(data))

    magic, total = struct.unpack_from(IMAGE_HEADER_FMT, data, 0)
    if magic != IMAGE_MAGIC:
        return _fail("E_MAGIC", expected=f"0x{IMAGE_MAGIC:08X}", found=f"0x{magic:08X}")

    body_end = IMAGE_HEADER_LEN + total
    if body_end + CHECKSUM_REC_LEN > len(data):
        return _fail("E_TRUNCATED", total_payload_len=total, size=len(data))

    records: list[dict] = []
    seen: list[RecordKind] = []
    off = IMAGE_HEADER_LEN
    while off < body_end:
        if off + REC_HEADER_LEN > body_end:
            return _fail("E_LENGTH_MISMATCH", offset=off, total_payload_len=total)
        tag, length = struct.unpack_from(REC_HEADER_FMT, data, off)
        if tag not in SLOT_ORDER:
            return _fail("E_RECORD_KIND", offset=off, type=f"0x{tag:04X}")
        kind = RecordKind(tag)
        if kind in seen:
            return _fail("E_RECORD_DUPLICATE", offset=off, type=f"0x{tag:04X}")
        if seen and SLOT_ORDER.index(tag) < SLOT_ORDER.index(int(seen[-1])):
            return _fail("E_RECORD_ORDER", offset=off, type=f"0x{tag:04X}")
        end = off + REC_HEADER_LEN + length
        if end > body_end:
            return _fail("E_LENGTH_MISMATCH", offset=off, total_payload_len=total)
        payload = data[off + REC_HEADER_LEN:end]
        if kind in MAC_KINDS and not is_valid_mac(os.fsdecode(payload), strict=False):
            return _fail("E_RECORD_MAC", offset=off, value=_text(payload))
        seen.append(kind)
        records.append(_describe(kind, payload))
        off = end

    tag, length = struct.unpack_from(REC_HEADER_FMT, data, body_end)
    if tag != int(RecordKind.CHECKSUM) or length != CHECKSUM_LEN:
        return _fail("E_CHECKSUM_RECORD", offset=body_end, type=f"0x{tag:04X}", length=length)
    if len(data) != body_end + CHECKSUM_REC_LEN:
        return _fail("E_TRAILING_BYTES", extra=len(data) - body_end - CHECKSUM_REC_LEN)

    (stored,) = struct.unpack_from(CHECKSUM_FMT, data, body_end + REC_HEADER_LEN)
    computed = sum_bytes(data[:body_end])
    if stored != computed:
        return _fail("E_CHECKSUM_MISMATCH", stored=f"0x{stored:08x}", computed=f"0x{computed:08x}")

    return {
        "status": "PASS",
        "error_count": 0,
        "errors": [],
        "checksum": f"0x{stored:08x}",
        "records": records,
    }


def verify_image(path: Path) -> dict:
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        return _fail("E_IO", path=str(path), detail=str(e))
    _logger.info("verifying %s (%d bytes)", path, len(data))
    result = verify_bytes(data)
    if result["status"] != "PASS":
        _logger.debug("%s: %s", path, result["errors"][0]["code"])
    return result
