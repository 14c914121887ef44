"""TLV records and the per-image record accumulator."""
from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator

from .errors import (
    DuplicateRecord,
    PayloadTooLarge,
    ReservedRecordKind,
)
from .mac import validate_mac
from .protocol import (
    BT_MAC_TYPE,
    CHECKSUM_TYPE,
    MAX_PAYLOAD_LEN,
    REC_HEADER_FMT,
    REC_HEADER_LEN,
    SLOT_ORDER,
    SN_TYPE,
    U32_MASK,
    WIFI_MAC_TYPE,
    ZB_MAC_TYPE,
)

_logger = logging.getLogger(__name__)


class RecordKind(IntEnum):
    SERIAL_NUMBER = SN_TYPE
    WIFI_MAC = WIFI_MAC_TYPE
    BLUETOOTH_MAC = BT_MAC_TYPE
    ZIGBEE_MAC = ZB_MAC_TYPE
    CHECKSUM = CHECKSUM_TYPE

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    RecordKind.SERIAL_NUMBER: "serial number",
    RecordKind.WIFI_MAC: "wifi mac address",
    RecordKind.BLUETOOTH_MAC: "bluetooth mac address",
    RecordKind.ZIGBEE_MAC: "zigbee mac address",
    RecordKind.CHECKSUM: "checksum",
}

MAC_KINDS = frozenset({RecordKind.WIFI_MAC, RecordKind.BLUETOOTH_MAC})


def to_payload(text: str) -> bytes:
    """Return the bytes the OS would pass for ``text`` on the command line."""
    return os.fsencode(text)


@dataclass(frozen=True)
class Record:
    kind: RecordKind
    payload: bytes

    @property
    def length(self) -> int:
        return len(self.payload)

    @property
    def size(self) -> int:
        """Header plus payload, in bytes."""
        return REC_HEADER_LEN + len(self.payload)

    def pack(self) -> bytes:
        return struct.pack(REC_HEADER_FMT, int(self.kind), self.length) + self.payload


def build_record(kind: RecordKind, payload: bytes) -> Record:
    kind = RecordKind(kind)
    payload = bytes(payload)
    if len(payload) > MAX_PAYLOAD_LEN:
        raise PayloadTooLarge(f"{kind.label} payload of {len(payload)} bytes exceeds the 32-bit length field")
    return Record(kind, payload)


class RecordSet:
    """Identity records for one image.

    Holds at most one record per kind and iterates in slot order
    (serial number, wifi, bluetooth, zigbee) regardless of insertion order.
    ``total_length`` is the header-plus-payload byte count of everything held.
    """

    def __init__(self) -> None:
        self._records: Dict[RecordKind, Record] = {}
        self.total_length = 0

    def try_add(self, kind: RecordKind, payload: bytes) -> Record:
        kind = RecordKind(kind)
        if kind == RecordKind.CHECKSUM:
            raise ReservedRecordKind("the checksum record is appended by the serializer")
        if kind in self._records:
            raise DuplicateRecord(kind)

        record = build_record(kind, payload)
        if self.total_length + record.size > U32_MASK:
            raise PayloadTooLarge("total payload length exceeds the 32-bit length field")

        self._records[kind] = record
        self.total_length += record.size
        _logger.debug("added %s (%d bytes), total %d", kind.label, record.length, self.total_length)
        return record

    def add_serial_number(self, serial_number: str) -> Record:
        return self.try_add(RecordKind.SERIAL_NUMBER, to_payload(serial_number))

    def add_mac(self, kind: RecordKind, address: str, strict: bool = True) -> Record:
        """Validate ``address`` and store it as its 17 text bytes."""
        if kind not in MAC_KINDS:
            raise ValueError(f"{RecordKind(kind).label} is not a validated mac record")
        validate_mac(address, strict)
        return self.try_add(kind, to_payload(address))

    def add_zigbee_mac(self, address: str) -> Record:
        return self.try_add(RecordKind.ZIGBEE_MAC, to_payload(address))

    def get(self, kind: RecordKind) -> Record | None:
        return self._records.get(RecordKind(kind))

    def __contains__(self, kind) -> bool:
        return kind in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        for tag in SLOT_ORDER:
            record = self._records.get(RecordKind(tag))
            if record is not None:
                yield record
