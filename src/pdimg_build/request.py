from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pdimg_core.errors import ImageIOError
from pdimg_core.image import image_size, serialize
from pdimg_core.records import RecordKind, RecordSet

_logger = logging.getLogger(__name__)


@dataclass
class BuildRequest:
    """One image worth of identity data. Every field but ``output`` is optional."""

    output: Path
    serial_number: str | None = None
    wifi_mac: str | None = None
    wifi_mac_strict: bool = True
    bt_mac: str | None = None
    bt_mac_strict: bool = True
    zb_mac: str | None = None
    test_offset: int = 0


@dataclass(frozen=True)
class BuildResult:
    output: Path
    size: int
    checksum: int
    record_count: int


def collect_records(request: BuildRequest) -> RecordSet:
    records = RecordSet()
    if request.serial_number is not None:
        records.add_serial_number(request.serial_number)
    if request.wifi_mac is not None:
        records.add_mac(RecordKind.WIFI_MAC, request.wifi_mac, request.wifi_mac_strict)
    if request.bt_mac is not None:
        records.add_mac(RecordKind.BLUETOOTH_MAC, request.bt_mac, request.bt_mac_strict)
    if request.zb_mac is not None:
        records.add_zigbee_mac(request.zb_mac)
    return records


def build_image(request: BuildRequest) -> BuildResult:
    """Validate the request and write the image to ``request.output``.

    All validation happens before the output file is opened. A failure after
    that point can leave a truncated file behind; callers should discard it.
    """
    records = collect_records(request)
    if not len(records):
        _logger.info("building an image with no identity records")

    out = Path(request.output)
    try:
        f = open(out, "w+b")
    except OSError as e:
        raise ImageIOError(f"Could not open output file <{out}>: {e.strerror or e}") from e
    with f:
        value = serialize(records, f, request.test_offset)

    result = BuildResult(out, image_size(records.total_length), value, len(records))
    _logger.info("image %s: %d records, %d bytes, checksum 0x%08x", out, len(records), result.size, value)
    return result
