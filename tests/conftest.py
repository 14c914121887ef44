import struct

import pytest

MAGIC = 0x19081400


def craft_image(*records, magic=MAGIC, checksum_offset=0, trailer=b""):
    """Assemble an image by hand from (type, payload) pairs."""
    body = b"".join(struct.pack("<II", t, len(p)) + p for t, p in records)
    head = struct.pack("<II", magic, len(body))
    value = (sum(head) + sum(body) + checksum_offset) & 0xFFFFFFFF
    return head + body + struct.pack("<III", 0xF0FF, 4, value) + trailer


@pytest.fixture
def craft():
    return craft_image
