"""Persistent data image protocol constants.

Single source of truth for the on-disk magic, type tags and record layout.
Keep this file stable. Builder and verifier must remain synchronized.
"""

# Image header: [Magic(4) | TotalPayloadLength(4)] = 8 bytes
IMAGE_MAGIC = 0x19081400
IMAGE_HEADER_FMT = "<II"
IMAGE_HEADER_LEN = 8

# Record header: [Type(4) | Length(4)] = 8 bytes, payload follows
REC_HEADER_FMT = "<II"
REC_HEADER_LEN = 8

# Type tags
SN_TYPE = 0xF001
WIFI_MAC_TYPE = 0xF002
BT_MAC_TYPE = 0xF003
ZB_MAC_TYPE = 0xF004
CHECKSUM_TYPE = 0xF0FF

# Identity records are written in this order, whatever order they were added in
SLOT_ORDER = (SN_TYPE, WIFI_MAC_TYPE, BT_MAC_TYPE, ZB_MAC_TYPE)

# Checksum record: header + u32 value = 12 bytes
CHECKSUM_FMT = "<I"
CHECKSUM_LEN = 4
CHECKSUM_REC_LEN = REC_HEADER_LEN + CHECKSUM_LEN

U32_MASK = 0xFFFFFFFF
MAX_PAYLOAD_LEN = U32_MASK

# MAC addresses: xx:xx:xx:xx:xx:xx
MAC_ADDRESS_LEN = 17
MAC_DELIMITER = ":"
MAC_OCTETS = 6
VENDOR_PREFIX = ("00", "50", "43")
