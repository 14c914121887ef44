"""MAC address validation."""
from __future__ import annotations

import logging
import os

from .errors import MalformedAddress, VendorPrefixMismatch
from .protocol import MAC_ADDRESS_LEN, MAC_DELIMITER, MAC_OCTETS, VENDOR_PREFIX

_logger = logging.getLogger(__name__)


def validate_mac(address: str, strict: bool = True) -> None:
    """Check ``address`` against the ``xx:xx:xx:xx:xx:xx`` shape.

    With ``strict`` the first three octets must also be the vendor prefix
    ``00:50:43``. Octet content is otherwise not inspected, but in both modes
    the address must encode to exactly 17 bytes, the size of a mac record
    payload, so ``0:50:43:12:34:56`` is rejected even when not strict. Raises
    ``MalformedAddress`` or ``VendorPrefixMismatch``; returns None on success.
    """
    _logger.debug("mac address is %s", address)

    # str.split leaves the caller's string alone and keeps empty tokens,
    # so "a::b" and a trailing ":" both show up as blanks.
    tokens = address.split(MAC_DELIMITER)
    if len(tokens) != MAC_OCTETS:
        raise MalformedAddress(
            address, f"expected {MAC_OCTETS} '{MAC_DELIMITER}'-separated octets, got {len(tokens)}"
        )
    for index, token in enumerate(tokens, start=1):
        _logger.debug("validate_mac(): %d - %s", index, token)
        if not token:
            raise MalformedAddress(address, f"octet {index} is empty")

    if strict:
        for index, (token, expected) in enumerate(zip(tokens, VENDOR_PREFIX), start=1):
            if token != expected:
                raise VendorPrefixMismatch(address, index, expected, token)

    if len(os.fsencode(address)) != MAC_ADDRESS_LEN:
        raise MalformedAddress(address, f"expected {MAC_ADDRESS_LEN} characters")


def is_valid_mac(address: str, strict: bool = True) -> bool:
    try:
        validate_mac(address, strict)
    except (MalformedAddress, VendorPrefixMismatch):
        return False
    return True
