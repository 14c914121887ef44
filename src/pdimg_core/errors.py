"""Error taxonomy for image construction.

Every error is fatal to the build. ``code`` is stable and matches the codes
reported by the verifier and printed by the command line tools.
"""
from __future__ import annotations


class PdImageError(Exception):
    code = "E_PDIMG"


class ValidationError(PdImageError):
    code = "E_MAC"

    def __init__(self, address: str, reason: str):
        super().__init__(f"{address}: {reason}")
        self.address = address
        self.reason = reason


class MalformedAddress(ValidationError):
    code = "E_MAC_MALFORMED"


class VendorPrefixMismatch(ValidationError):
    code = "E_MAC_VENDOR"

    def __init__(self, address: str, index: int, expected: str, found: str):
        super().__init__(
            address,
            f"not a valid vendor mac address (index {index}-{found} is wrong, expected {expected})",
        )
        self.index = index
        self.expected = expected
        self.found = found


class BuildError(PdImageError):
    code = "E_BUILD"


class DuplicateRecord(BuildError):
    code = "E_RECORD_DUPLICATE"

    def __init__(self, kind):
        super().__init__(f"record {kind.label} already present")
        self.kind = kind


class PayloadTooLarge(BuildError):
    code = "E_RECORD_SIZE"


class ReservedRecordKind(BuildError):
    code = "E_RECORD_RESERVED"


class ImageIOError(PdImageError):
    code = "E_IO"


class ManifestError(PdImageError):
    code = "E_MANIFEST"
