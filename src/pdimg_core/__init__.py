"""pdimg core - persistent data image records, checksum and layout."""
from .checksum import apply_test_offset, checksum, sum_bytes
from .errors import (
    BuildError,
    DuplicateRecord,
    ImageIOError,
    MalformedAddress,
    ManifestError,
    PayloadTooLarge,
    PdImageError,
    ReservedRecordKind,
    ValidationError,
    VendorPrefixMismatch,
)
from .image import serialize, total_payload_length, write_all
from .mac import is_valid_mac, validate_mac
from .records import Record, RecordKind, RecordSet, build_record

__all__ = [
    "apply_test_offset", "checksum", "sum_bytes",
    "BuildError", "DuplicateRecord", "ImageIOError", "MalformedAddress", "ManifestError",
    "PayloadTooLarge", "PdImageError", "ReservedRecordKind",
    "ValidationError", "VendorPrefixMismatch",
    "serialize", "total_payload_length", "write_all",
    "is_valid_mac", "validate_mac",
    "Record", "RecordKind", "RecordSet", "build_record",
]
