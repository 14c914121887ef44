ERRORS = {
  "E_IO": "Image file could not be read",
  "E_TRUNCATED": "Image ends inside a header or record",
  "E_MAGIC": "Image missing persistent data magic",
  "E_RECORD_KIND": "Unknown record type",
  "E_RECORD_DUPLICATE": "Record type appears more than once",
  "E_RECORD_ORDER": "Records are not in slot order",
  "E_RECORD_MAC": "Mac address record is malformed",
  "E_LENGTH_MISMATCH": "Records do not add up to the total payload length",
  "E_CHECKSUM_RECORD": "Checksum record missing or malformed",
  "E_TRAILING_BYTES": "Bytes found after the checksum record",
  "E_CHECKSUM_MISMATCH": "Stored checksum does not match image contents",
}
