import sys
from pathlib import Path

# magic + total length + checksum record
MIN_IMAGE_LEN = 8 + 12
CHECKSUM_REC_LEN = 12

def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: corrupt_one_byte.py <image> [offset]")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < MIN_IMAGE_LEN:
        print("File too small to be a persistent data image.")
        raise SystemExit(2)

    # Default: flip the last byte covered by the checksum, so the layout
    # still parses and only the checksum comparison fails.
    idx = int(sys.argv[2], 0) if len(sys.argv) == 3 else len(b) - CHECKSUM_REC_LEN - 1
    if not 0 <= idx < len(b):
        print(f"Offset {idx} outside image of {len(b)} bytes.")
        raise SystemExit(2)
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
