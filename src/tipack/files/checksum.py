"""
Variable File Checksums
=======================

Every TI single-variable file ends with a 16-bit little-endian checksum:
the sum of a range of bytes, modulo 65536.

- TI-8x files: the whole data section (every variable entry, headers
  included)
- TI-9x files: the variable data only

Reference
---------
- https://merthsoft.com/linkguide/ti83+/fformat.html
"""

import struct


def calculate_checksum(data: bytes) -> int:
    """
    Calculate the additive 16-bit checksum.

    Args:
        data: The checksummed byte range

    Returns:
        16-bit checksum value (0x0000 - 0xFFFF)

    Example:
        >>> calculate_checksum(bytes([0xFF, 0xFF, 0x02]))
        512
    """
    return sum(data) & 0xFFFF


def encode_checksum(data: bytes) -> bytes:
    """Calculate the checksum of ``data`` and return it as 2 LE bytes."""
    return struct.pack("<H", calculate_checksum(data))


def verify_checksum(data: bytes, stored: int) -> bool:
    """
    Verify a stored checksum.

    Args:
        data: The checksummed byte range
        stored: Checksum read from the file

    Returns:
        True if the checksum matches
    """
    return calculate_checksum(data) == stored
