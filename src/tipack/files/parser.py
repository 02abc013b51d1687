"""
Variable File Reader
====================

Parses TI single-variable files back into a FileContent. The reader is
the inverse of ``tipack.files.writer`` and is used by ``tipack -v`` style
inspection and by the test suite to check what the writer produced.

Family Detection
----------------
The family is taken from the 8-byte signature. Some families share a
signature ("**TI83F*" for the TI-83 Plus and TI-84 Plus, "**TI89**" for
both TI-89 models, "**TI92P*" for the TI-92 Plus and Voyage 200); the
first family in enum order is reported for those.

Usage Examples
--------------
    >>> from tipack.files import parse_regular_file
    >>> content = parse_regular_file("PROG.8xp")
    >>> record = content.entries[0]
    >>> record.get_display_name(content.family), record.size
    ('PROG', 5)
"""

from pathlib import Path
from typing import Optional, Union
import logging
import struct

from tipack.calcs.models import DeviceFamily, FileLayout, TOKENIZED_FAMILIES
from tipack.calcs.tokens import TOKEN_PREFIXES
from tipack.errors import FileFormatError
from tipack.files.checksum import verify_checksum
from tipack.files.records import Attribute, FileContent, VariableRecord
from tipack.files.writer import (
    TI8X_ARCHIVED_FLAG,
    TI8X_COMMENT_SIZE,
    TI9X_DATA_OFFSET,
    signature_tail,
)

# Logger for this module
logger = logging.getLogger(__name__)

# Size of the fixed TI-8x header preceding the data section
TI8X_HEADER_SIZE = 8 + 3 + TI8X_COMMENT_SIZE + 2

# Size of the fixed TI-9x header preceding the variable data
TI9X_HEADER_SIZE = TI9X_DATA_OFFSET + 4


def detect_family(data: bytes) -> Optional[DeviceFamily]:
    """
    Identify the calculator family from a file's signature.

    Returns:
        The DeviceFamily, or None if the signature is unknown
    """
    signature = bytes(data[:8])
    for family in DeviceFamily:
        if family.get_info().signature == signature:
            return family
    return None


def _trim_name(raw: bytes, family: DeviceFamily) -> bytes:
    """Strip name padding, keeping the 00 second byte of a two-byte token."""
    name = raw.rstrip(b"\x00")
    if (family in TOKENIZED_FAMILIES and len(name) == 1
            and name[0] in TOKEN_PREFIXES):
        return bytes(raw[:2])
    return bytes(name)


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("latin-1")


def _read_u16(data: bytes, offset: int, what: str) -> int:
    if offset + 2 > len(data):
        raise FileFormatError(f"File truncated reading {what} at offset {offset}")
    return struct.unpack_from("<H", data, offset)[0]


# =============================================================================
# TI-8x
# =============================================================================

def _parse_ti8x_entry(
    section: bytes,
    offset: int,
    family: DeviceFamily,
    layout: FileLayout,
) -> tuple[VariableRecord, int]:
    """Parse one entry from a TI-8x data section; return it and the next offset."""
    header_length = _read_u16(section, offset, "entry header length")
    data_length = _read_u16(section, offset + 2, "entry data length")
    header_end = offset + 2 + header_length
    if header_end + 2 > len(section):
        raise FileFormatError(f"Entry header at offset {offset} is truncated")

    type_id = section[offset + 4]
    attr = Attribute.NONE

    if layout is FileLayout.TI85:
        name_length = section[offset + 5]
        name = section[offset + 6:offset + 6 + name_length]
    else:
        name = _trim_name(section[offset + 5:offset + 13], family)
        if header_length >= 0x0D and section[offset + 14] & TI8X_ARCHIVED_FLAG:
            attr = Attribute.ARCHIVED

    repeated = _read_u16(section, header_end, "entry data length")
    if repeated != data_length:
        raise FileFormatError(
            f"Entry data lengths disagree ({data_length} vs {repeated})"
        )

    data_start = header_end + 2
    data_end = data_start + data_length
    if data_end > len(section):
        raise FileFormatError(
            f"Entry data truncated: expected {data_length} bytes, "
            f"got {len(section) - data_start}"
        )

    record = VariableRecord(
        name=bytes(name),
        type_id=type_id,
        data=bytes(section[data_start:data_end]),
        attr=attr,
    )
    return record, data_end


def _parse_ti8x(data: bytes, family: DeviceFamily, verify: bool) -> FileContent:
    if len(data) < TI8X_HEADER_SIZE + 2:
        raise FileFormatError(f"File too short ({len(data)} bytes)")
    if data[8:11] != signature_tail(family):
        raise FileFormatError(f"Invalid signature tail {data[8:11]!r}")

    comment = _decode_text(data[11:11 + TI8X_COMMENT_SIZE])
    section_length = _read_u16(data, 53, "data section length")
    section_end = TI8X_HEADER_SIZE + section_length
    if section_end + 2 > len(data):
        raise FileFormatError(
            f"Data section truncated: header says {section_length} bytes"
        )

    section = data[TI8X_HEADER_SIZE:section_end]
    stored = _read_u16(data, section_end, "checksum")
    if verify and not verify_checksum(section, stored):
        raise FileFormatError(f"Checksum mismatch (stored 0x{stored:04X})")

    layout = family.get_info().layout
    content = FileContent(family=family, comment=comment)
    offset = 0
    while offset < len(section):
        record, offset = _parse_ti8x_entry(section, offset, family, layout)
        content.add_entry(record)

    return content


# =============================================================================
# TI-9x
# =============================================================================

def _parse_ti9x(data: bytes, family: DeviceFamily, verify: bool) -> FileContent:
    if len(data) < TI9X_HEADER_SIZE + 2:
        raise FileFormatError(f"File too short ({len(data)} bytes)")

    folder = data[10:18].rstrip(b"\x00")
    comment = _decode_text(data[18:58])
    count = _read_u16(data, 58, "entry count")
    if count != 1:
        raise FileFormatError(f"Expected a single-variable file, found {count} entries")

    offset = struct.unpack_from("<I", data, 60)[0]
    name = data[64:72].rstrip(b"\x00")
    type_id = data[72]
    try:
        attr = Attribute(data[73])
    except ValueError:
        raise FileFormatError(f"Unknown attribute 0x{data[73]:02X}")

    file_size = struct.unpack_from("<I", data, 76)[0]
    if file_size != len(data):
        raise FileFormatError(
            f"File size field is {file_size}, file is {len(data)} bytes"
        )

    data_start = offset + 4
    payload = data[data_start:len(data) - 2]
    stored = _read_u16(data, len(data) - 2, "checksum")
    if verify and not verify_checksum(payload, stored):
        raise FileFormatError(f"Checksum mismatch (stored 0x{stored:04X})")

    record = VariableRecord(
        name=bytes(name),
        type_id=type_id,
        data=bytes(payload),
        folder=bytes(folder),
        attr=attr,
    )
    return FileContent(family=family, comment=comment, entries=[record])


# =============================================================================
# Public API
# =============================================================================

def parse_regular(data: bytes, verify: bool = False) -> FileContent:
    """
    Parse a single-variable file.

    Args:
        data: The complete file contents
        verify: Check the stored checksum

    Returns:
        FileContent with the file's family, comment and entries

    Raises:
        FileFormatError: If the file is not a valid variable file
    """
    family = detect_family(data)
    if family is None:
        raise FileFormatError(f"Unknown file signature {bytes(data[:8])!r}")

    logger.debug(f"Detected {family.get_info().name} file ({len(data)} bytes)")

    if family.get_info().is_ti9x:
        return _parse_ti9x(data, family, verify)
    return _parse_ti8x(data, family, verify)


def parse_regular_file(
    filepath: Union[str, Path],
    verify: bool = False,
) -> FileContent:
    """
    Parse a single-variable file from disk.

    Raises:
        FileFormatError: If the file cannot be read or is invalid
    """
    filepath = Path(filepath)
    try:
        data = filepath.read_bytes()
    except OSError as e:
        raise FileFormatError(f"Cannot read {filepath}: {e.strerror}") from e
    return parse_regular(data, verify=verify)
