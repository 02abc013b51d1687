"""
Variable File Writer
====================

Serializes a FileContent holding one variable to the TI single-variable
("regular") file format of its calculator family.

File Layouts
------------
All integers are little-endian.

**TI-8x header** (TI-73, 82, 83, 83+, 84+, 85, 86):

    Offset  Size    Description
    ------  ----    -----------
    0       8       Signature ("**TI83F*", "**TI82**", ...)
    8       3       1A 0A 00 (1A 0C 00 on the TI-85)
    11      42      Comment, zero-padded
    53      2       Data section length
    55      n       Data section (variable entries)
    55+n    2       Checksum of the data section

**TI-82/83 entry** (11-byte header) and **TI-73/83+/84+ entry** (13-byte):

    2   Header length (0x0B or 0x0D)
    2   Data length
    1   Type id
    8   Name, zero-padded
    1   Version (0)            -- 13-byte header only
    1   Flag (0x80 = archived) -- 13-byte header only
    2   Data length
    n   Data

**TI-85/86 entry**:

    2   Header length (4 + name field length)
    2   Data length
    1   Type id
    1   Name length
    k   Name (TI-85: k = name length; TI-86: padded to 8)
    2   Data length
    n   Data

**TI-9x file** (TI-89, 92, 92+, V200):

    Offset  Size    Description
    ------  ----    -----------
    0       8       Signature ("**TI89**", "**TI92P*", ...)
    8       2       01 00
    10      8       Folder name ("main" when empty)
    18      40      Comment, zero-padded
    58      2       Number of entries (1)
    60      4       Offset of variable data (0x52)
    64      8       Variable name
    72      1       Type id
    73      1       Attribute
    74      2       00 00
    76      4       File size
    80      2       A5 5A
    82      4       00 00 00 00
    86      n       Data
    86+n    2       Checksum of the data

Reference
---------
- https://merthsoft.com/linkguide/ti83+/fformat.html
- https://merthsoft.com/linkguide/ti89/fformat.html
"""

from pathlib import Path
from typing import Optional, Union
import logging
import struct

from tipack.calcs.models import DeviceFamily, FileLayout
from tipack.errors import FileErrorCode, FileWriteError
from tipack.files.checksum import encode_checksum
from tipack.files.records import COMMENT_MAX, FileContent, VariableRecord


# Bytes following the 8-byte signature of a TI-8x file
TI8X_SIGNATURE_TAIL = b"\x1a\x0a\x00"

# The TI-85 uses its own tail; the TI-86 shares the TI-8x one
TI85_SIGNATURE_TAIL = b"\x1a\x0c\x00"

# Width of the TI-8x comment field
TI8X_COMMENT_SIZE = 42

# Entry header lengths
TI8X_HEADER_LENGTH = 0x0B
TI8X_EXT_HEADER_LENGTH = 0x0D

# Flag byte for archived variables in the 13-byte entry header
TI8X_ARCHIVED_FLAG = 0x80

# Largest data length a TI-8x entry can describe
TI8X_MAX_DATA = 0xFFFF

# TI-9x header constants
TI9X_SIGNATURE_TAIL = b"\x01\x00"
TI9X_DEFAULT_FOLDER = b"main"
TI9X_DATA_MARKER = b"\xa5\x5a"
TI9X_DATA_OFFSET = 0x52


def signature_tail(family: DeviceFamily) -> bytes:
    """Get the bytes that follow the signature of a TI-8x file."""
    if family == DeviceFamily.TI85:
        return TI85_SIGNATURE_TAIL
    return TI8X_SIGNATURE_TAIL


# =============================================================================
# Validation
# =============================================================================

def _check_content(content: FileContent) -> VariableRecord:
    """Validate a container and return its single record."""
    if len(content.entries) != 1:
        raise FileWriteError(FileErrorCode.ENTRY_COUNT)

    record = content.entries[0]
    info = content.family.get_info()

    if not record.name:
        raise FileWriteError(FileErrorCode.EMPTY_NAME)

    if record.is_archived and not info.has_archive:
        raise FileWriteError(
            FileErrorCode.INVALID_ATTRIBUTE,
            f"{info.name} has no archive memory",
        )

    if info.is_ti8x and record.size > TI8X_MAX_DATA:
        raise FileWriteError(
            FileErrorCode.VARIABLE_TOO_LARGE,
            f"Variable data is {record.size} bytes; "
            f"{info.name} files hold at most {TI8X_MAX_DATA}",
        )

    return record


# =============================================================================
# Encoders
# =============================================================================

def _encode_comment(comment: str, size: int) -> bytes:
    raw = comment[:COMMENT_MAX].encode("latin-1", errors="replace")
    return raw[:size].ljust(size, b"\x00")


def _encode_ti8x_entry(record: VariableRecord, extended: bool) -> bytes:
    result = bytearray()
    result.extend(struct.pack(
        "<HHB",
        TI8X_EXT_HEADER_LENGTH if extended else TI8X_HEADER_LENGTH,
        record.size,
        record.type_id,
    ))
    result.extend(record.padded_name())
    if extended:
        result.append(0)  # Version
        result.append(TI8X_ARCHIVED_FLAG if record.is_archived else 0)
    result.extend(struct.pack("<H", record.size))
    result.extend(record.data)
    return bytes(result)


def _encode_ti85_entry(record: VariableRecord, family: DeviceFamily) -> bytes:
    name = record.name.rstrip(b"\x00")
    if family is DeviceFamily.TI86:
        name_field = record.padded_name()
    else:
        name_field = name

    result = bytearray()
    result.extend(struct.pack("<HHBB", 4 + len(name_field), record.size,
                              record.type_id, len(name)))
    result.extend(name_field)
    result.extend(struct.pack("<H", record.size))
    result.extend(record.data)
    return bytes(result)


def _encode_ti8x(content: FileContent, record: VariableRecord) -> bytes:
    info = content.family.get_info()

    if info.layout is FileLayout.TI85:
        entry = _encode_ti85_entry(record, content.family)
    else:
        entry = _encode_ti8x_entry(
            record, extended=info.layout is FileLayout.TI8X_EXT
        )

    if len(entry) > 0xFFFF:
        raise FileWriteError(
            FileErrorCode.VARIABLE_TOO_LARGE,
            f"Data section is {len(entry)} bytes; "
            f"{info.name} files hold at most {0xFFFF}",
        )

    result = bytearray()
    result.extend(info.signature)
    result.extend(signature_tail(content.family))
    result.extend(_encode_comment(content.comment, TI8X_COMMENT_SIZE))
    result.extend(struct.pack("<H", len(entry)))
    result.extend(entry)
    result.extend(encode_checksum(entry))
    return bytes(result)


def _encode_ti9x(content: FileContent, record: VariableRecord) -> bytes:
    info = content.family.get_info()
    folder = record.padded_folder() if record.folder else \
        TI9X_DEFAULT_FOLDER.ljust(8, b"\x00")
    file_size = TI9X_DATA_OFFSET + 4 + record.size + 2

    result = bytearray()
    result.extend(info.signature)
    result.extend(TI9X_SIGNATURE_TAIL)
    result.extend(folder)
    result.extend(_encode_comment(content.comment, COMMENT_MAX))
    result.extend(struct.pack("<H", 1))

    # Entry table
    result.extend(struct.pack("<I", TI9X_DATA_OFFSET))
    result.extend(record.padded_name())
    result.extend(struct.pack("<BBH", record.type_id, int(record.attr), 0))

    result.extend(struct.pack("<I", file_size))
    result.extend(TI9X_DATA_MARKER)
    result.extend(b"\x00\x00\x00\x00")
    result.extend(record.data)
    result.extend(encode_checksum(record.data))
    return bytes(result)


def encode_regular(content: FileContent) -> bytes:
    """
    Serialize a single-variable container.

    Args:
        content: Container holding exactly one VariableRecord

    Returns:
        Complete file as bytes

    Raises:
        FileWriteError: If the container cannot be represented in the
            family's file format (wrong entry count, empty name, archive
            on a model without archive memory, data too large)

    Example:
        >>> record = VariableRecord(b"PROG", 0x05, b"\\x00\\x00")
        >>> data = encode_regular(FileContent(DeviceFamily.TI83P, "", [record]))
        >>> data[:8]
        b'**TI83F*'
    """
    record = _check_content(content)
    if content.family.get_info().is_ti9x:
        return _encode_ti9x(content, record)
    return _encode_ti8x(content, record)


# =============================================================================
# File Output
# =============================================================================

def write_regular(
    filepath: Union[str, Path],
    content: FileContent,
    logger: Optional[logging.Logger] = None,
) -> int:
    """
    Serialize a container and write it to disk.

    Args:
        filepath: Output file path
        content: Container holding exactly one VariableRecord
        logger: Logger for progress messages (defaults to this module's)

    Returns:
        Number of bytes written

    Raises:
        FileWriteError: On format errors (see encode_regular) or if the
            file cannot be created or written
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    filepath = Path(filepath)

    try:
        data = encode_regular(content)
    except FileWriteError as e:
        e.path = filepath
        raise

    try:
        handle = open(filepath, "wb")
    except OSError as e:
        raise FileWriteError(
            FileErrorCode.FILE_OPEN, f"Unable to open file: {e.strerror}",
            path=filepath,
        ) from e

    with handle:
        try:
            handle.write(data)
        except OSError as e:
            raise FileWriteError(
                FileErrorCode.FILE_WRITE, f"Error writing file: {e.strerror}",
                path=filepath,
            ) from e

    log.info(f"Wrote {filepath} ({len(data)} bytes)")
    return len(data)
