"""
TI Variable File Handling
=========================

Reading and writing TI single-variable ("regular") files: the .8xp,
.83l, .85s, .89p, ... files a link program sends to a calculator.

This module provides:
- **PayloadAssembler**: Read raw variable data and apply length framing
- **build_record / build_content**: Assemble a variable and its container
- **encode_regular / write_regular**: Serialize a container to a file
- **parse_regular / parse_regular_file**: Read a file back
- **Checksum utilities**: The additive 16-bit file checksum

Quick Start
-----------
    >>> from tipack.calcs import DeviceFamily
    >>> from tipack.files import build_record, build_content, write_regular
    >>> record = build_record("PROG", 0x05, b"\\x03\\x00\\x01\\x02\\x03")
    >>> content = build_content(DeviceFamily.TI83P, record, "Made by hand")
    >>> write_regular("PROG.8xp", content)
    79
"""

# =============================================================================
# Public API Exports
# =============================================================================

# Record definitions
from tipack.files.records import (
    Attribute,
    VariableRecord,
    FileContent,
    VARNAME_MAX,
    FLDNAME_MAX,
    COMMENT_MAX,
)

# Checksum utilities
from tipack.files.checksum import (
    calculate_checksum,
    encode_checksum,
    verify_checksum,
)

# Payload assembly
from tipack.files.payload import (
    PayloadAssembler,
    frame_payload,
    read_all,
)

# Record building
from tipack.files.builder import (
    build_content,
    build_record,
    derive_variable_name,
    format_comment,
    transliterate_name,
)

# Serialization
from tipack.files.writer import encode_regular, write_regular
from tipack.files.parser import detect_family, parse_regular, parse_regular_file

__all__ = [
    # Records
    "Attribute",
    "VariableRecord",
    "FileContent",
    "VARNAME_MAX",
    "FLDNAME_MAX",
    "COMMENT_MAX",
    # Checksums
    "calculate_checksum",
    "encode_checksum",
    "verify_checksum",
    # Payload
    "PayloadAssembler",
    "frame_payload",
    "read_all",
    # Building
    "build_content",
    "build_record",
    "derive_variable_name",
    "format_comment",
    "transliterate_name",
    # Serialization
    "encode_regular",
    "write_regular",
    "detect_family",
    "parse_regular",
    "parse_regular_file",
]
