"""
tipack - TI Calculator Variable Packer
======================================

This package turns raw data into the single-variable files (.8xp, .83l,
.85s, .89p, ...) that TI graphing calculator link software sends to a
calculator.

Supported calculators: TI-73, TI-82, TI-83, TI-83 Plus, TI-84 Plus,
TI-85, TI-86, TI-89, TI-89 Titanium, TI-92, TI-92 Plus and Voyage 200.

Main Components
---------------
- **calcs**: Calculator definitions
    Device families, variable type registry, packaging policy and
    variable name tokenization

- **files**: Variable file handling
    Payload framing, record building, file writer and reader

- **packer**: Pack orchestration
    Resolves paths and types and runs the full pipeline

Quick Start
-----------
Pack a program:
    >>> from tipack import PackRequest, pack
    >>> result = pack(PackRequest(input_path="prog.bin", type_string="8xp"))
    >>> result.output_path, result.bytes_written
    (PosixPath('prog.8xp'), 79)

Resolve a type:
    >>> from tipack import resolve
    >>> resolve("82p").family
    <DeviceFamily.TI82: 2>

Or use the command-line tool:
    $ tipack -t 8xp prog.bin
    $ tipack -o HELLO.83p -p hello.bin

Reference Documentation
-----------------------
- TI-83 Plus file format: https://merthsoft.com/linkguide/ti83+/fformat.html
- TI-89 file format: https://merthsoft.com/linkguide/ti89/fformat.html

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from tipack.errors import (
    TipackError,
    UsageError,
    UnknownTypeError,
    NameConversionError,
    InputError,
    OutputError,
    FileErrorCode,
    FileWriteError,
    FileFormatError,
)

from tipack.calcs import (
    DeviceFamily,
    VarType,
    resolve,
    typeid_to_extension,
    resolve_type_id,
    tokenize,
)

from tipack.files import (
    Attribute,
    VariableRecord,
    FileContent,
    PayloadAssembler,
    build_record,
    build_content,
    encode_regular,
    write_regular,
    parse_regular,
    parse_regular_file,
)

from tipack.config import PackConfig
from tipack.packer import PackRequest, PackResult, pack, resolve_paths, resolve_type

__all__ = [
    # Version
    "__version__",
    # Errors
    "TipackError",
    "UsageError",
    "UnknownTypeError",
    "NameConversionError",
    "InputError",
    "OutputError",
    "FileErrorCode",
    "FileWriteError",
    "FileFormatError",
    # Calculators
    "DeviceFamily",
    "VarType",
    "resolve",
    "typeid_to_extension",
    "resolve_type_id",
    "tokenize",
    # Files
    "Attribute",
    "VariableRecord",
    "FileContent",
    "PayloadAssembler",
    "build_record",
    "build_content",
    "encode_regular",
    "write_regular",
    "parse_regular",
    "parse_regular_file",
    # Packing
    "PackConfig",
    "PackRequest",
    "PackResult",
    "pack",
    "resolve_paths",
    "resolve_type",
]
