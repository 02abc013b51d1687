"""
tipack Error Hierarchy
======================

This module defines the exception hierarchy for tipack. All exceptions
inherit from TipackError, allowing callers to catch every packer-related
error with a single except clause.

Exception Hierarchy
-------------------
TipackError (base)
├── UsageError - bad or missing arguments
│   ├── UnknownTypeError - type string matches no registered variable type
│   └── NameConversionError - name cannot be tokenized for the calculator
├── InputError - input file cannot be opened or read
├── OutputError - output file cannot be produced
│   └── FileWriteError - structured error reported by the file writer
└── FileFormatError - malformed calculator file (reader side)

The command-line tool maps these onto exit codes:
    UsageError  -> 1
    InputError  -> 2
    OutputError -> 3
"""

from enum import IntEnum
from pathlib import Path
from typing import Optional, Union


# =============================================================================
# Base Exception Class
# =============================================================================

class TipackError(Exception):
    """
    Base exception for all tipack errors.

        try:
            pack(request)
        except TipackError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Usage Errors
# =============================================================================

class UsageError(TipackError):
    """
    Invalid or missing command-line arguments.

    Raised when:
    - No variable type was given and none can be derived from the output name
    - The variable type string is not recognized
    - A variable name cannot be derived for the requested type
    """
    pass


class UnknownTypeError(UsageError):
    """
    The type string does not name a registered variable type.

    Attributes:
        type_string: The rejected extension-style type (e.g. "8xq")
    """

    def __init__(self, type_string: str):
        self.type_string = type_string
        super().__init__(f"invalid variable type {type_string}")


class NameConversionError(UsageError):
    """
    A variable name cannot be converted to the calculator's token encoding.

    Attributes:
        name: The name that failed to convert
        reason: Why the conversion failed
    """

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"cannot convert variable name '{name}': {reason}")


# =============================================================================
# Input Errors
# =============================================================================

class InputError(TipackError):
    """
    The input file cannot be opened or read.

    Attributes:
        path: The input path
        reason: The underlying system error message
    """

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


# =============================================================================
# Output Errors
# =============================================================================

class OutputError(TipackError):
    """Base exception for failures producing the output file."""
    pass


class FileErrorCode(IntEnum):
    """Structured error codes reported by the file writer."""
    FILE_OPEN = 1           # Output file cannot be created
    FILE_WRITE = 2          # Write failed part way (disk full, I/O error)
    INVALID_ATTRIBUTE = 3   # Attribute not supported by the calculator
    VARIABLE_TOO_LARGE = 4  # Data does not fit the entry length field
    EMPTY_NAME = 5          # Variable name is empty
    ENTRY_COUNT = 6         # Container does not hold exactly one variable


class FileWriteError(OutputError):
    """
    Error reported by the file writer.

    The writer reports a FileErrorCode; the message is derived from the
    code unless one is given explicitly.

    Attributes:
        code: The structured error code
        path: Output path, when known
    """

    def __init__(
        self,
        code: FileErrorCode,
        message: str = "",
        path: Optional[Union[str, Path]] = None,
    ):
        self.code = code
        self.path = path
        if not message:
            message = self._default_message(code)
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)

    @staticmethod
    def _default_message(code: FileErrorCode) -> str:
        """Get default message for known error codes."""
        messages = {
            FileErrorCode.FILE_OPEN: "Unable to open file for writing",
            FileErrorCode.FILE_WRITE: "Error writing file (disk full?)",
            FileErrorCode.INVALID_ATTRIBUTE: (
                "Attribute not supported by this calculator model"
            ),
            FileErrorCode.VARIABLE_TOO_LARGE: (
                "Variable is too large for this file format"
            ),
            FileErrorCode.EMPTY_NAME: "Variable name is empty",
            FileErrorCode.ENTRY_COUNT: (
                "A single-variable file must contain exactly one variable"
            ),
        }
        return messages.get(code, f"File error ({int(code)})")


# =============================================================================
# Reader Errors
# =============================================================================

class FileFormatError(TipackError):
    """
    Invalid calculator file.

    Raised when reading a file that:
    - Has an unknown signature
    - Is truncated or has inconsistent length fields
    - Fails the checksum (only when verification is requested)
    """
    pass
