"""
Variable File Record Definitions
================================

Data structures for the contents of a TI single-variable file.

A file ("container") holds a comment and one or more variable entries;
tipack always produces exactly one. Each entry carries an optional folder
(TI-89/92 only), a name, a family-relative type id, an attribute and the
raw variable data exactly as the calculator stores it.

Field Widths
------------
- Names and folders: 8 bytes, zero-padded, no terminator
- Comment: 40 characters (the TI-8x header has 42 bytes of room, the
  TI-9x header 40)
"""

from dataclasses import dataclass, field
from enum import IntEnum

from tipack.calcs.models import DeviceFamily
from tipack.calcs.tokens import detokenize
from tipack.calcs.types import get_type_name


# Maximum stored width of a variable name, in bytes
VARNAME_MAX = 8

# Maximum stored width of a folder name, in bytes
FLDNAME_MAX = 8

# Maximum comment length, in characters
COMMENT_MAX = 40


# =============================================================================
# Attributes
# =============================================================================

class Attribute(IntEnum):
    """
    Variable attribute.

    Values match the TI-89/92 entry attribute byte. On the TI-8x line only
    ARCHIVED is meaningful (flag byte 0x80 in the extended entry header).
    """
    NONE = 0
    LOCKED = 1
    PROTECTED = 2
    ARCHIVED = 3

    def get_description(self) -> str:
        """Get a human-readable description of the attribute."""
        descriptions = {
            Attribute.NONE: "none",
            Attribute.LOCKED: "locked",
            Attribute.PROTECTED: "protected",
            Attribute.ARCHIVED: "archived",
        }
        return descriptions[self]


# =============================================================================
# Variable Record
# =============================================================================

@dataclass
class VariableRecord:
    """
    One variable entry.

    Attributes:
        name: Stored name bytes (plain text or BASIC tokens)
        type_id: Family-relative type id
        data: Variable data as stored, including any length prefix
        folder: Folder name bytes (TI-89/92 only, may be empty)
        attr: Variable attribute

    The ``size`` property always equals ``len(data)``.
    """
    name: bytes
    type_id: int
    data: bytes = field(default_factory=bytes, repr=False)
    folder: bytes = b""
    attr: Attribute = Attribute.NONE

    def __post_init__(self) -> None:
        """Truncate name and folder to their stored widths."""
        self.name = bytes(self.name[:VARNAME_MAX])
        self.folder = bytes(self.folder[:FLDNAME_MAX])
        self.data = bytes(self.data)

    @property
    def size(self) -> int:
        """Stored data length in bytes."""
        return len(self.data)

    @property
    def is_archived(self) -> bool:
        return self.attr == Attribute.ARCHIVED

    def padded_name(self) -> bytes:
        """Name zero-padded to VARNAME_MAX bytes."""
        return self.name.ljust(VARNAME_MAX, b"\x00")

    def padded_folder(self) -> bytes:
        """Folder zero-padded to FLDNAME_MAX bytes."""
        return self.folder.ljust(FLDNAME_MAX, b"\x00")

    def get_display_name(self, family: DeviceFamily) -> str:
        """Get the name as the calculator would show it."""
        return detokenize(family, self.name)


# =============================================================================
# File Content (container)
# =============================================================================

@dataclass
class FileContent:
    """
    Contents of one single-variable file.

    Attributes:
        family: Calculator family the file is for
        comment: Free-text comment (at most COMMENT_MAX characters)
        entries: Variable records
    """
    family: DeviceFamily
    comment: str = ""
    entries: list[VariableRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.comment = self.comment[:COMMENT_MAX]

    def add_entry(self, record: VariableRecord) -> "FileContent":
        """
        Add a variable record.

        Returns:
            Self for method chaining
        """
        self.entries.append(record)
        return self

    def describe(self) -> list[str]:
        """
        Describe the container for display.

        Returns:
            Lines of text, one header block then one line per entry

        Example:
            >>> for line in content.describe():
            ...     print(line)
            Model:     TI-83 Plus
            Comment:   Created by tipack
            Entries:   1
              PROG     PRGM     size 5     attr none
        """
        info = self.family.get_info()
        lines = [
            f"Model:     {info.name}",
            f"Signature: {info.signature.decode('ascii')}",
            f"Comment:   {self.comment}",
            f"Entries:   {len(self.entries)}",
        ]
        for record in self.entries:
            name = record.get_display_name(self.family)
            if record.folder:
                name = f"{record.folder.decode('ascii', errors='replace')}\\{name}"
            type_name = get_type_name(self.family, record.type_id)
            lines.append(
                f"  {name:<8} {type_name:<8} size {record.size:<6} "
                f"attr {record.attr.get_description()}"
            )
        return lines
