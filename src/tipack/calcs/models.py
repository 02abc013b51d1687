"""
TI Calculator Family Definitions
================================

This module defines the calculator families tipack can produce files for,
grouped by the conventions their variable files share.

Family Groups
-------------
- **Tokenized-BASIC** (TI-73, TI-82, TI-83, TI-83 Plus, TI-84 Plus):
  Z80 machines whose system variable names (L1, Str1, [A], ...) are stored
  as BASIC tokens.
- **Non-tokenized legacy** (TI-85, TI-86): Z80 machines whose variable
  names are plain text.
- **9x** (TI-89, TI-89 Titanium, TI-92, TI-92 Plus, Voyage 200): 68000
  machines with folders and a completely different file layout.

The first two groups together form the TI-8x line; their files share the
same header and only differ in the variable entry layout.

File Extensions
---------------
Every variable file extension starts with a two-character family prefix
("73", "82", "83", "8x", "85", "86", "89", "92", "9x", "v2") followed by
one or more type characters ("p" for program, "l" for list, ...).

Reference
---------
- TI link guide: https://merthsoft.com/linkguide/ti83+/fformat.html
- TI-89/92 file format: https://merthsoft.com/linkguide/ti89/fformat.html
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


# =============================================================================
# Family Enumeration
# =============================================================================

class DeviceFamily(IntEnum):
    """
    Calculator families supported by tipack.

    Usage:
        >>> family = DeviceFamily.TI83P
        >>> family.get_info().name
        'TI-83 Plus'
    """
    TI73 = 1
    TI82 = 2
    TI83 = 3
    TI83P = 4
    TI84P = 5
    TI85 = 6
    TI86 = 7
    TI89 = 8
    TI89T = 9
    TI92 = 10
    TI92P = 11
    V200 = 12

    def get_info(self) -> "ModelInfo":
        """
        Get detailed information about this family.

        Returns:
            ModelInfo dataclass with file format details
        """
        return MODEL_INFO[self]


class FileLayout(Enum):
    """Variable entry layout used by a family's single-variable files."""
    TI8X = "ti8x"       # 11-byte entry header (TI-82, TI-83)
    TI8X_EXT = "ti8x_ext"  # 13-byte entry header with version and flag bytes
    TI85 = "ti85"       # Named entry with explicit name length
    TI9X = "ti9x"       # Folder + entry table layout


# =============================================================================
# Family Information
# =============================================================================

@dataclass(frozen=True)
class ModelInfo:
    """
    File format details for a calculator family.

    Attributes:
        family: The DeviceFamily enum value
        name: Marketing name (e.g., "TI-83 Plus")
        prefix: Two-character file extension prefix (e.g., "8x")
        signature: 8-byte file signature
        layout: Variable entry layout
        has_archive: Whether the calculator has archive memory
        notes: Additional information about the family
    """
    family: DeviceFamily
    name: str
    prefix: str
    signature: bytes
    layout: FileLayout
    has_archive: bool
    notes: str = ""

    @property
    def is_ti8x(self) -> bool:
        """Return True for the Z80 TI-8x line (TI-73 through TI-86)."""
        return self.layout is not FileLayout.TI9X

    @property
    def is_ti9x(self) -> bool:
        """Return True for the 68000 TI-89/92 line."""
        return self.layout is FileLayout.TI9X


MODEL_INFO: dict[DeviceFamily, ModelInfo] = {
    DeviceFamily.TI73: ModelInfo(
        family=DeviceFamily.TI73,
        name="TI-73",
        prefix="73",
        signature=b"**TI73**",
        layout=FileLayout.TI8X_EXT,
        has_archive=True,
        notes="Explorer model. No matrices or complex numbers.",
    ),
    DeviceFamily.TI82: ModelInfo(
        family=DeviceFamily.TI82,
        name="TI-82",
        prefix="82",
        signature=b"**TI82**",
        layout=FileLayout.TI8X,
        has_archive=False,
        notes="No strings or complex numbers.",
    ),
    DeviceFamily.TI83: ModelInfo(
        family=DeviceFamily.TI83,
        name="TI-83",
        prefix="83",
        signature=b"**TI83**",
        layout=FileLayout.TI8X,
        has_archive=False,
    ),
    DeviceFamily.TI83P: ModelInfo(
        family=DeviceFamily.TI83P,
        name="TI-83 Plus",
        prefix="8x",
        signature=b"**TI83F*",
        layout=FileLayout.TI8X_EXT,
        has_archive=True,
    ),
    DeviceFamily.TI84P: ModelInfo(
        family=DeviceFamily.TI84P,
        name="TI-84 Plus",
        prefix="8x",
        signature=b"**TI83F*",
        layout=FileLayout.TI8X_EXT,
        has_archive=True,
        notes="Shares the TI-83 Plus file format and extensions.",
    ),
    DeviceFamily.TI85: ModelInfo(
        family=DeviceFamily.TI85,
        name="TI-85",
        prefix="85",
        signature=b"**TI85**",
        layout=FileLayout.TI85,
        has_archive=False,
    ),
    DeviceFamily.TI86: ModelInfo(
        family=DeviceFamily.TI86,
        name="TI-86",
        prefix="86",
        signature=b"**TI86**",
        layout=FileLayout.TI85,
        has_archive=False,
        notes="Uses the TI-85 type numbering with fixed 8-byte names.",
    ),
    DeviceFamily.TI89: ModelInfo(
        family=DeviceFamily.TI89,
        name="TI-89",
        prefix="89",
        signature=b"**TI89**",
        layout=FileLayout.TI9X,
        has_archive=True,
    ),
    DeviceFamily.TI89T: ModelInfo(
        family=DeviceFamily.TI89T,
        name="TI-89 Titanium",
        prefix="89",
        signature=b"**TI89**",
        layout=FileLayout.TI9X,
        has_archive=True,
        notes="Shares the TI-89 file format and extensions.",
    ),
    DeviceFamily.TI92: ModelInfo(
        family=DeviceFamily.TI92,
        name="TI-92",
        prefix="92",
        signature=b"**TI92**",
        layout=FileLayout.TI9X,
        has_archive=True,
    ),
    DeviceFamily.TI92P: ModelInfo(
        family=DeviceFamily.TI92P,
        name="TI-92 Plus",
        prefix="9x",
        signature=b"**TI92P*",
        layout=FileLayout.TI9X,
        has_archive=True,
    ),
    DeviceFamily.V200: ModelInfo(
        family=DeviceFamily.V200,
        name="Voyage 200",
        prefix="v2",
        signature=b"**TI92P*",
        layout=FileLayout.TI9X,
        has_archive=True,
        notes="Writes TI-92 Plus signature; TI-Connect accepts both.",
    ),
}


# =============================================================================
# Family Groupings
# =============================================================================

# Families whose system variable names are BASIC tokens
TOKENIZED_FAMILIES = frozenset({
    DeviceFamily.TI73,
    DeviceFamily.TI82,
    DeviceFamily.TI83,
    DeviceFamily.TI83P,
    DeviceFamily.TI84P,
})

# Z80 families with plain-text variable names
NON_TOKENIZED_FAMILIES = frozenset({DeviceFamily.TI85, DeviceFamily.TI86})

# The TI-8x line (character-addressable legacy models)
TI8X_FAMILIES = TOKENIZED_FAMILIES | NON_TOKENIZED_FAMILIES

# The 68000 TI-89/92 line
TI9X_FAMILIES = frozenset({
    DeviceFamily.TI89,
    DeviceFamily.TI89T,
    DeviceFamily.TI92,
    DeviceFamily.TI92P,
    DeviceFamily.V200,
})

ALL_FAMILIES = frozenset(DeviceFamily)


def is_ti8x(family: DeviceFamily) -> bool:
    """Return True if the family belongs to the TI-8x line."""
    return family in TI8X_FAMILIES


def is_ti9x(family: DeviceFamily) -> bool:
    """Return True if the family belongs to the TI-89/92 line."""
    return family in TI9X_FAMILIES


def get_family_by_name(name: str) -> Optional[DeviceFamily]:
    """
    Look up a family by enum name or marketing name.

    The search is case-insensitive and ignores dashes and spaces.

    Args:
        name: Family name to look up ("ti83p", "TI-83 Plus", "V200")

    Returns:
        DeviceFamily enum value, or None if not found

    Example:
        >>> get_family_by_name("TI-83 Plus")
        <DeviceFamily.TI83P: 4>
    """
    def normalize(text: str) -> str:
        return text.upper().replace("-", "").replace(" ", "").replace("PLUS", "P")

    key = normalize(name)
    for family, info in MODEL_INFO.items():
        if key == family.name or key == normalize(info.name):
            return family
    return None
