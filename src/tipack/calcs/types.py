"""
Variable Type Registry
======================

Static tables mapping each calculator family's variable type ids to file
extensions and on-device token names.

Type ids are only meaningful relative to a family: 0x05 is a program on
the TI-83 but a complex list on the TI-85. Within one family several type
ids may share an extension (the TI-83 program and protected program are
both ".83p"); the first row in the table is the one an extension resolves
to.

Extension Resolution
--------------------
Some extensions are valid for several families (".8xp" is both a TI-83
Plus and a TI-84 Plus program). ``resolve()`` tries the families in the
fixed order given by ``EXTENSION_PRIORITY`` and returns the first family
whose table lists the extension:

    TI73, TI82, TI83, TI83P, TI84P, TI85, TI86,
    TI89, TI89T, TI92, TI92P, V200

Example:
    >>> vt = resolve("8xp")
    >>> vt.family, vt.type_id
    (<DeviceFamily.TI83P: 4>, 5)
    >>> typeid_to_extension(DeviceFamily.TI83P, 0x15)
    '8xv'
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from tipack.calcs.models import DeviceFamily, MODEL_INFO


# =============================================================================
# Type Id Enumerations
# =============================================================================

class Ti73Type(IntEnum):
    """TI-73 variable type ids."""
    REAL = 0x00
    LIST = 0x01
    EQU = 0x03
    STRNG = 0x04
    PRGM = 0x05
    ASM = 0x06
    PIC = 0x07
    GDB = 0x08
    WDW = 0x0F
    ZSTO = 0x10
    TAB = 0x11
    APPVAR = 0x1A


class Ti82Type(IntEnum):
    """TI-82 variable type ids."""
    REAL = 0x00
    LIST = 0x01
    MAT = 0x02
    YVAR = 0x03
    PRGM = 0x05
    PPGM = 0x06
    PIC = 0x07
    GDB = 0x08
    WDW = 0x0B
    ZSTO = 0x0C
    TAB = 0x0D


class Ti83Type(IntEnum):
    """TI-83 variable type ids."""
    REAL = 0x00
    LIST = 0x01
    MAT = 0x02
    YVAR = 0x03
    STRNG = 0x04
    PRGM = 0x05
    PPGM = 0x06
    PIC = 0x07
    GDB = 0x08
    CPLX = 0x0C
    CLIST = 0x0D
    WDW = 0x0F
    ZSTO = 0x10
    TAB = 0x11


class Ti83pType(IntEnum):
    """TI-83 Plus and TI-84 Plus variable type ids."""
    REAL = 0x00
    LIST = 0x01
    MAT = 0x02
    EQU = 0x03
    STRNG = 0x04
    PRGM = 0x05
    ASM = 0x06      # Also the protected program type
    PIC = 0x07
    GDB = 0x08
    CPLX = 0x0C
    CLIST = 0x0D
    WDW = 0x0F
    ZSTO = 0x10
    TAB = 0x11
    APPVAR = 0x15


class Ti85Type(IntEnum):
    """TI-85 and TI-86 variable type ids."""
    REAL = 0x00
    CPLX = 0x01
    VECTR = 0x02
    CVECT = 0x03
    LIST = 0x04
    CLIST = 0x05
    MATRX = 0x06
    CMATR = 0x07
    CONS = 0x08
    CCONS = 0x09
    EQU = 0x0A
    STRNG = 0x0C
    GDB_FUNC = 0x0D
    GDB_POL = 0x0E
    GDB_PARA = 0x0F
    GDB_DIF = 0x10
    PICT = 0x11
    PRGM = 0x12


class Ti9xType(IntEnum):
    """TI-89, TI-92 and Voyage 200 variable type ids."""
    EXPR = 0x00
    LIST = 0x04
    MAT = 0x06
    DATA = 0x0A
    TEXT = 0x0B
    STRNG = 0x0C
    GDB = 0x0D
    FIG = 0x0E
    PIC = 0x10
    PRGM = 0x12
    FUNC = 0x13
    MAC = 0x14
    OTH = 0x1C
    ASM = 0x21


# =============================================================================
# Registry Rows
# =============================================================================

@dataclass(frozen=True)
class VarType:
    """
    One registered variable type.

    Attributes:
        family: Calculator family the type id belongs to
        type_id: Family-relative type id
        extension: Full file extension, lowercase (e.g. "8xp")
        token: On-device type token name (e.g. "PRGM")
        description: Human-readable description
    """
    family: DeviceFamily
    type_id: int
    extension: str
    token: str
    description: str

    def __str__(self) -> str:
        return f"{self.token} (.{self.extension}, 0x{self.type_id:02X})"


def _table(
    family: DeviceFamily,
    rows: list[tuple[IntEnum, str, str]],
) -> tuple[VarType, ...]:
    """Expand (type, suffix, description) rows using the family prefix."""
    prefix = MODEL_INFO[family].prefix
    return tuple(
        VarType(family, int(tid), f"{prefix}{suffix}", tid.name, description)
        for tid, suffix, description in rows
    )


_TI73_ROWS = [
    (Ti73Type.REAL, "n", "Real number"),
    (Ti73Type.LIST, "l", "List"),
    (Ti73Type.EQU, "y", "Equation"),
    (Ti73Type.STRNG, "s", "String"),
    (Ti73Type.PRGM, "p", "Program"),
    (Ti73Type.ASM, "p", "Assembly program"),
    (Ti73Type.PIC, "i", "Picture"),
    (Ti73Type.GDB, "d", "Graph database"),
    (Ti73Type.WDW, "w", "Window settings"),
    (Ti73Type.ZSTO, "z", "Saved window settings"),
    (Ti73Type.TAB, "t", "Table setup"),
    (Ti73Type.APPVAR, "v", "Application variable"),
]

_TI82_ROWS = [
    (Ti82Type.REAL, "n", "Real number"),
    (Ti82Type.LIST, "l", "List"),
    (Ti82Type.MAT, "m", "Matrix"),
    (Ti82Type.YVAR, "y", "Y-variable"),
    (Ti82Type.PRGM, "p", "Program"),
    (Ti82Type.PPGM, "p", "Protected program"),
    (Ti82Type.PIC, "i", "Picture"),
    (Ti82Type.GDB, "d", "Graph database"),
    (Ti82Type.WDW, "w", "Window settings"),
    (Ti82Type.ZSTO, "z", "Saved window settings"),
    (Ti82Type.TAB, "t", "Table setup"),
]

_TI83_ROWS = [
    (Ti83Type.REAL, "n", "Real number"),
    (Ti83Type.LIST, "l", "List"),
    (Ti83Type.MAT, "m", "Matrix"),
    (Ti83Type.YVAR, "y", "Y-variable"),
    (Ti83Type.STRNG, "s", "String"),
    (Ti83Type.PRGM, "p", "Program"),
    (Ti83Type.PPGM, "p", "Protected program"),
    (Ti83Type.PIC, "i", "Picture"),
    (Ti83Type.GDB, "d", "Graph database"),
    (Ti83Type.CPLX, "c", "Complex number"),
    (Ti83Type.CLIST, "l", "Complex list"),
    (Ti83Type.WDW, "w", "Window settings"),
    (Ti83Type.ZSTO, "z", "Saved window settings"),
    (Ti83Type.TAB, "t", "Table setup"),
]

_TI83P_ROWS = [
    (Ti83pType.REAL, "n", "Real number"),
    (Ti83pType.LIST, "l", "List"),
    (Ti83pType.MAT, "m", "Matrix"),
    (Ti83pType.EQU, "y", "Equation"),
    (Ti83pType.STRNG, "s", "String"),
    (Ti83pType.PRGM, "p", "Program"),
    (Ti83pType.ASM, "p", "Assembly or protected program"),
    (Ti83pType.PIC, "i", "Picture"),
    (Ti83pType.GDB, "d", "Graph database"),
    (Ti83pType.CPLX, "c", "Complex number"),
    (Ti83pType.CLIST, "l", "Complex list"),
    (Ti83pType.WDW, "w", "Window settings"),
    (Ti83pType.ZSTO, "z", "Saved window settings"),
    (Ti83pType.TAB, "t", "Table setup"),
    (Ti83pType.APPVAR, "v", "Application variable"),
]

_TI85_ROWS = [
    (Ti85Type.REAL, "n", "Real number"),
    (Ti85Type.CPLX, "c", "Complex number"),
    (Ti85Type.VECTR, "v", "Vector"),
    (Ti85Type.CVECT, "v", "Complex vector"),
    (Ti85Type.LIST, "l", "List"),
    (Ti85Type.CLIST, "l", "Complex list"),
    (Ti85Type.MATRX, "m", "Matrix"),
    (Ti85Type.CMATR, "m", "Complex matrix"),
    (Ti85Type.CONS, "k", "Constant"),
    (Ti85Type.CCONS, "k", "Complex constant"),
    (Ti85Type.EQU, "y", "Equation"),
    (Ti85Type.STRNG, "s", "String"),
    (Ti85Type.GDB_FUNC, "d", "Function graph database"),
    (Ti85Type.GDB_POL, "d", "Polar graph database"),
    (Ti85Type.GDB_PARA, "d", "Parametric graph database"),
    (Ti85Type.GDB_DIF, "d", "Differential equation graph database"),
    (Ti85Type.PICT, "i", "Picture"),
    (Ti85Type.PRGM, "p", "Program"),
]

_TI9X_ROWS = [
    (Ti9xType.EXPR, "e", "Expression"),
    (Ti9xType.LIST, "l", "List"),
    (Ti9xType.MAT, "m", "Matrix"),
    (Ti9xType.DATA, "c", "Data"),
    (Ti9xType.TEXT, "t", "Text"),
    (Ti9xType.STRNG, "s", "String"),
    (Ti9xType.GDB, "d", "Graph database"),
    (Ti9xType.FIG, "a", "Figure"),
    (Ti9xType.PIC, "i", "Picture"),
    (Ti9xType.PRGM, "p", "Program"),
    (Ti9xType.FUNC, "f", "Function"),
    (Ti9xType.MAC, "x", "Macro"),
    (Ti9xType.OTH, "y", "Other (file)"),
    (Ti9xType.ASM, "z", "Assembly program"),
]


VAR_TYPES: dict[DeviceFamily, tuple[VarType, ...]] = {
    DeviceFamily.TI73: _table(DeviceFamily.TI73, _TI73_ROWS),
    DeviceFamily.TI82: _table(DeviceFamily.TI82, _TI82_ROWS),
    DeviceFamily.TI83: _table(DeviceFamily.TI83, _TI83_ROWS),
    DeviceFamily.TI83P: _table(DeviceFamily.TI83P, _TI83P_ROWS),
    DeviceFamily.TI84P: _table(DeviceFamily.TI84P, _TI83P_ROWS),
    DeviceFamily.TI85: _table(DeviceFamily.TI85, _TI85_ROWS),
    DeviceFamily.TI86: _table(DeviceFamily.TI86, _TI85_ROWS),
    DeviceFamily.TI89: _table(DeviceFamily.TI89, _TI9X_ROWS),
    DeviceFamily.TI89T: _table(DeviceFamily.TI89T, _TI9X_ROWS),
    DeviceFamily.TI92: _table(DeviceFamily.TI92, _TI9X_ROWS),
    DeviceFamily.TI92P: _table(DeviceFamily.TI92P, _TI9X_ROWS),
    DeviceFamily.V200: _table(DeviceFamily.V200, _TI9X_ROWS),
}

# Order in which families are tried when an extension is ambiguous
EXTENSION_PRIORITY: tuple[DeviceFamily, ...] = (
    DeviceFamily.TI73,
    DeviceFamily.TI82,
    DeviceFamily.TI83,
    DeviceFamily.TI83P,
    DeviceFamily.TI84P,
    DeviceFamily.TI85,
    DeviceFamily.TI86,
    DeviceFamily.TI89,
    DeviceFamily.TI89T,
    DeviceFamily.TI92,
    DeviceFamily.TI92P,
    DeviceFamily.V200,
)


# =============================================================================
# Lookup Functions
# =============================================================================

def _normalize_extension(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


def resolve(extension: str) -> Optional[VarType]:
    """
    Resolve a file extension to a registered variable type.

    Args:
        extension: Extension-style type string, case-insensitive, with or
            without a leading dot (e.g. "8xp", ".82L")

    Returns:
        The matching VarType, or None if no family registers the extension

    Example:
        >>> resolve("89p").family
        <DeviceFamily.TI89: 8>
        >>> resolve("8xq") is None
        True
    """
    key = _normalize_extension(extension)
    if not key:
        return None

    for family in EXTENSION_PRIORITY:
        for var_type in VAR_TYPES[family]:
            if var_type.extension == key:
                return var_type
    return None


def typeid_to_extension(family: DeviceFamily, type_id: int) -> str:
    """
    Get the file extension for a family's type id.

    Args:
        family: Calculator family
        type_id: Family-relative type id

    Returns:
        The extension (e.g. "83p"), or "" if the id is not registered
    """
    var_type = get_var_type(family, type_id)
    return var_type.extension if var_type else ""


def get_var_type(family: DeviceFamily, type_id: int) -> Optional[VarType]:
    """Get the first registry row for a family's type id, or None."""
    for var_type in VAR_TYPES[family]:
        if var_type.type_id == type_id:
            return var_type
    return None


def get_types_for_family(family: DeviceFamily) -> tuple[VarType, ...]:
    """Get all registered types for a family, in table order."""
    return VAR_TYPES[family]


def get_family_for_extension(extension: str) -> Optional[DeviceFamily]:
    """Get the family an extension resolves to, or None."""
    var_type = resolve(extension)
    return var_type.family if var_type else None


def get_type_name(family: DeviceFamily, type_id: int) -> str:
    """
    Get the token name of a type id for display.

    Unregistered ids (for example a complex variant the registry has no
    row for) are shown in hex.
    """
    var_type = get_var_type(family, type_id)
    if var_type:
        return var_type.token
    return f"0x{type_id:02X}"
