"""
Variable Name Tokenization
==========================

On the tokenized-BASIC calculators (TI-73, TI-82, TI-83, TI-83 Plus,
TI-84 Plus) the names of system variables are stored as the BASIC tokens
that name them, not as text. A list file called "L1" must carry the two
name bytes 5D 00, a picture "Pic1" the bytes 60 00, and so on.

This module converts between the readable names and the stored bytes:

    >>> tokenize(DeviceFamily.TI83P, "L1")
    b']\\x00'
    >>> tokenize(DeviceFamily.TI83P, "Str0")
    b'\\xaa\\t'
    >>> detokenize(DeviceFamily.TI83P, b"\\x5d\\x00")
    'L1'

Names that are not system variables (real variables A-Z and theta, user
list names) are stored as uppercase text.

Token Prefixes
--------------
    5C  matrix       [A]-[J]
    5D  list         L1-L6
    5E  equation     Y1-Y0, X1T-Y6T, r1-r6, u/v/w
    60  picture      Pic1-Pic0
    61  graph db     GDB1-GDB0
    AA  string       Str1-Str0
"""

import logging

from tipack.calcs.models import DeviceFamily, TOKENIZED_FAMILIES
from tipack.errors import NameConversionError

# Logger for this module
logger = logging.getLogger(__name__)


MATRIX_TOKEN = 0x5C
LIST_TOKEN = 0x5D
EQUATION_TOKEN = 0x5E
PICTURE_TOKEN = 0x60
GDB_TOKEN = 0x61
STRING_TOKEN = 0xAA
THETA = 0x5B

# First byte of every two-byte name token
TOKEN_PREFIXES = frozenset({
    MATRIX_TOKEN, LIST_TOKEN, EQUATION_TOKEN,
    PICTURE_TOKEN, GDB_TOKEN, STRING_TOKEN,
})

# Subscript digits as shown by TI-Connect ("L₁")
_SUBSCRIPTS = str.maketrans("₀₁₂₃₄₅₆₇₈₉", "0123456789")

# Families with each group of system variables
_MATRIX_FAMILIES = frozenset({DeviceFamily.TI82, DeviceFamily.TI83,
                              DeviceFamily.TI83P, DeviceFamily.TI84P})
_STRING_FAMILIES = frozenset({DeviceFamily.TI73, DeviceFamily.TI83,
                              DeviceFamily.TI83P, DeviceFamily.TI84P})
_SEQUENCE_FAMILIES = frozenset({DeviceFamily.TI83, DeviceFamily.TI83P,
                                DeviceFamily.TI84P})


def _numbered(prefix: str, token: int, start: int = 0) -> dict[str, bytes]:
    """Names 1-9 then 0 numbered from index ``start`` (Pic1..Pic9, Pic0)."""
    names = {}
    for index, digit in enumerate("1234567890"):
        names[f"{prefix}{digit}"] = bytes([token, start + index])
    return names


def _build_table(family: DeviceFamily) -> dict[str, bytes]:
    table: dict[str, bytes] = {}

    for n in range(1, 7):
        table[f"L{n}"] = bytes([LIST_TOKEN, n - 1])

    table.update(_numbered("Y", EQUATION_TOKEN, 0x10))
    table.update(_numbered("Pic", PICTURE_TOKEN))
    table.update(_numbered("GDB", GDB_TOKEN))

    if family in _MATRIX_FAMILIES:
        for index, letter in enumerate("ABCDEFGHIJ"):
            table[f"[{letter}]"] = bytes([MATRIX_TOKEN, index])

        for n in range(1, 7):
            table[f"X{n}T"] = bytes([EQUATION_TOKEN, 0x20 + 2 * (n - 1)])
            table[f"Y{n}T"] = bytes([EQUATION_TOKEN, 0x21 + 2 * (n - 1)])
            table[f"r{n}"] = bytes([EQUATION_TOKEN, 0x40 + n - 1])

    if family in _STRING_FAMILIES:
        table.update(_numbered("Str", STRING_TOKEN))

    if family in _SEQUENCE_FAMILIES:
        table["u"] = bytes([EQUATION_TOKEN, 0x80])
        table["v"] = bytes([EQUATION_TOKEN, 0x81])
        table["w"] = bytes([EQUATION_TOKEN, 0x82])
    elif family is DeviceFamily.TI82:
        table["Un"] = bytes([EQUATION_TOKEN, 0x80])
        table["Vn"] = bytes([EQUATION_TOKEN, 0x81])

    return table


TOKEN_TABLES: dict[DeviceFamily, dict[str, bytes]] = {
    family: _build_table(family) for family in TOKENIZED_FAMILIES
}

# Lowercased keys for multi-character names ("pic1", "str0", "[a]")
_FOLDED_TABLES: dict[DeviceFamily, dict[str, bytes]] = {
    family: {name.lower(): raw for name, raw in table.items() if len(name) > 1}
    for family, table in TOKEN_TABLES.items()
}


# =============================================================================
# Conversion
# =============================================================================

def tokenize(family: DeviceFamily, text: str) -> bytes:
    """
    Convert a readable variable name to its stored form.

    Lookup order: exact system-variable name, case-insensitive
    system-variable name, then plain text (uppercased; theta allowed).

    Args:
        family: A tokenized-BASIC family
        text: Readable name, e.g. "L1", "Str3", "[A]", "ABC"

    Returns:
        The name bytes to store in the variable entry

    Raises:
        NameConversionError: If the family does not tokenize names, the
            name is empty, or it contains characters the calculator
            cannot store in a name
    """
    table = TOKEN_TABLES.get(family)
    if table is None:
        raise NameConversionError(
            text, f"{family.get_info().name} does not use tokenized names"
        )

    name = text.translate(_SUBSCRIPTS)
    if not name:
        raise NameConversionError(text, "name is empty")

    if name in table:
        return table[name]

    folded = _FOLDED_TABLES[family].get(name.lower())
    if folded is not None:
        return folded

    result = bytearray()
    for ch in name.upper():
        if "A" <= ch <= "Z" or "0" <= ch <= "9":
            result.append(ord(ch))
        elif ch in ("θ", "Θ"):
            result.append(THETA)
        else:
            raise NameConversionError(
                text, f"character {ch!r} is not allowed in a variable name"
            )

    if not ("A" <= chr(result[0]) <= "Z" or result[0] == THETA):
        raise NameConversionError(text, "name must start with a letter")

    logger.debug(f"Name '{text}' stored as plain text")
    return bytes(result)


def detokenize(family: DeviceFamily, raw: bytes) -> str:
    """
    Convert stored name bytes back to a readable name.

    Args:
        family: Calculator family the name belongs to
        raw: Name bytes (trailing zero padding is ignored)

    Returns:
        Readable name; bytes outside printable ASCII are shown as hex
    """
    table = TOKEN_TABLES.get(family)

    # Token names are two bytes; the second may be 00 so padding is
    # only stripped after the table lookup
    if table is not None and len(raw) >= 2 and not raw[2:].strip(b"\x00"):
        key = raw[:2]
        for name, value in table.items():
            if value == key:
                return name

    parts = []
    for byte in raw.rstrip(b"\x00"):
        if byte == THETA and table is not None:
            parts.append("θ")
        elif 0x20 <= byte < 0x7F:
            parts.append(chr(byte))
        else:
            parts.append(f"\\x{byte:02x}")
    return "".join(parts)
