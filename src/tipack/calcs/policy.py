"""
Variable Type Policy
====================

Per-family rules that decide how a variable of a given type is packaged:

- **Name tokenization**: whether a variable name derived from a file name
  must be converted to the calculator's BASIC token encoding (L1, Str1,
  [A], ...) or stored as plain uppercase text.
- **Length prefix**: whether the variable data starts with a 2-byte
  little-endian count of the bytes that follow.
- **Protected variant**: the type id used for a protected (uneditable)
  program.
- **Complex variant**: the type id holding the complex-number version of a
  real number, vector, list, matrix or constant.

Each family has exactly one TypePolicy in ``POLICIES``; importing this
module raises RuntimeError if a DeviceFamily member has no entry.

Composition
-----------
``resolve_type_id()`` applies the protected variant before the complex
variant. The two are not commutative: each only recognizes the ids in its
own table, so complexifying first could produce an id the protect table
does not know, and vice versa.
"""

from dataclasses import dataclass, field

from tipack.calcs.models import DeviceFamily
from tipack.calcs.types import (
    Ti73Type,
    Ti82Type,
    Ti83Type,
    Ti83pType,
    Ti85Type,
    Ti9xType,
)


# Offset from a real type to its complex counterpart on the TI-83 line
TI83_COMPLEX_OFFSET = Ti83Type.CPLX


# =============================================================================
# Policy Record
# =============================================================================

@dataclass(frozen=True)
class TypePolicy:
    """
    Packaging rules for one calculator family.

    Attributes:
        tokenized_names: Whether the family stores names as BASIC tokens
        plain_name_types: Type ids whose names stay plain text even on a
            tokenized family (programs, assembly, application variables)
        length_prefixed: Type ids whose data starts with a 2-byte length
        protect_map: Type id -> protected type id
        complex_map: Type id -> complex type id
    """
    tokenized_names: bool
    plain_name_types: frozenset[int] = frozenset()
    length_prefixed: frozenset[int] = frozenset()
    protect_map: dict[int, int] = field(default_factory=dict)
    complex_map: dict[int, int] = field(default_factory=dict)


_TI9X_POLICY = TypePolicy(
    tokenized_names=False,
    complex_map={
        Ti9xType.LIST: Ti9xType.LIST + 1,
        Ti9xType.MAT: Ti9xType.MAT + 1,
    },
)

_TI85_POLICY = TypePolicy(
    tokenized_names=False,
    length_prefixed=frozenset({
        Ti85Type.EQU,
        Ti85Type.STRNG,
        Ti85Type.PICT,
        Ti85Type.PRGM,
    }),
    complex_map={
        Ti85Type.REAL: Ti85Type.REAL + 1,
        Ti85Type.VECTR: Ti85Type.VECTR + 1,
        Ti85Type.LIST: Ti85Type.LIST + 1,
        Ti85Type.MATRX: Ti85Type.MATRX + 1,
        Ti85Type.CONS: Ti85Type.CONS + 1,
    },
)

_TI82_POLICY = TypePolicy(
    tokenized_names=True,
    plain_name_types=frozenset({
        Ti82Type.PRGM,
        Ti82Type.PPGM,
        Ti83pType.APPVAR,
    }),
    length_prefixed=frozenset({
        Ti82Type.YVAR,
        Ti83Type.STRNG,
        Ti82Type.PRGM,
        Ti82Type.PPGM,
        Ti82Type.PIC,
    }),
    protect_map={Ti82Type.PRGM: Ti82Type.PRGM + 1},
)

_TI83_POLICY = TypePolicy(
    tokenized_names=True,
    plain_name_types=_TI82_POLICY.plain_name_types,
    length_prefixed=_TI82_POLICY.length_prefixed,
    protect_map={Ti83Type.PRGM: Ti83Type.PRGM + 1},
    complex_map={
        Ti83Type.REAL: Ti83Type.REAL + TI83_COMPLEX_OFFSET,
        Ti83Type.LIST: Ti83Type.LIST + TI83_COMPLEX_OFFSET,
    },
)

_TI73_POLICY = TypePolicy(
    tokenized_names=True,
    plain_name_types=frozenset({
        Ti73Type.PRGM,
        Ti73Type.ASM,
        Ti73Type.APPVAR,
    }),
    length_prefixed=frozenset({
        Ti73Type.EQU,
        Ti73Type.STRNG,
        Ti73Type.PRGM,
        Ti73Type.ASM,
        Ti73Type.PIC,
        Ti73Type.APPVAR,
    }),
    protect_map={Ti73Type.PRGM: Ti73Type.PRGM + 1},
)

_TI83P_POLICY = TypePolicy(
    tokenized_names=True,
    plain_name_types=frozenset({
        Ti83pType.PRGM,
        Ti83pType.ASM,
        Ti83pType.APPVAR,
    }),
    length_prefixed=frozenset({
        Ti83pType.EQU,
        Ti83pType.STRNG,
        Ti83pType.PRGM,
        Ti83pType.ASM,
        Ti83pType.PIC,
        Ti83pType.APPVAR,
    }),
    protect_map={Ti83pType.PRGM: Ti83pType.PRGM + 1},
    complex_map=_TI83_POLICY.complex_map,
)


POLICIES: dict[DeviceFamily, TypePolicy] = {
    DeviceFamily.TI73: _TI73_POLICY,
    DeviceFamily.TI82: _TI82_POLICY,
    DeviceFamily.TI83: _TI83_POLICY,
    DeviceFamily.TI83P: _TI83P_POLICY,
    DeviceFamily.TI84P: _TI83P_POLICY,
    DeviceFamily.TI85: _TI85_POLICY,
    DeviceFamily.TI86: _TI85_POLICY,
    DeviceFamily.TI89: _TI9X_POLICY,
    DeviceFamily.TI89T: _TI9X_POLICY,
    DeviceFamily.TI92: _TI9X_POLICY,
    DeviceFamily.TI92P: _TI9X_POLICY,
    DeviceFamily.V200: _TI9X_POLICY,
}

_missing = set(DeviceFamily) - set(POLICIES)
if _missing:
    raise RuntimeError(
        f"No type policy for: {', '.join(f.name for f in sorted(_missing))}"
    )


def get_policy(family: DeviceFamily) -> TypePolicy:
    """Get the packaging rules for a family."""
    return POLICIES[family]


# =============================================================================
# Decision Functions
# =============================================================================

def is_tokenized_name(family: DeviceFamily, type_id: int) -> bool:
    """
    Check whether a variable name must be tokenized.

    Args:
        family: Calculator family
        type_id: Final (protected/complexified) type id

    Returns:
        True if a name derived from text must go through the name converter

    Example:
        >>> is_tokenized_name(DeviceFamily.TI83P, Ti83pType.LIST)
        True
        >>> is_tokenized_name(DeviceFamily.TI83P, Ti83pType.PRGM)
        False
    """
    policy = POLICIES[family]
    return policy.tokenized_names and type_id not in policy.plain_name_types


def has_length_prefix(family: DeviceFamily, type_id: int) -> bool:
    """
    Check whether the variable data starts with a 2-byte length field.

    The field is little-endian and counts the bytes that follow it.

    Args:
        family: Calculator family
        type_id: Final type id

    Returns:
        True if the payload must be framed with a length prefix
    """
    return type_id in POLICIES[family].length_prefixed


def protected_variant(family: DeviceFamily, type_id: int) -> int:
    """
    Get the protected-program type id.

    Only plain programs on the tokenized-BASIC families have a protected
    variant (the next type id); every other id is returned unchanged.
    """
    return POLICIES[family].protect_map.get(type_id, type_id)


def complex_variant(family: DeviceFamily, type_id: int) -> int:
    """
    Get the complex-number type id.

    Returns the id unchanged for types (and families) without a complex
    counterpart. Applying this twice is not meaningful and may yield an id
    the registry does not know.
    """
    return POLICIES[family].complex_map.get(type_id, type_id)


def resolve_type_id(
    family: DeviceFamily,
    type_id: int,
    protect: bool = False,
    complexify: bool = False,
) -> int:
    """
    Apply the requested variants to a base type id.

    The protected variant is applied first, then the complex variant on the
    already-protected id.

    Args:
        family: Calculator family
        type_id: Base type id resolved from the extension
        protect: Request the protected-program variant
        complexify: Request the complex-number variant

    Returns:
        The final type id

    Example:
        >>> resolve_type_id(DeviceFamily.TI83, Ti83Type.PRGM, protect=True)
        6
        >>> resolve_type_id(DeviceFamily.TI83, Ti83Type.LIST, complexify=True)
        13
    """
    if protect:
        type_id = protected_variant(family, type_id)
    if complexify:
        type_id = complex_variant(family, type_id)
    return type_id


def describe_policy(family: DeviceFamily, type_id: int) -> dict[str, int]:
    """
    Summarize the policy decisions for a type id.

    Returns:
        Dictionary with keys 'tokenized_name', 'length_prefix',
        'protected' and 'complex'
    """
    return {
        "tokenized_name": is_tokenized_name(family, type_id),
        "length_prefix": has_length_prefix(family, type_id),
        "protected": protected_variant(family, type_id),
        "complex": complex_variant(family, type_id),
    }
