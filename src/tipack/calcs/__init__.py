"""
TI Calculator Definitions
=========================

Static knowledge about the calculators tipack writes files for:

- **models**: DeviceFamily and per-family file format details
- **types**: Variable type registry (type ids <-> file extensions)
- **policy**: Per-family packaging rules (name tokenization, length
  prefix, protected and complex variants)
- **tokens**: Conversion of system variable names to BASIC tokens

Quick Start
-----------
    >>> from tipack.calcs import resolve, resolve_type_id
    >>> vt = resolve("83p")
    >>> resolve_type_id(vt.family, vt.type_id, protect=True)
    6
"""

# =============================================================================
# Public API Exports
# =============================================================================

from tipack.calcs.models import (
    DeviceFamily,
    FileLayout,
    ModelInfo,
    MODEL_INFO,
    TOKENIZED_FAMILIES,
    NON_TOKENIZED_FAMILIES,
    TI8X_FAMILIES,
    TI9X_FAMILIES,
    ALL_FAMILIES,
    is_ti8x,
    is_ti9x,
    get_family_by_name,
)

from tipack.calcs.types import (
    Ti73Type,
    Ti82Type,
    Ti83Type,
    Ti83pType,
    Ti85Type,
    Ti9xType,
    VarType,
    VAR_TYPES,
    EXTENSION_PRIORITY,
    resolve,
    typeid_to_extension,
    get_var_type,
    get_types_for_family,
    get_family_for_extension,
    get_type_name,
)

from tipack.calcs.policy import (
    TypePolicy,
    POLICIES,
    get_policy,
    is_tokenized_name,
    has_length_prefix,
    protected_variant,
    complex_variant,
    resolve_type_id,
    describe_policy,
)

from tipack.calcs.tokens import tokenize, detokenize

__all__ = [
    # Models
    "DeviceFamily",
    "FileLayout",
    "ModelInfo",
    "MODEL_INFO",
    "TOKENIZED_FAMILIES",
    "NON_TOKENIZED_FAMILIES",
    "TI8X_FAMILIES",
    "TI9X_FAMILIES",
    "ALL_FAMILIES",
    "is_ti8x",
    "is_ti9x",
    "get_family_by_name",
    # Types
    "Ti73Type",
    "Ti82Type",
    "Ti83Type",
    "Ti83pType",
    "Ti85Type",
    "Ti9xType",
    "VarType",
    "VAR_TYPES",
    "EXTENSION_PRIORITY",
    "resolve",
    "typeid_to_extension",
    "get_var_type",
    "get_types_for_family",
    "get_family_for_extension",
    "get_type_name",
    # Policy
    "TypePolicy",
    "POLICIES",
    "get_policy",
    "is_tokenized_name",
    "has_length_prefix",
    "protected_variant",
    "complex_variant",
    "resolve_type_id",
    "describe_policy",
    # Tokens
    "tokenize",
    "detokenize",
]
