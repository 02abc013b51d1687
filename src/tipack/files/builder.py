"""
Variable Record Builder
=======================

Combines a name, a resolved type id, attributes and assembled data into a
VariableRecord, and wraps the record in a FileContent container with its
comment.

Name Derivation
---------------
When no variable name is given, it is derived from the output file name:
directory and last extension are stripped ("out/my-file.2.8xp" becomes
"my-file.2"). Then:

- If the type uses tokenized names, the text goes through the name
  converter (``tipack.calcs.tokens.tokenize``), which may reject it.
- Otherwise the text is transliterated character by character: A-Z and
  0-9 are kept, a-z are uppercased, anything else becomes "[". The result
  has the same length as the input ("my-file.2" -> "MY[FILE[2").

Comments
--------
A comment containing "%" is a strftime template evaluated against the
current local time ("Made %Y-%m-%d"). The result is truncated to 40
characters.

Example:
    >>> record = build_record(b"PROG", 0x05, b"\\x03\\x00\\x01\\x02\\x03")
    >>> content = build_content(DeviceFamily.TI83P, record, "Packed %Y")
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union
import logging

from tipack.calcs.models import DeviceFamily
from tipack.calcs.policy import is_tokenized_name
from tipack.calcs.tokens import tokenize
from tipack.files.records import (
    Attribute,
    COMMENT_MAX,
    FileContent,
    VariableRecord,
)

# Logger for this module
logger = logging.getLogger(__name__)

# Substitute for characters a plain-text name cannot hold
NAME_PLACEHOLDER = "["


# =============================================================================
# Names
# =============================================================================

def transliterate_name(text: str) -> str:
    """
    Map text onto the plain-name character set, one character for one.

    Args:
        text: Source text

    Returns:
        Uppercase letters and digits, everything else replaced by "["

    Example:
        >>> transliterate_name("my-file.2")
        'MY[FILE[2'
    """
    result = []
    for ch in text:
        if "A" <= ch <= "Z" or "0" <= ch <= "9":
            result.append(ch)
        elif "a" <= ch <= "z":
            result.append(ch.upper())
        else:
            result.append(NAME_PLACEHOLDER)
    return "".join(result)


def name_source(output_path: Union[str, Path]) -> str:
    """
    Get the text a variable name is derived from.

    Args:
        output_path: Output file path

    Returns:
        The base name without directory and last extension

    Example:
        >>> name_source("out/my-file.2.8xp")
        'my-file.2'
        >>> name_source(".8xp")
        ''
    """
    name = Path(output_path).name
    base, dot, _ = name.rpartition(".")
    return base if dot else name


def derive_variable_name(
    family: DeviceFamily,
    type_id: int,
    output_path: Union[str, Path],
) -> bytes:
    """
    Derive a variable name from the output file name.

    Args:
        family: Calculator family
        type_id: Final type id
        output_path: Output file path

    Returns:
        Stored name bytes (not yet truncated)

    Raises:
        NameConversionError: If the name must be tokenized and cannot be
    """
    text = name_source(output_path)

    if is_tokenized_name(family, type_id):
        name = tokenize(family, text)
    else:
        name = transliterate_name(text).encode("ascii")

    logger.debug(f"Derived variable name {name!r} from '{text}'")
    return name


def encode_name(name: Union[str, bytes]) -> bytes:
    """
    Convert an explicitly given name to stored bytes.

    Text is stored as given (Latin-1, so a name of already-tokenized bytes
    passed as str survives unchanged).
    """
    if isinstance(name, bytes):
        return name
    return name.encode("latin-1", errors="replace")


# =============================================================================
# Records and Containers
# =============================================================================

def build_record(
    name: Union[str, bytes],
    type_id: int,
    data: bytes,
    archived: bool = False,
    folder: Union[str, bytes] = b"",
) -> VariableRecord:
    """
    Build a variable record.

    Name and folder are truncated to 8 bytes; anything beyond is dropped.

    Args:
        name: Variable name (text or stored bytes)
        type_id: Final type id
        data: Assembled variable data
        archived: Mark the variable for archive memory
        folder: Folder name (TI-89/92 only)

    Returns:
        The VariableRecord
    """
    return VariableRecord(
        name=encode_name(name),
        type_id=type_id,
        data=data,
        folder=encode_name(folder),
        attr=Attribute.ARCHIVED if archived else Attribute.NONE,
    )


def format_comment(comment: str, now: Optional[datetime] = None) -> str:
    """
    Resolve a file comment.

    Args:
        comment: Literal comment, or strftime template if it contains "%"
        now: Time to format (defaults to the current local time)

    Returns:
        The comment, at most COMMENT_MAX characters

    Example:
        >>> format_comment("Built %Y-%m-%d", datetime(2007, 3, 14))
        'Built 2007-03-14'
    """
    if "%" in comment:
        if now is None:
            now = datetime.now()
        comment = now.strftime(comment)
    return comment[:COMMENT_MAX]


def build_content(
    family: DeviceFamily,
    record: VariableRecord,
    comment: str = "",
) -> FileContent:
    """
    Wrap one record in a file container.

    Args:
        family: Calculator family
        record: The variable record
        comment: Already-resolved comment text

    Returns:
        FileContent holding exactly one entry
    """
    content = FileContent(family=family, comment=comment)
    content.add_entry(record)
    return content
