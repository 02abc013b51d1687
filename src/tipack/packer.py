"""
Pack Orchestration
==================

Runs a complete pack: resolves paths and the variable type, derives the
variable name, reads the payload, builds the container and writes the
output file.

Path and Type Defaults
----------------------
- No output path but a type: the output is the input path with its last
  extension replaced by the type ("prog.txt" + "8xp" -> "prog.8xp"), or
  "a.<type>" when reading standard input.
- An output path but no type: the type is the text after the last "." of
  the output file name ("out/PROG.8xp" -> "8xp").
- Neither: UsageError.

Usage Examples
--------------
    >>> from tipack.packer import PackRequest, pack
    >>> result = pack(PackRequest(input_path="prog.bin", type_string="8xp"))
    >>> result.output_path
    PosixPath('prog.8xp')
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union
import logging
import sys

from tipack.calcs.policy import has_length_prefix, resolve_type_id
from tipack.calcs.types import VarType, resolve
from tipack.config import PackConfig
from tipack.errors import InputError, UnknownTypeError, UsageError
from tipack.files.builder import (
    build_content,
    build_record,
    derive_variable_name,
    encode_name,
    format_comment,
)
from tipack.files.payload import PayloadAssembler
from tipack.files.records import FileContent
from tipack.files.writer import write_regular

# Logger for this module
logger = logging.getLogger(__name__)

# Input path that selects standard input
STDIN_PATH = "-"


# =============================================================================
# Request and Result
# =============================================================================

@dataclass
class PackRequest:
    """
    Everything a pack run needs to know.

    Attributes:
        input_path: Raw data file; None or "-" reads standard input
        output_path: Output file (derived from input and type when None)
        name: On-calc variable name (derived from the output name when None)
        type_string: Extension-style type ("8xp"); derived from the output
            name when None
        comment: File comment or strftime template (config default when None)
        protect: Request the protected-program variant
        complexify: Request the complex-number variant
        archive: Mark the variable as archived
        raw: Store the input as-is, without a length prefix
    """
    input_path: Optional[Union[str, Path]] = None
    output_path: Optional[Union[str, Path]] = None
    name: Optional[str] = None
    type_string: Optional[str] = None
    comment: Optional[str] = None
    protect: bool = False
    complexify: bool = False
    archive: bool = False
    raw: bool = False

    @property
    def reads_stdin(self) -> bool:
        return self.input_path is None or str(self.input_path) == STDIN_PATH


@dataclass
class PackResult:
    """
    Outcome of a successful pack run.

    Attributes:
        output_path: File that was written
        var_type: Registry row the type string resolved to
        type_id: Final type id after the protected/complex variants
        content: The container that was written
        bytes_written: Size of the output file
    """
    output_path: Path
    var_type: VarType
    type_id: int
    content: FileContent
    bytes_written: int


# =============================================================================
# Resolution
# =============================================================================

def resolve_paths(
    input_path: Optional[Union[str, Path]],
    output_path: Optional[Union[str, Path]],
    type_string: Optional[str],
    basename: str = "a",
) -> tuple[Path, str]:
    """
    Fill in a missing output path or type string from the other.

    Args:
        input_path: Input file, or None/"-" for standard input
        output_path: Output file, may be None
        type_string: Extension-style type, may be None
        basename: Output base name used when reading standard input

    Returns:
        Tuple of (output path, type string)

    Raises:
        UsageError: If neither a type nor an output name with an
            extension is available

    Example:
        >>> resolve_paths("src/prog.txt", None, "8xp")
        (PosixPath('src/prog.8xp'), '8xp')
        >>> resolve_paths(None, "LIST.83l", None)
        (PosixPath('LIST.83l'), '83l')
    """
    if output_path is None and type_string:
        if input_path is None or str(input_path) == STDIN_PATH:
            output_path = Path(f"{basename}.{type_string}")
        else:
            source = Path(input_path)
            try:
                output_path = source.with_name(f"{source.stem}.{type_string}")
            except ValueError:
                raise UsageError(f"invalid variable type {type_string}")
    elif output_path is not None and not type_string:
        name = Path(output_path).name
        if "." in name:
            type_string = name.rpartition(".")[2]

    if not type_string:
        raise UsageError("no variable type specified (use -t)")
    if output_path is None:
        raise UsageError("no output file specified (use -o)")

    return Path(output_path), type_string


def resolve_type(
    type_string: str,
    protect: bool = False,
    complexify: bool = False,
) -> tuple[VarType, int]:
    """
    Resolve a type string to its registry row and final type id.

    Args:
        type_string: Extension-style type ("82p", ".8XV", ...)
        protect: Apply the protected-program variant
        complexify: Apply the complex-number variant

    Returns:
        Tuple of (VarType, final type id)

    Raises:
        UnknownTypeError: If no family registers the extension
    """
    var_type = resolve(type_string)
    if var_type is None:
        raise UnknownTypeError(type_string)

    type_id = resolve_type_id(
        var_type.family, var_type.type_id,
        protect=protect, complexify=complexify,
    )
    return var_type, type_id


# =============================================================================
# Pipeline
# =============================================================================

def _read_payload(
    request: PackRequest,
    assembler: PayloadAssembler,
    stdin: Optional[BinaryIO],
) -> bytes:
    if request.reads_stdin:
        stream = stdin if stdin is not None else sys.stdin.buffer
        try:
            return assembler.assemble(stream)
        except OSError as e:
            raise InputError("(standard input)", e.strerror or str(e)) from e

    path = Path(request.input_path)
    try:
        with open(path, "rb") as stream:
            return assembler.assemble(stream)
    except OSError as e:
        raise InputError(path, e.strerror or str(e)) from e


def pack(
    request: PackRequest,
    logger: Optional[logging.Logger] = None,
    stdin: Optional[BinaryIO] = None,
    config: Optional[PackConfig] = None,
) -> PackResult:
    """
    Run a complete pack.

    Args:
        request: What to pack
        logger: Logger for progress messages (defaults to this module's)
        stdin: Binary stream used when the request reads standard input
            (defaults to sys.stdin.buffer)
        config: Defaults for unspecified values (defaults to PackConfig())

    Returns:
        PackResult describing the written file

    Raises:
        UsageError: Missing or unknown type, or a name that cannot be
            converted for the calculator
        InputError: If the input cannot be opened or read
        OutputError: If the output cannot be produced
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    if config is None:
        config = PackConfig()

    output_path, type_string = resolve_paths(
        request.input_path, request.output_path, request.type_string,
        basename=config.default_basename,
    )
    var_type, type_id = resolve_type(
        type_string, protect=request.protect, complexify=request.complexify,
    )
    family = var_type.family
    log.debug(
        f"Type '{type_string}' -> {family.get_info().name} "
        f"{var_type.token} (type id 0x{type_id:02X})"
    )

    if request.name is not None:
        name = encode_name(request.name)
    else:
        name = derive_variable_name(family, type_id, output_path)

    assembler = PayloadAssembler(
        length_prefix=has_length_prefix(family, type_id),
        raw=request.raw,
        logger=log,
    )
    data = _read_payload(request, assembler, stdin)

    comment = request.comment
    if comment is None:
        comment = config.default_comment
    comment = format_comment(comment)[:config.comment_max]

    record = build_record(name, type_id, data, archived=request.archive)
    content = build_content(family, record, comment)

    bytes_written = write_regular(output_path, content, logger=log)

    return PackResult(
        output_path=output_path,
        var_type=var_type,
        type_id=type_id,
        content=content,
        bytes_written=bytes_written,
    )
