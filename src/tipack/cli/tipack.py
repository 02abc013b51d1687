"""
tipack - TI Variable Packer Command-Line Interface
==================================================

This module implements the command-line interface for packing raw data
into a TI calculator variable file that a link program can send to the
calculator.

Usage Examples
--------------
Pack a tokenized program for the TI-83 Plus:
    $ tipack -t 8xp prog.bin            # Outputs prog.8xp, name PROG

Name the output; the type follows from its extension:
    $ tipack -o HELLO.83p hello.bin

Read standard input, set the variable name and archive it:
    $ cat data | tipack -t 8xv -n MYDATA -a -o MYDATA.8xv

Protected program with a dated comment:
    $ tipack -p -c "Built %Y-%m-%d" -t 83p game.bin

Exit Codes
----------
    0   success
    1   usage error (bad option, missing or unknown type, bad name)
    2   input file cannot be opened
    3   output file cannot be written
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from tipack import __version__
from tipack.cli.errors import ExitCode, handle_cli_exception
from tipack.config import PackConfig
from tipack.packer import PackRequest, pack

# Name of the logger handed to the packing pipeline
RUN_LOGGER_NAME = "tipack.cli.run"


# =============================================================================
# Command Class
# =============================================================================

class TipackCommand(click.Command):
    """
    Click command that reports usage errors with exit code 1.

    Click's own usage errors exit with status 2, which tipack reserves for
    input file errors.
    """

    def main(self, *args, standalone_mode: bool = True, **kwargs):
        if not standalone_mode:
            return super().main(*args, standalone_mode=False, **kwargs)

        try:
            super().main(*args, standalone_mode=False, **kwargs)
        except click.ClickException as e:
            handle_cli_exception(e)
        except click.Abort:
            click.echo("Aborted!", err=True)
            sys.exit(ExitCode.USAGE_ERROR)
        sys.exit(ExitCode.SUCCESS)


def make_logger(verbose: bool) -> logging.Logger:
    """
    Build the logger passed to the packing pipeline.

    With verbose set, debug messages go to standard error; otherwise the
    logger has no handler and does not propagate, so it stays silent.
    """
    log = logging.getLogger(RUN_LOGGER_NAME)
    log.propagate = False
    for handler in list(log.handlers):
        log.removeHandler(handler)

    if verbose:
        handler = logging.StreamHandler(click.get_text_stream("stderr"))
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        log.addHandler(handler)
        log.setLevel(logging.DEBUG)
    else:
        log.addHandler(logging.NullHandler())
        log.setLevel(logging.CRITICAL + 1)

    return log


# =============================================================================
# CLI Definition
# =============================================================================

@click.command(cls=TipackCommand)
@click.argument(
    "input_file",
    required=False,
    type=click.Path(allow_dash=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(path_type=Path),
    help="Output file (default: input file with the type as extension)",
)
@click.option(
    "-n", "--name",
    help="On-calc variable name (default: derived from the output name)",
)
@click.option(
    "-t", "--type", "type_string",
    metavar="TYPE",
    help="Variable type as a file extension, e.g. 82p, 8xv, 89p "
         "(default: extension of the output file)",
)
@click.option(
    "-c", "--comment",
    help="File comment; treated as a strftime format if it contains %",
)
@click.option(
    "-p", "--protect",
    is_flag=True,
    help="Protect program (uneditable on the calculator)",
)
@click.option(
    "-C", "--complex", "complexify",
    is_flag=True,
    help="Number, list or matrix is complex",
)
@click.option(
    "-a", "--archive",
    is_flag=True,
    help="Send variable to archive memory",
)
@click.option(
    "-r", "--raw",
    is_flag=True,
    help="Raw mode: store the input as-is, without length bytes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(__version__, "--version", "-V", prog_name="tipack")
def main(
    input_file: Optional[Path],
    output: Optional[Path],
    name: Optional[str],
    type_string: Optional[str],
    comment: Optional[str],
    protect: bool,
    complexify: bool,
    archive: bool,
    raw: bool,
    verbose: bool,
) -> None:
    """
    Pack raw data into a TI calculator variable file.

    FILE is the data to pack; with no FILE, or when FILE is -, standard
    input is read.

    \b
    Examples:
        tipack -t 8xp prog.bin          # Outputs prog.8xp
        tipack -o LIST.83l data.bin     # Type from the output name
        tipack -t 89p -n hello < prog   # Read standard input
    """
    log = make_logger(verbose)
    config = PackConfig.from_env()

    request = PackRequest(
        input_path=input_file,
        output_path=output,
        name=name,
        type_string=type_string,
        comment=comment,
        protect=protect,
        complexify=complexify,
        archive=archive,
        raw=raw,
    )

    try:
        result = pack(
            request,
            logger=log,
            stdin=click.get_binary_stream("stdin"),
            config=config,
        )
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    if verbose:
        for line in result.content.describe():
            click.echo(line)
        click.echo(f"Wrote {result.output_path} ({result.bytes_written} bytes)")


if __name__ == "__main__":
    main()
