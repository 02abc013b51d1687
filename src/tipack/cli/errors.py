"""
CLI Error Handling
==================

Maps tipack exceptions onto the tool's exit codes and prints them the same
way for every failure.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from tipack.errors import InputError, OutputError, TipackError, UsageError


class ExitCode(IntEnum):
    """Exit codes of the tipack command."""
    SUCCESS = 0
    USAGE_ERROR = 1      # Bad arguments, unknown type, unconvertible name
    INPUT_ERROR = 2      # Input file cannot be opened or read
    OUTPUT_ERROR = 3     # Output file cannot be produced


def exit_code_for(error: BaseException) -> ExitCode:
    """Get the exit code a given exception maps to."""
    if isinstance(error, (UsageError, click.UsageError)):
        return ExitCode.USAGE_ERROR
    if isinstance(error, InputError):
        return ExitCode.INPUT_ERROR
    if isinstance(error, OutputError):
        return ExitCode.OUTPUT_ERROR
    if isinstance(error, click.ClickException):
        return ExitCode.USAGE_ERROR
    return ExitCode.OUTPUT_ERROR


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print the full traceback for unexpected errors

    Raises:
        SystemExit: Always exits with the mapped exit code
    """
    if isinstance(error, click.ClickException):
        # Click formats its own usage messages
        error.show()
    elif isinstance(error, TipackError):
        click.echo(f"Error: {error}", err=True)
    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()

    sys.exit(exit_code_for(error))
