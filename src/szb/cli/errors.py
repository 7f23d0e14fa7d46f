"""
CLI Error Handling
==================

Maps szb exceptions to consistent messages and exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from szb.errors import CommsError, ConfigError, SzbError


class ExitCode(IntEnum):
    """Exit codes for the szb command."""
    SUCCESS = 0
    RUNTIME_ERROR = 1    # Serial, link or provider failure
    INVALID_ARGS = 2     # Bad overflow style or other configuration
    INTERNAL_ERROR = 3   # Unexpected internal error


def exit_code_for(error: Exception) -> ExitCode:
    """Exit code that ``handle_cli_exception`` uses for this error."""
    if isinstance(error, (ConfigError, click.BadParameter)):
        return ExitCode.INVALID_ARGS
    if isinstance(error, SzbError):
        return ExitCode.RUNTIME_ERROR
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
) -> NoReturn:
    """
    Report an exception and exit.

    Configuration errors exit with INVALID_ARGS, other szb errors with
    RUNTIME_ERROR. Anything else is an internal error and prints a
    traceback in verbose mode.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    code = exit_code_for(error)

    if isinstance(error, ConfigError):
        click.echo(f"Configuration error: {error}", err=True)
    elif isinstance(error, CommsError):
        click.echo(f"Communication error: {error}", err=True)
    elif code != ExitCode.INTERNAL_ERROR:
        click.echo(f"Error: {error}", err=True)
    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()

    sys.exit(code)
