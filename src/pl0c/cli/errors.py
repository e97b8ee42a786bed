"""
CLI Error Handling
==================

Maps exceptions to messages on stderr and process exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from pl0c.errors import PL0Error


class ExitCode(IntEnum):
    """Exit codes of the pl0c command (2 is left to click's own usage errors)."""
    SUCCESS = 0
    ERROR = 1            # Wrong arguments, unusable source, compilation error
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Compiler diagnostics already start with "error: <line>:", so they are
    only prefixed with the program name.

    Raises:
        SystemExit: Always
    """
    if isinstance(error, PL0Error):
        click.echo(f"pl0c: {error}", err=True)
        sys.exit(ExitCode.ERROR)

    elif isinstance(error, OSError):
        # Output file could not be written
        click.echo(f"pl0c: error: {error}", err=True)
        sys.exit(ExitCode.ERROR)

    else:
        click.echo(f"pl0c: internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
