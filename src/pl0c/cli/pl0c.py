"""
pl0c - PL/0 Compiler Command-Line Interface
===========================================

Usage Examples
--------------
Compile to standard output:
    $ pl0c hello.pl0 > hello.c

With output file:
    $ pl0c hello.pl0 -o hello.c

Show the token stream:
    $ pl0c --tokens hello.pl0

Full pipeline to an executable:
    $ pl0c hello.pl0 -o hello.c && cc -o hello hello.c && ./hello
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from pl0c import __version__
from pl0c.cli.errors import ExitCode, handle_cli_exception
from pl0c.compiler import PL0Compiler, read_source
from pl0c.lexer import Lexer


logger = logging.getLogger(__name__)

USAGE = "usage: pl0c file.pl0"


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr, keeping stdout for generated code."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("files", nargs=-1, metavar="FILE")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write generated C to this file instead of standard output",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug log on stderr)",
)
@click.version_option(version=__version__, prog_name="pl0c")
def main(
    files: tuple[str, ...],
    output: Optional[Path],
    tokens: bool,
    verbose: bool,
) -> None:
    """
    Compile a PL/0 program to C.

    FILE is the PL/0 source file (.pl0) to compile. The generated C is
    written to standard output unless -o is given; diagnostics go to
    standard error.

    \b
    Examples:
        pl0c hello.pl0 > hello.c     # Compile to stdout
        pl0c hello.pl0 -o hello.c    # Specify output file
        pl0c --tokens hello.pl0      # Dump tokens
    """
    if len(files) != 1:
        click.echo(USAGE, err=True)
        sys.exit(ExitCode.ERROR)

    setup_logging(verbose)
    input_file = Path(files[0])

    try:
        compiler = PL0Compiler()

        if tokens:
            source = read_source(input_file, compiler.options)
            for token in Lexer(source, str(input_file)).tokenize():
                value = "" if token.value is None else f" {token.value}"
                click.echo(f"{token.type.name}{value} {token.line}")
            return

        result = compiler.compile_file(input_file)

        if output is None:
            click.echo(result.output, nl=False)
        else:
            output.write_text(result.output)
            logger.info("wrote %d bytes to %s", len(result.output), output)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
