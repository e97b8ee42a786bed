"""
PL/0 Compiler Main Module
=========================

This module provides the driver for the PL/0 compiler. It loads the
source, primes the lexer, seeds the symbol table with the program's own
entry and runs the one-pass parser:

    Source → Lexer ⇄ Parser (+ Symbol Table) → Emitter → C source

Usage
-----
Command line:
    $ pl0c hello.pl0 > hello.c

Programmatic:
    >>> from pl0c import compile_pl0
    >>> c_source = compile_pl0("var x; begin x := 1; writeInt x end.")

Error Handling
--------------
Compilation stops at the first error, which is raised as a PL0Error
subclass. Text emitted before the error is not part of any result.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pl0c.emitter import CEmitter
from pl0c.errors import SourceFileError
from pl0c.lexer import Lexer
from pl0c.parser import CompilationContext, Parser
from pl0c.symbols import SymbolTable


logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        source_extension: Suffix a source file name must end with
        check_extension: Reject files without source_extension
        emit_preamble: Emit the #include lines and runtime helper that
                       the generated program needs
    """
    source_extension: str = ".pl0"
    check_extension: bool = True
    emit_preamble: bool = True


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Attributes:
        filename: Source filename
        output: Generated C source
        line_count: Number of source lines read
        symbol_count: Program-level names left in the symbol table
    """
    filename: str = ""
    output: str = ""
    line_count: int = 0
    symbol_count: int = 0


def read_source(path: str | Path, options: Optional[CompilerOptions] = None) -> str:
    """
    Load a PL/0 source file into memory.

    Raises:
        SourceFileError: If the name has the wrong extension or the file
            cannot be read
    """
    options = options or CompilerOptions()
    path = Path(path)

    if options.check_extension and path.suffix != options.source_extension:
        raise SourceFileError(f"file must end in '{options.source_extension}'")

    try:
        return path.read_bytes().decode("utf-8")
    except OSError as e:
        raise SourceFileError(f"couldn't open {path}", hint=e.strerror) from e
    except UnicodeDecodeError as e:
        raise SourceFileError(f"couldn't read {path}", hint=str(e)) from e


class PL0Compiler:
    """
    PL/0 to C compiler.

    Example:
        compiler = PL0Compiler()
        result = compiler.compile_file("hello.pl0")
        print(result.output)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile PL/0 source text to C.

        Raises:
            PL0Error: On the first lexical, syntactic or semantic error
        """
        logger.debug("compiling %s (%d bytes)", filename, len(source))

        context = CompilationContext(
            lexer=Lexer(source, filename),
            symbols=SymbolTable(),
            emitter=CEmitter(emit_preamble=self.options.emit_preamble),
        )
        Parser(context).parse()

        result = CompilerResult(
            filename=filename,
            output=context.emitter.getvalue(),
            line_count=context.lexer.line,
            symbol_count=len(context.symbols),
        )
        logger.debug(
            "compiled %s: %d line(s), %d byte(s) of C",
            filename, result.line_count, len(result.output),
        )
        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a PL/0 source file to C.

        Raises:
            SourceFileError: If the file cannot be used
            PL0Error: On the first compilation error
        """
        source = read_source(filepath, self.options)
        return self.compile_source(source, str(filepath))


def compile_pl0(source: str, filename: str = "<input>") -> str:
    """Compile PL/0 source text and return the generated C."""
    return PL0Compiler().compile_source(source, filename).output
