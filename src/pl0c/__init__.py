"""
pl0c - PL/0 to C Compiler
=========================

This package implements a single-pass compiler for PL/0, the small
teaching language with constants, integer variables, parameterless
procedures and structured control flow. Source text is translated
directly into C that any C compiler can build.

Main Components
---------------
- **lexer**: turns source text into tokens, one at a time
- **symbols**: scope-aware table of constants, variables and procedures
- **parser**: recursive-descent recognizer that checks names and emits
  code as it goes
- **emitter**: the C backend the parser emits through
- **compiler**: driver tying the pieces together

Quick Start
-----------
    >>> from pl0c import compile_pl0
    >>> print(compile_pl0("var x; begin x := 1; writeInt x end."))

Or from the command line:
    $ pl0c hello.pl0 > hello.c && cc -o hello hello.c
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from pl0c.compiler import (
    PL0Compiler,
    CompilerOptions,
    CompilerResult,
    compile_pl0,
    read_source,
)
from pl0c.emitter import CodeEmitter, CEmitter
from pl0c.errors import (
    SourceLocation,
    PL0Error,
    SourceFileError,
    PL0SyntaxError,
    UnterminatedCommentError,
    InvalidNumberError,
    UnknownTokenError,
    UnexpectedTokenError,
    PL0SemanticError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    SymbolRoleError,
    NestingDepthError,
)
from pl0c.lexer import Lexer, Token, TokenType, parse_number
from pl0c.parser import CompilationContext, Parser
from pl0c.symbols import Symbol, SymbolKind, SymbolTable, UseContext

__all__ = [
    "__version__",
    # Driver
    "PL0Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_pl0",
    "read_source",
    # Emission
    "CodeEmitter",
    "CEmitter",
    # Errors
    "SourceLocation",
    "PL0Error",
    "SourceFileError",
    "PL0SyntaxError",
    "UnterminatedCommentError",
    "InvalidNumberError",
    "UnknownTokenError",
    "UnexpectedTokenError",
    "PL0SemanticError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "SymbolRoleError",
    "NestingDepthError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "parse_number",
    # Parser
    "CompilationContext",
    "Parser",
    # Symbol table
    "Symbol",
    "SymbolKind",
    "SymbolTable",
    "UseContext",
]
