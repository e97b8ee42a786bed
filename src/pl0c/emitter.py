"""
PL/0 Code Emission
==================

The parser translates in a single pass: every time it recognizes a token
or production it immediately asks an emitter to append the matching piece
of target text. ``CodeEmitter`` is that narrow interface; ``CEmitter`` is
the backend that produces C source for an ordinary C compiler.

Shape of the Generated C
------------------------
    #include ...                  fixed preamble
    static long __pl0_read_int(void) { ... }

    const long N=10;               program-level constants and variables
    long x;

    void                           one function per procedure,
    square(void)                   in declaration order
    {
    ...;
    }

    int                            the program's own statement
    main(int argc, char *argv[])
    {
    ...;return 0;
    }

Every PL/0 value is a C ``long``. Constants become ``const long`` so the
C compiler itself rejects writes to them.
"""

from abc import ABC, abstractmethod
from typing import Optional, TextIO

from pl0c.lexer import Token, TokenType


# =============================================================================
# Emission Interface
# =============================================================================

class CodeEmitter(ABC):
    """
    Receives target-text fragments from the parser in parse order.

    Operand arguments are the source text of an identifier or of a
    separator-free number literal.
    """

    @abstractmethod
    def prologue(self) -> None:
        """Emit text that precedes all declarations."""

    @abstractmethod
    def constant(self, name: str) -> None:
        """Start a constant binding; the value follows via symbol()."""

    @abstractmethod
    def variable(self, name: str) -> None:
        """Declare a mutable integer."""

    @abstractmethod
    def procedure(self, name: Optional[str]) -> None:
        """Open a subroutine body; ``None`` opens the program entry point."""

    @abstractmethod
    def epilogue(self, is_main: bool) -> None:
        """Close the body opened by procedure()."""

    @abstractmethod
    def symbol(self, token: Token) -> None:
        """Emit the translation of a single source token."""

    @abstractmethod
    def call(self, name: str) -> None:
        """Invoke a procedure by name."""

    @abstractmethod
    def semicolon(self) -> None:
        """Terminate a statement or declaration."""

    @abstractmethod
    def newline(self) -> None:
        """Emit a line break."""

    @abstractmethod
    def odd(self) -> None:
        """Close an odd test opened by symbol(ODD)."""

    @abstractmethod
    def read_int(self, name: str) -> None:
        """Read a line from input and store it as an integer."""

    @abstractmethod
    def read_char(self, name: str) -> None:
        """Read one raw input character."""

    @abstractmethod
    def write_int(self, operand: str) -> None:
        """Print an integer."""

    @abstractmethod
    def write_char(self, operand: str) -> None:
        """Print the character with the given code."""


# =============================================================================
# C Backend
# =============================================================================

C_PREAMBLE = """\
#include <errno.h>
#include <limits.h>
#include <stdio.h>
#include <stdlib.h>
#include <string.h>

static long
__pl0_read_int(void)
{
\tchar buf[24], *end;
\tsize_t len;
\tlong value;

\tif (fgets(buf, sizeof(buf), stdin) == NULL)
\t\tbuf[0] = '\\0';
\tlen = strlen(buf);
\twhile (len > 0 && (buf[len - 1] == '\\n' || buf[len - 1] == '\\r'))
\t\tbuf[--len] = '\\0';
\terrno = 0;
\tvalue = strtol(buf, &end, 10);
\tif (len == 0 || *end != '\\0' || errno == ERANGE) {
\t\t(void) fprintf(stderr, "invalid number: %s\\n", buf);
\t\texit(1);
\t}
\treturn value;
}

"""

# Direct translations of single tokens
_TOKEN_TEXT: dict[TokenType, str] = {
    TokenType.BEGIN: "{\n",
    TokenType.END: ";\n}\n",
    TokenType.IF: "if(",
    TokenType.THEN: ")",
    TokenType.DO: ")",
    TokenType.ODD: "(",
    TokenType.WHILE: "while(",
    TokenType.EQUAL: "==",
    TokenType.COMMA: ",",
    TokenType.ASSIGN: "=",
    TokenType.NOT_EQUAL: "!=",
    TokenType.LESS_THAN: "<",
    TokenType.GREATER_THAN: ">",
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.MULTIPLY: "*",
    TokenType.DIVIDE: "/",
    TokenType.LPAREN: "(",
    TokenType.RPAREN: ")",
}


class CEmitter(CodeEmitter):
    """
    Emits C source text.

    Fragments are collected in memory and, when a stream is given, also
    written to it as they are produced. Text already written is never
    taken back, even if compilation later fails.

    Usage:
        emitter = CEmitter()
        ...parse...
        c_source = emitter.getvalue()
    """

    def __init__(self, stream: Optional[TextIO] = None, emit_preamble: bool = True):
        self._stream = stream
        self._emit_preamble = emit_preamble
        self._output: list[str] = []

    def getvalue(self) -> str:
        """Return all text emitted so far."""
        return "".join(self._output)

    def _emit(self, text: str) -> None:
        self._output.append(text)
        if self._stream is not None:
            self._stream.write(text)

    # =========================================================================
    # Declarations and Bodies
    # =========================================================================

    def prologue(self) -> None:
        if self._emit_preamble:
            self._emit(C_PREAMBLE)

    def constant(self, name: str) -> None:
        self._emit(f"const long {name}=")

    def variable(self, name: str) -> None:
        self._emit(f"long {name};\n")

    def procedure(self, name: Optional[str]) -> None:
        if name is None:
            self._emit("int\nmain(int argc, char *argv[])\n")
        else:
            self._emit(f"void\n{name}(void)\n")
        self._emit("{\n")

    def epilogue(self, is_main: bool) -> None:
        self._emit(";")
        if is_main:
            self._emit("return 0;")
        self._emit("\n}\n\n")

    # =========================================================================
    # Statements and Expressions
    # =========================================================================

    def symbol(self, token: Token) -> None:
        if token.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
            self._emit(token.value)
        elif token.type in _TOKEN_TEXT:
            self._emit(_TOKEN_TEXT[token.type])

    def call(self, name: str) -> None:
        self._emit(f"{name}();\n")

    def semicolon(self) -> None:
        self._emit(";\n")

    def newline(self) -> None:
        self._emit("\n")

    def odd(self) -> None:
        self._emit(")&1")

    # =========================================================================
    # Input and Output
    # =========================================================================

    def read_int(self, name: str) -> None:
        self._emit(f"{name}=__pl0_read_int();")

    def read_char(self, name: str) -> None:
        self._emit(f"{name}=(unsigned char) fgetc(stdin);")

    def write_int(self, operand: str) -> None:
        self._emit(f'(void) fprintf(stdout, "%ld", (long) {operand});')

    def write_char(self, operand: str) -> None:
        self._emit(f'(void) fprintf(stdout, "%c", (unsigned char) {operand});')
