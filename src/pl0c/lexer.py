"""
PL/0 Lexer (Tokenizer)
======================

This module implements the lexer for PL/0. The parser pulls one token at a
time with ``Lexer.next_token()``; no token list is ever built during
compilation. ``Lexer.tokenize()`` wraps the same call in a generator for
debugging and tests.

Token Categories
----------------
- Keywords: const, var, procedure, call, begin, end, if, then, while, do,
  odd, writeInt, writeChar, readInt, readChar, into (case-sensitive)
- Identifiers: letter or '_' followed by letters, digits, '_'
- Numbers: decimal digits with optional '_' separators (1_000 == 1000)
- Operators: := = # < > + - * /
- Delimiters: . , ; ( )

Comments
--------
Anything between '{' and '}', possibly spanning lines. Comments do not nest.

Example Usage
-------------
>>> from pl0c.lexer import Lexer
>>> lexer = Lexer("var x; begin x := 1_0 end.", "test.pl0")
>>> for token in lexer.tokenize():
...     print(token)
Token(VAR, 'var', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(SEMICOLON, ';', 1:6)
Token(BEGIN, 'begin', 1:8)
Token(IDENTIFIER, 'x', 1:14)
Token(ASSIGN, ':=', 1:16)
Token(NUMBER, '10', 1:19)
Token(END, 'end', 1:23)
Token(DOT, '.', 1:26)
Token(EOF, 1:27)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from pl0c.errors import (
    SourceLocation,
    UnterminatedCommentError,
    InvalidNumberError,
    UnknownTokenError,
)


# Largest literal the generated C can hold in a 64-bit long.
MAX_NUMBER = 2**63 - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token kinds for PL/0."""

    # === Structural ===
    EOF = auto()            # End of input

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    NUMBER = auto()

    # === Keywords ===
    CONST = auto()
    VAR = auto()
    PROCEDURE = auto()
    CALL = auto()
    BEGIN = auto()
    END = auto()
    IF = auto()
    THEN = auto()
    WHILE = auto()
    DO = auto()
    ODD = auto()
    WRITE_INT = auto()      # writeInt
    WRITE_CHAR = auto()     # writeChar
    READ_INT = auto()       # readInt
    READ_CHAR = auto()      # readChar
    INTO = auto()

    # === Operators and Delimiters ===
    DOT = auto()            # .
    EQUAL = auto()          # =
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;
    ASSIGN = auto()         # :=
    NOT_EQUAL = auto()      # #
    LESS_THAN = auto()      # <
    GREATER_THAN = auto()   # >
    PLUS = auto()           # +
    MINUS = auto()          # -
    MULTIPLY = auto()       # *
    DIVIDE = auto()         # /
    LPAREN = auto()         # (
    RPAREN = auto()         # )


# =============================================================================
# Keyword and Punctuation Tables
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    "const": TokenType.CONST,
    "var": TokenType.VAR,
    "procedure": TokenType.PROCEDURE,
    "call": TokenType.CALL,
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "while": TokenType.WHILE,
    "do": TokenType.DO,
    "odd": TokenType.ODD,
    "writeInt": TokenType.WRITE_INT,
    "writeChar": TokenType.WRITE_CHAR,
    "readInt": TokenType.READ_INT,
    "readChar": TokenType.READ_CHAR,
    "into": TokenType.INTO,
}

PUNCTUATION: dict[str, TokenType] = {
    ".": TokenType.DOT,
    "=": TokenType.EQUAL,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "#": TokenType.NOT_EQUAL,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

# Source spelling of fixed tokens, used in diagnostics
_SPELLING: dict[TokenType, str] = {
    **{token_type: text for text, token_type in KEYWORDS.items()},
    **{token_type: text for text, token_type in PUNCTUATION.items()},
    TokenType.ASSIGN: ":=",
}


def describe_token_type(token_type: TokenType) -> str:
    """Human-readable name of a token kind ("'begin'", "identifier", ...)."""
    if token_type in _SPELLING:
        return f"'{_SPELLING[token_type]}'"
    if token_type == TokenType.EOF:
        return "end of input"
    return token_type.name.lower()


def parse_number(text: str) -> int:
    """
    Convert the text of a numeric literal to its value.

    Underscores are visual separators and are dropped. The remaining digits
    must be present and must not exceed MAX_NUMBER.

    Raises:
        InvalidNumberError: If no digits remain or the value is too large
    """
    digits = text.replace("_", "")
    if not digits or any(c not in string.digits for c in digits):
        raise InvalidNumberError(digits)
    value = int(digits)
    if value > MAX_NUMBER:
        raise InvalidNumberError(digits)
    return value


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single classified token.

    Attributes:
        type: The TokenType classification
        value: Source text for identifiers, keywords and punctuation;
               the separator-free digit string for numbers; None at EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: Optional[str]
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def number(self) -> int:
        """Integer value of a NUMBER token."""
        return int(self.value)

    def describe(self) -> str:
        """Describe the token for diagnostics."""
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.NUMBER:
            return f"number {self.value}"
        return describe_token_type(self.type)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes PL/0 source code on demand.

    The lexer owns the scan cursor and the line counter. Each call to
    next_token() consumes exactly one token; once the input is exhausted
    every further call returns an EOF token.

    Usage:
        lexer = Lexer(source_text, filename)
        token = lexer.next_token()

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"
    NUMBER_CHARS = string.digits + "_"
    WHITESPACE = " \t\n"

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    @property
    def line(self) -> int:
        """Current line counter."""
        return self._line

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Raises:
            PL0SyntaxError: On an unterminated comment, an invalid number
                or a character that starts no token
        """
        self._skip_whitespace_and_comments()

        if self._at_end():
            return self._make_token(TokenType.EOF, None, self._line, self._column)

        start_line = self._line
        start_column = self._column
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in string.digits:
            return self._scan_number(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def tokenize(self) -> Iterator[Token]:
        """Yield every token up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def source_line(self, line: int) -> Optional[str]:
        """Return the text of a 1-indexed source line for error context."""
        lines = self.source.split("\n")
        if 0 < line <= len(lines):
            return lines[line - 1]
        return None

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at the cursor plus offset, or "" past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, keeping line and column current."""
        if self._at_end():
            return ""
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _make_token(
        self,
        token_type: TokenType,
        value: Optional[str],
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _location(self, line: int, column: int) -> SourceLocation:
        return SourceLocation(self.filename, line, column)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == "{":
                self._skip_comment()
                continue

            break

    def _skip_comment(self) -> None:
        """
        Skip a { ... } comment.

        Raises:
            UnterminatedCommentError: If input ends before the closing brace
        """
        self._advance()  # consume {

        while not self._at_end():
            if self._advance() == "}":
                return

        # Reported at the line where input ran out
        raise UnterminatedCommentError(
            self._location(self._line, self._column),
            self.source_line(self._line),
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """Scan an identifier, returning a keyword token when it is one."""
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)
        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """Scan a run of digits and underscores as a numeric literal."""
        chars = []
        while self._peek() and self._peek() in self.NUMBER_CHARS:
            chars.append(self._advance())

        text = "".join(chars)
        try:
            value = parse_number(text)
        except InvalidNumberError as e:
            raise InvalidNumberError(
                e.digits,
                self._location(start_line, start_column),
                self.source_line(start_line),
            ) from None

        return self._make_token(TokenType.NUMBER, str(value), start_line, start_column)

    def _scan_operator(self, start_line: int, start_column: int) -> Token:
        """Scan ':=' or a single-character operator or delimiter."""
        char = self._advance()

        if char == ":":
            following = self._peek()
            if following != "=":
                raise UnknownTokenError(
                    f":{following}",
                    self._location(start_line, start_column),
                    self.source_line(start_line),
                )
            self._advance()
            return self._make_token(TokenType.ASSIGN, ":=", start_line, start_column)

        if char in PUNCTUATION:
            return self._make_token(PUNCTUATION[char], char, start_line, start_column)

        raise UnknownTokenError(
            char,
            self._location(start_line, start_column),
            self.source_line(start_line),
        )
