"""
PL/0 Compiler Error Hierarchy
=============================

This module defines the exception hierarchy for the PL/0 compiler.
All exceptions inherit from PL0Error, allowing callers to catch every
compiler diagnostic with a single except clause.

Exception Hierarchy
-------------------
PL0Error (base)
├── SourceFileError - bad file name or unreadable source file
├── PL0SyntaxError - lexer and parser errors
│   ├── UnterminatedCommentError - '{' without matching '}'
│   ├── InvalidNumberError - literal out of range or without digits
│   ├── UnknownTokenError - character that starts no token
│   └── UnexpectedTokenError - token does not fit the grammar
└── PL0SemanticError - errors found while checking names
    ├── UndefinedSymbolError - use of an undeclared name
    ├── DuplicateSymbolError - name declared twice in one block
    ├── SymbolRoleError - constant/variable/procedure used in the wrong place
    └── NestingDepthError - procedures nested too deeply

Compilation is fail-fast: the first error raised ends the compilation.
Nothing is collected or recovered from.

Error Message Format
--------------------
    error: line: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Example:
    error: 3: undefined symbol: y
        begin y := 1 end.
              ^
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in PL/0 source text.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column'."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception
# =============================================================================

class PL0Error(Exception):
    """
    Base exception for all PL/0 compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """Source line of the error, or None for errors outside the source."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with line number, source context, and hint.

            error: 3: undefined symbol: y
                begin y := 1 end.
                      ^
        """
        parts = []

        if self.location:
            parts.append(f"error: {self.location.line}: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Source File Errors
# =============================================================================

class SourceFileError(PL0Error):
    """
    The source file could not be used.

    Raised before lexing starts when the file name lacks the required
    extension or the file cannot be opened or read.
    """
    pass


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class PL0SyntaxError(PL0Error):
    """
    Syntax error in PL/0 source code.

    Raised when the lexer cannot form a token or the parser finds a token
    that the grammar does not allow at that point.
    """
    pass


class UnterminatedCommentError(PL0SyntaxError):
    """A '{' comment reaches end of input without a closing '}'."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated comment",
            location=location,
            hint="add '}' to close the comment",
            source_line=source_line,
        )


class InvalidNumberError(PL0SyntaxError):
    """
    Numeric literal that cannot be represented.

    The digits (with '_' separators already removed) must form a
    non-negative integer no larger than the target's maximum long.
    """

    def __init__(
        self,
        digits: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.digits = digits
        hint = None if digits else "'_' is a separator and needs digits around it"
        super().__init__(
            f"invalid number: {digits}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownTokenError(PL0SyntaxError):
    """Character (or ':' not followed by '=') that starts no token."""

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        hint = "did you mean ':='?" if text.startswith(":") else None
        super().__init__(
            f"unknown token: '{text}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnexpectedTokenError(PL0SyntaxError):
    """
    Token that does not fit the grammar.

    The message defaults to "syntax error"; the hint names what the
    parser was looking for.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        message: str = "syntax error",
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}, found {found}"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class PL0SemanticError(PL0Error):
    """
    Semantic error in PL/0 source code.

    Raised when the program is syntactically valid but names are
    undeclared, redeclared, or used in a role they do not have.
    """
    pass


class UndefinedSymbolError(PL0SemanticError):
    """Reference to a name with no live declaration."""

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        super().__init__(
            f"undefined symbol: {name}",
            location=location,
            source_line=source_line,
        )


class DuplicateSymbolError(PL0SemanticError):
    """Name declared twice in the same block."""

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        super().__init__(
            f"duplicate symbol: {name}",
            location=location,
            source_line=source_line,
        )


class SymbolRoleError(PL0SemanticError):
    """
    Name used in a context its role does not allow.

    Examples:
        - assigning to a constant ("must be a variable")
        - using a procedure in an expression ("must not be a procedure")
        - calling a variable ("must be a procedure")
    """

    def __init__(
        self,
        name: str,
        requirement: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        self.requirement = requirement
        super().__init__(
            f"{requirement}: {name}",
            location=location,
            source_line=source_line,
        )


class NestingDepthError(PL0SemanticError):
    """Blocks opened deeper than the compiler allows, or closed too often."""
    pass
