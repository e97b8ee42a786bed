"""
PL/0 Symbol Table
=================

The symbol table is an ordered list of declared names. Order matters:

- Lookup scans for the *last* symbol with a given name, so a declaration
  in an inner block (always appended after the outer ones) shadows an
  outer declaration of the same name.
- Leaving a procedure's block truncates the list back to the most recent
  procedure symbol. The procedure's constants and variables disappear,
  the procedure's own name stays callable.

The first entry is a sentinel procedure named ``main`` at depth 0 that
stands for the program itself. It is never removed, so teardown always
has a procedure to stop at.

Roles and Uses
--------------
| Use                          | Allowed roles          | Error                   |
|------------------------------|------------------------|-------------------------|
| assignment / read target     | variable               | must be a variable      |
| value in an expression/write | constant, variable     | must not be a procedure |
| call target                  | procedure              | must be a procedure     |
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pl0c.errors import (
    SourceLocation,
    UndefinedSymbolError,
    DuplicateSymbolError,
    SymbolRoleError,
)


logger = logging.getLogger(__name__)


class SymbolKind(Enum):
    """Declared role of a name."""
    CONSTANT = "constant"
    VARIABLE = "variable"
    PROCEDURE = "procedure"


class UseContext(Enum):
    """Syntactic position a name is used in."""
    LHS = "lhs"     # assignment target, readInt/readChar target
    RHS = "rhs"     # factor, writeInt/writeChar operand
    CALL = "call"   # call target


@dataclass(frozen=True)
class Symbol:
    """
    A declared name.

    Attributes:
        name: The identifier as written
        kind: Constant, variable or procedure
        depth: Block depth the name was declared at (program level is 0)
    """
    name: str
    kind: SymbolKind
    depth: int


MAIN_SYMBOL = Symbol("main", SymbolKind.PROCEDURE, 0)


class SymbolTable:
    """
    Scope-tagged registry of constants, variables and procedures.

    Example:
        table = SymbolTable()
        table.declare("x", SymbolKind.VARIABLE, depth=0)
        table.check_role("x", UseContext.LHS)   # ok
        table.check_role("x", UseContext.CALL)  # SymbolRoleError
    """

    def __init__(self):
        self._symbols: list[Symbol] = [MAIN_SYMBOL]

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols)

    def __contains__(self, name: str) -> bool:
        return any(symbol.name == name for symbol in self._symbols)

    def declare(
        self,
        name: str,
        kind: SymbolKind,
        depth: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Append a new symbol at the given depth.

        Raises:
            DuplicateSymbolError: If a live symbol with the same name was
                declared at the same depth
        """
        for existing in self._symbols:
            if existing.name == name and existing.depth == depth:
                raise DuplicateSymbolError(name, location, source_line)

        symbol = Symbol(name, kind, depth)
        self._symbols.append(symbol)
        logger.debug("declared %s %s at depth %d", kind.value, name, depth)
        return symbol

    def resolve(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Return the most recently declared symbol called ``name``.

        Raises:
            UndefinedSymbolError: If no live symbol has that name
        """
        for symbol in reversed(self._symbols):
            if symbol.name == name:
                return symbol
        raise UndefinedSymbolError(name, location, source_line)

    def check_role(
        self,
        name: str,
        use: UseContext,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Resolve ``name`` and verify its role suits the use.

        Raises:
            UndefinedSymbolError: If the name is not declared
            SymbolRoleError: If the role does not fit the use
        """
        symbol = self.resolve(name, location, source_line)

        if use == UseContext.LHS and symbol.kind != SymbolKind.VARIABLE:
            raise SymbolRoleError(name, "must be a variable", location, source_line)
        if use == UseContext.RHS and symbol.kind == SymbolKind.PROCEDURE:
            raise SymbolRoleError(name, "must not be a procedure", location, source_line)
        if use == UseContext.CALL and symbol.kind != SymbolKind.PROCEDURE:
            raise SymbolRoleError(name, "must be a procedure", location, source_line)

        return symbol

    def leave_scope(self) -> list[Symbol]:
        """
        Drop the constants and variables of the block being closed.

        Everything after the most recent procedure symbol is removed.
        Returns the removed symbols in declaration order.
        """
        boundary = len(self._symbols) - 1
        while self._symbols[boundary].kind != SymbolKind.PROCEDURE:
            boundary -= 1

        removed = self._symbols[boundary + 1:]
        del self._symbols[boundary + 1:]
        logger.debug(
            "closed scope of %s, dropped %d symbol(s)",
            self._symbols[boundary].name, len(removed),
        )
        return removed
