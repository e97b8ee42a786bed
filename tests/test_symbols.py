"""
Symbol Table Tests
==================

Declaration, shadowing, role checks and scope teardown for the
PL/0 symbol table.
"""

import pytest
from pl0c.symbols import (
    MAIN_SYMBOL,
    Symbol,
    SymbolKind,
    SymbolTable,
    UseContext,
)
from pl0c.errors import (
    DuplicateSymbolError,
    SourceLocation,
    SymbolRoleError,
    UndefinedSymbolError,
)


@pytest.fixture
def table():
    return SymbolTable()


# =============================================================================
# Sentinel
# =============================================================================

class TestSentinel:
    """The program's own entry seeded at construction."""

    def test_starts_with_main(self, table):
        assert list(table) == [MAIN_SYMBOL]
        assert MAIN_SYMBOL == Symbol("main", SymbolKind.PROCEDURE, 0)

    def test_main_survives_teardown(self, table):
        table.leave_scope()
        table.leave_scope()
        assert list(table) == [MAIN_SYMBOL]

    def test_main_name_is_taken_at_program_level(self, table):
        with pytest.raises(DuplicateSymbolError):
            table.declare("main", SymbolKind.VARIABLE, 0)


# =============================================================================
# Declaration and Lookup
# =============================================================================

class TestDeclareResolve:
    """declare() and resolve()."""

    def test_declare_then_resolve(self, table):
        for kind in SymbolKind:
            name = f"n_{kind.value}"
            table.declare(name, kind, 0)
            assert table.resolve(name).kind == kind

    def test_undefined(self, table):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            table.resolve("y")
        assert exc_info.value.message == "undefined symbol: y"

    def test_duplicate_same_depth(self, table):
        table.declare("x", SymbolKind.VARIABLE, 0)
        with pytest.raises(DuplicateSymbolError) as exc_info:
            table.declare("x", SymbolKind.CONSTANT, 0)
        assert exc_info.value.message == "duplicate symbol: x"

    def test_shadowing_in_deeper_scope(self, table):
        table.declare("x", SymbolKind.VARIABLE, 0)
        table.declare("p", SymbolKind.PROCEDURE, 0)
        table.declare("x", SymbolKind.CONSTANT, 1)
        symbol = table.resolve("x")
        assert symbol.kind == SymbolKind.CONSTANT
        assert symbol.depth == 1

    def test_names_are_case_sensitive(self, table):
        table.declare("x", SymbolKind.VARIABLE, 0)
        table.declare("X", SymbolKind.VARIABLE, 0)
        with pytest.raises(UndefinedSymbolError):
            table.resolve("xx")

    def test_error_carries_location(self, table):
        location = SourceLocation("t.pl0", 4, 2)
        with pytest.raises(UndefinedSymbolError) as exc_info:
            table.resolve("q", location)
        assert exc_info.value.line == 4
        assert str(exc_info.value).startswith("error: 4: undefined symbol: q")

    def test_contains_and_len(self, table):
        table.declare("x", SymbolKind.VARIABLE, 0)
        assert "x" in table
        assert "y" not in table
        assert len(table) == 2


# =============================================================================
# Role Checks
# =============================================================================

class TestCheckRole:
    """check_role() for each use context."""

    @pytest.fixture
    def populated(self, table):
        table.declare("c", SymbolKind.CONSTANT, 0)
        table.declare("v", SymbolKind.VARIABLE, 0)
        table.declare("p", SymbolKind.PROCEDURE, 0)
        return table

    def test_lhs_requires_variable(self, populated):
        assert populated.check_role("v", UseContext.LHS).name == "v"
        for name in ("c", "p"):
            with pytest.raises(SymbolRoleError) as exc_info:
                populated.check_role(name, UseContext.LHS)
            assert exc_info.value.message == f"must be a variable: {name}"

    def test_rhs_rejects_procedure(self, populated):
        populated.check_role("c", UseContext.RHS)
        populated.check_role("v", UseContext.RHS)
        with pytest.raises(SymbolRoleError) as exc_info:
            populated.check_role("p", UseContext.RHS)
        assert exc_info.value.message == "must not be a procedure: p"

    def test_call_requires_procedure(self, populated):
        populated.check_role("p", UseContext.CALL)
        populated.check_role("main", UseContext.CALL)
        for name in ("c", "v"):
            with pytest.raises(SymbolRoleError) as exc_info:
                populated.check_role(name, UseContext.CALL)
            assert exc_info.value.message == f"must be a procedure: {name}"

    def test_undefined_before_role(self, populated):
        with pytest.raises(UndefinedSymbolError):
            populated.check_role("nope", UseContext.RHS)

    def test_role_follows_shadowing(self, populated):
        """An inner variable hides an outer procedure of the same name."""
        populated.declare("q", SymbolKind.PROCEDURE, 0)
        populated.declare("p", SymbolKind.VARIABLE, 1)
        populated.check_role("p", UseContext.LHS)


# =============================================================================
# Scope Teardown
# =============================================================================

class TestLeaveScope:
    """leave_scope() truncates back to the last procedure."""

    def test_locals_removed_procedure_kept(self, table):
        table.declare("g", SymbolKind.VARIABLE, 0)
        table.declare("p", SymbolKind.PROCEDURE, 0)
        table.declare("a", SymbolKind.CONSTANT, 1)
        table.declare("b", SymbolKind.VARIABLE, 1)

        removed = table.leave_scope()

        assert [s.name for s in removed] == ["a", "b"]
        assert table.resolve("p").kind == SymbolKind.PROCEDURE
        assert table.resolve("g").kind == SymbolKind.VARIABLE
        with pytest.raises(UndefinedSymbolError):
            table.resolve("a")
        with pytest.raises(UndefinedSymbolError):
            table.resolve("b")

    def test_shadowed_outer_visible_again(self, table):
        table.declare("x", SymbolKind.VARIABLE, 0)
        table.declare("p", SymbolKind.PROCEDURE, 0)
        table.declare("x", SymbolKind.CONSTANT, 1)
        assert table.resolve("x").kind == SymbolKind.CONSTANT

        table.leave_scope()

        assert table.resolve("x").kind == SymbolKind.VARIABLE

    def test_sibling_procedures_may_reuse_local_names(self, table):
        table.declare("p", SymbolKind.PROCEDURE, 0)
        table.declare("t", SymbolKind.VARIABLE, 1)
        table.leave_scope()
        table.declare("q", SymbolKind.PROCEDURE, 0)
        table.declare("t", SymbolKind.VARIABLE, 1)
        assert table.resolve("t").depth == 1

    def test_nothing_to_remove(self, table):
        table.declare("p", SymbolKind.PROCEDURE, 0)
        assert table.leave_scope() == []
        assert "p" in table
