"""
PL/0 Parser, Semantic Checker and Code Generator
================================================

This module implements PL/0 as a single recursive-descent pass. Each
grammar rule is a method; as a rule recognizes a token it checks the
name against the symbol table and immediately hands the translation to
the emitter. No syntax tree is built and nothing is revisited.

Grammar
-------
    program    = block "." .
    block      = [ "const" ident "=" number { "," ident "=" number } ";" ]
                 [ "var" ident { "," ident } ";" ]
                 { "procedure" ident ";" block ";" } statement .
    statement  = [ ident ":=" expression
                 | "call" ident
                 | "begin" statement { ";" statement } "end"
                 | "if" condition "then" statement
                 | "while" condition "do" statement
                 | "readInt" [ "into" ] ident
                 | "writeInt" ( ident | number )
                 | "readChar" [ "into" ] ident
                 | "writeChar" ( ident | number ) ] .
    condition  = "odd" expression
               | expression ( "=" | "#" | "<" | ">" ) expression .
    expression = [ "+" | "-" ] term { ( "+" | "-" ) term } .
    term       = factor { ( "*" | "/" ) factor } .
    factor     = ident | number | "(" expression ")" .

The grammar is LL(1): the current token alone selects the production.

Nesting
-------
The program block is depth 1 and a procedure body is depth 2. A
procedure may not declare procedures of its own; opening a third level
raises NestingDepthError.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pl0c.emitter import CodeEmitter
from pl0c.errors import NestingDepthError, UnexpectedTokenError
from pl0c.lexer import Lexer, Token, TokenType, describe_token_type
from pl0c.symbols import SymbolKind, SymbolTable, UseContext


logger = logging.getLogger(__name__)


# Program block plus one level of procedures
MAX_DEPTH = 2

RELATIONAL_OPERATORS = (
    TokenType.EQUAL,
    TokenType.NOT_EQUAL,
    TokenType.LESS_THAN,
    TokenType.GREATER_THAN,
)


# =============================================================================
# Compilation Context
# =============================================================================

@dataclass
class CompilationContext:
    """
    All mutable state of one compilation.

    Attributes:
        lexer: Owns the scan cursor and line counter
        symbols: Declared names currently in scope
        emitter: Destination of generated text
        token: The current (one token lookahead) token
        depth: Number of blocks currently open
        in_procedure: True while generating a procedure rather than main
    """
    lexer: Lexer
    symbols: SymbolTable
    emitter: CodeEmitter
    token: Optional[Token] = None
    depth: int = 0
    in_procedure: bool = False


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    One-pass PL/0 translator.

    Usage:
        context = CompilationContext(Lexer(source), SymbolTable(), CEmitter())
        Parser(context).parse()
        print(context.emitter.getvalue())

    Raises PL0Error subclasses on the first problem found; there is no
    error recovery.
    """

    def __init__(self, context: CompilationContext):
        self.ctx = context

    def parse(self) -> None:
        """
        Translate a whole program.

        Raises:
            PL0SyntaxError: On malformed input
            PL0SemanticError: On misuse of names or excessive nesting
        """
        self.ctx.emitter.prologue()

        self._next()
        self._block()
        self._expect(TokenType.DOT)

        if self.ctx.token.type != TokenType.EOF:
            raise self._unexpected(
                describe_token_type(TokenType.EOF),
                message="extra tokens at end of file",
            )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    @property
    def _token(self) -> Token:
        return self.ctx.token

    def _next(self) -> None:
        """Replace the current token with the next one from the lexer."""
        self.ctx.token = self.ctx.lexer.next_token()

    def _check(self, *types: TokenType) -> bool:
        return self.ctx.token.type in types

    def _expect(self, token_type: TokenType) -> Token:
        """
        Consume a token of the given type and return it.

        Raises:
            UnexpectedTokenError: If the current token has another type
        """
        token = self.ctx.token
        if token.type != token_type:
            raise self._unexpected(describe_token_type(token_type))
        self._next()
        return token

    def _unexpected(
        self,
        expected: Optional[str] = None,
        message: str = "syntax error",
    ) -> UnexpectedTokenError:
        token = self.ctx.token
        return UnexpectedTokenError(
            token.describe(),
            expected,
            token.location,
            self.ctx.lexer.source_line(token.line),
            message=message,
        )

    # =========================================================================
    # Symbol Table Access
    # =========================================================================

    def _declare(self, kind: SymbolKind) -> None:
        """Declare the current identifier token in the innermost block."""
        token = self.ctx.token
        self.ctx.symbols.declare(
            token.value,
            kind,
            self.ctx.depth - 1,
            token.location,
            self.ctx.lexer.source_line(token.line),
        )

    def _check_symbol(self, use: UseContext) -> None:
        """Verify the current identifier token may be used as ``use``."""
        token = self.ctx.token
        self.ctx.symbols.check_role(
            token.value,
            use,
            token.location,
            self.ctx.lexer.source_line(token.line),
        )

    # =========================================================================
    # Blocks and Declarations
    # =========================================================================

    def _block(self) -> None:
        """
        block = [ const-decls ] [ var-decls ] { procedure } statement .

        Program-level constants and variables become file-scope C
        definitions; inside a procedure they become locals of its function.
        """
        ctx = self.ctx
        emitter = ctx.emitter

        if ctx.depth >= MAX_DEPTH:
            raise NestingDepthError(
                "nesting depth exceeded",
                self._token.location,
                hint=f"procedures may be nested at most {MAX_DEPTH - 1} level deep",
                source_line=ctx.lexer.source_line(self._token.line),
            )
        ctx.depth += 1

        if self._check(TokenType.CONST):
            self._next()
            self._constant_definition()
            while self._check(TokenType.COMMA):
                self._next()
                self._constant_definition()
            self._expect(TokenType.SEMICOLON)

        if self._check(TokenType.VAR):
            self._next()
            self._variable_definition()
            while self._check(TokenType.COMMA):
                self._next()
                self._variable_definition()
            self._expect(TokenType.SEMICOLON)
            emitter.newline()

        while self._check(TokenType.PROCEDURE):
            ctx.in_procedure = True

            self._next()
            if self._check(TokenType.IDENTIFIER):
                self._declare(SymbolKind.PROCEDURE)
                emitter.procedure(self._token.value)
                logger.debug("procedure %s at line %d", self._token.value, self._token.line)
            self._expect(TokenType.IDENTIFIER)
            self._expect(TokenType.SEMICOLON)

            self._block()

            self._expect(TokenType.SEMICOLON)

            ctx.in_procedure = False
            ctx.symbols.leave_scope()

        if not ctx.in_procedure:
            emitter.procedure(None)

        self._statement()

        emitter.epilogue(is_main=not ctx.in_procedure)

        ctx.depth -= 1
        if ctx.depth < 0:
            raise NestingDepthError("nesting depth fell below 0", self._token.location)

    def _constant_definition(self) -> None:
        """ident "=" number"""
        emitter = self.ctx.emitter

        if self._check(TokenType.IDENTIFIER):
            self._declare(SymbolKind.CONSTANT)
            emitter.constant(self._token.value)
        self._expect(TokenType.IDENTIFIER)

        self._expect(TokenType.EQUAL)

        if self._check(TokenType.NUMBER):
            emitter.symbol(self._token)
            emitter.semicolon()
        self._expect(TokenType.NUMBER)

    def _variable_definition(self) -> None:
        if self._check(TokenType.IDENTIFIER):
            self._declare(SymbolKind.VARIABLE)
            self.ctx.emitter.variable(self._token.value)
        self._expect(TokenType.IDENTIFIER)

    # =========================================================================
    # Statements
    # =========================================================================

    def _statement(self) -> None:
        """Dispatch on the current token; any other token is the empty statement."""
        token_type = self._token.type

        if token_type == TokenType.IDENTIFIER:
            self._assignment()
        elif token_type == TokenType.CALL:
            self._call()
        elif token_type == TokenType.BEGIN:
            self._compound()
        elif token_type == TokenType.IF:
            self._conditional(TokenType.IF, TokenType.THEN)
        elif token_type == TokenType.WHILE:
            self._conditional(TokenType.WHILE, TokenType.DO)
        elif token_type in (TokenType.WRITE_INT, TokenType.WRITE_CHAR):
            self._write()
        elif token_type in (TokenType.READ_INT, TokenType.READ_CHAR):
            self._read()

    def _assignment(self) -> None:
        """ident ":=" expression"""
        emitter = self.ctx.emitter

        self._check_symbol(UseContext.LHS)
        emitter.symbol(self._token)
        self._expect(TokenType.IDENTIFIER)

        if self._check(TokenType.ASSIGN):
            emitter.symbol(self._token)
        self._expect(TokenType.ASSIGN)

        self._expression()

    def _call(self) -> None:
        """"call" ident"""
        self._expect(TokenType.CALL)
        if self._check(TokenType.IDENTIFIER):
            self._check_symbol(UseContext.CALL)
            self.ctx.emitter.call(self._token.value)
        self._expect(TokenType.IDENTIFIER)

    def _compound(self) -> None:
        """begin statement { ; statement } end"""
        emitter = self.ctx.emitter

        emitter.symbol(self._token)
        self._expect(TokenType.BEGIN)
        self._statement()

        while self._check(TokenType.SEMICOLON):
            emitter.semicolon()
            self._next()
            self._statement()

        if self._check(TokenType.END):
            emitter.symbol(self._token)
        self._expect(TokenType.END)

    def _conditional(self, keyword: TokenType, separator: TokenType) -> None:
        """
        "if" condition "then" statement
        "while" condition "do" statement
        """
        emitter = self.ctx.emitter

        emitter.symbol(self._token)
        self._expect(keyword)
        self._condition()

        if self._check(separator):
            emitter.symbol(self._token)
        self._expect(separator)

        self._statement()

    def _write(self) -> None:
        """"writeInt" / "writeChar" followed by an identifier or a number."""
        keyword = self._token
        self._next()

        if not self._check(TokenType.IDENTIFIER, TokenType.NUMBER):
            raise self._unexpected(
                "identifier or number",
                message=f"{keyword.value} takes an identifier or a number",
            )

        if self._check(TokenType.IDENTIFIER):
            self._check_symbol(UseContext.RHS)

        if keyword.type == TokenType.WRITE_INT:
            self.ctx.emitter.write_int(self._token.value)
        else:
            self.ctx.emitter.write_char(self._token.value)
        self._next()

    def _read(self) -> None:
        """"readInt" / "readChar" [ "into" ] ident"""
        keyword = self._token
        self._next()

        if self._check(TokenType.INTO):
            self._next()

        if self._check(TokenType.IDENTIFIER):
            self._check_symbol(UseContext.LHS)
            if keyword.type == TokenType.READ_INT:
                self.ctx.emitter.read_int(self._token.value)
            else:
                self.ctx.emitter.read_char(self._token.value)
        self._expect(TokenType.IDENTIFIER)

    # =========================================================================
    # Conditions and Expressions
    # =========================================================================

    def _condition(self) -> None:
        emitter = self.ctx.emitter

        if self._check(TokenType.ODD):
            emitter.symbol(self._token)
            self._next()
            self._expression()
            emitter.odd()
            return

        self._expression()

        if not self._check(*RELATIONAL_OPERATORS):
            raise self._unexpected(
                "'=', '#', '<' or '>'",
                message="invalid conditional",
            )
        emitter.symbol(self._token)
        self._next()

        self._expression()

    def _expression(self) -> None:
        emitter = self.ctx.emitter

        if self._check(TokenType.PLUS, TokenType.MINUS):
            emitter.symbol(self._token)
            self._next()

        self._term()

        while self._check(TokenType.PLUS, TokenType.MINUS):
            emitter.symbol(self._token)
            self._next()
            self._term()

    def _term(self) -> None:
        emitter = self.ctx.emitter

        self._factor()

        while self._check(TokenType.MULTIPLY, TokenType.DIVIDE):
            emitter.symbol(self._token)
            self._next()
            self._factor()

    def _factor(self) -> None:
        emitter = self.ctx.emitter

        if self._check(TokenType.IDENTIFIER):
            self._check_symbol(UseContext.RHS)
            emitter.symbol(self._token)
            self._next()
        elif self._check(TokenType.NUMBER):
            emitter.symbol(self._token)
            self._next()
        elif self._check(TokenType.LPAREN):
            emitter.symbol(self._token)
            self._next()
            self._expression()
            if self._check(TokenType.RPAREN):
                emitter.symbol(self._token)
            self._expect(TokenType.RPAREN)
        else:
            raise self._unexpected("identifier, number or '('")
