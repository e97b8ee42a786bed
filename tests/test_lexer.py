# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the PL/0 lexer.
#
# Test coverage includes:
#   - Keywords (case-sensitive), identifiers, punctuation
#   - Numeric literals with '_' separators and range checking
#   - Whitespace, { } comments and line counting
#   - Error conditions: unknown characters, bad ':', unterminated comments
# =============================================================================

import pytest
from pl0c.lexer import (
    Lexer,
    TokenType,
    Token,
    KEYWORDS,
    MAX_NUMBER,
    parse_number,
)
from pl0c.errors import (
    PL0SyntaxError,
    InvalidNumberError,
    UnknownTokenError,
    UnterminatedCommentError,
)


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str) -> list:
    """Tokenize source, dropping the trailing EOF token."""
    lexer = Lexer(source, "<test>")
    return [t for t in lexer.tokenize() if t.type != TokenType.EOF]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = list(Lexer("").tokenize())
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].value is None

    def test_whitespace_only(self):
        tokens = tokenize("  \t\n\n  ")
        assert tokens == []

    def test_identifier(self):
        tokens = tokenize("counter")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "counter"

    def test_identifier_forms(self):
        """Identifiers may start with '_' and contain digits after the start."""
        for text in ["_x", "x1", "loop_2", "__", "A_b_C"]:
            tokens = tokenize(text)
            assert tokens[0].type == TokenType.IDENTIFIER
            assert tokens[0].value == text

    def test_all_keywords(self):
        for text, expected_type in KEYWORDS.items():
            tokens = tokenize(text)
            assert len(tokens) == 1
            assert tokens[0].type == expected_type
            assert tokens[0].value == text

    def test_keywords_are_case_sensitive(self):
        """'BEGIN' and 'writeint' are ordinary identifiers."""
        for text in ["BEGIN", "Var", "writeint", "READINT"]:
            tokens = tokenize(text)
            assert tokens[0].type == TokenType.IDENTIFIER

    def test_keyword_prefix_is_identifier(self):
        """A keyword followed by more identifier characters is an identifier."""
        tokens = tokenize("ending")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "ending"

    def test_punctuation(self):
        tokens = tokenize(". = , ; := # < > + - * / ( )")
        assert [t.type for t in tokens] == [
            TokenType.DOT,
            TokenType.EQUAL,
            TokenType.COMMA,
            TokenType.SEMICOLON,
            TokenType.ASSIGN,
            TokenType.NOT_EQUAL,
            TokenType.LESS_THAN,
            TokenType.GREATER_THAN,
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.MULTIPLY,
            TokenType.DIVIDE,
            TokenType.LPAREN,
            TokenType.RPAREN,
        ]

    def test_no_whitespace_needed(self):
        tokens = tokenize("x:=y+1;")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.IDENTIFIER,
            TokenType.PLUS,
            TokenType.NUMBER,
            TokenType.SEMICOLON,
        ]

    def test_eof_repeats(self):
        """Asking past the end keeps returning EOF."""
        lexer = Lexer("x")
        assert lexer.next_token().type == TokenType.IDENTIFIER
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Numeric literal scanning and validation."""

    def test_decimal(self):
        tokens = tokenize("123")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "123"
        assert tokens[0].number == 123

    def test_underscore_separators_stripped(self):
        tokens = tokenize("1_000")
        assert tokens[0].value == "1000"
        assert tokens[0].number == 1000

    def test_trailing_underscore(self):
        tokens = tokenize("12_")
        assert tokens[0].number == 12

    def test_leading_zeros_dropped(self):
        """Leading zeros would make an octal literal in C."""
        tokens = tokenize("007")
        assert tokens[0].value == "7"

    def test_maximum_value(self):
        tokens = tokenize(str(MAX_NUMBER))
        assert tokens[0].number == MAX_NUMBER

    def test_too_large(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            tokenize("99999999999999999999")
        assert "invalid number: 99999999999999999999" in str(exc_info.value)

    def test_one_past_maximum(self):
        with pytest.raises(InvalidNumberError):
            tokenize(str(MAX_NUMBER + 1))

    def test_number_followed_by_identifier(self):
        """Digits stop at the first letter."""
        tokens = tokenize("12ab")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[1].type == TokenType.IDENTIFIER
        assert tokens[1].value == "ab"


class TestParseNumber:
    """Tests for parse_number()."""

    def test_plain(self):
        assert parse_number("123") == 123

    def test_separators(self):
        assert parse_number("1_000") == 1000
        assert parse_number("1_0_0") == 100

    def test_zero(self):
        assert parse_number("0") == 0

    def test_bare_underscore(self):
        """No digits to parse."""
        with pytest.raises(InvalidNumberError):
            parse_number("_")

    def test_empty(self):
        with pytest.raises(InvalidNumberError):
            parse_number("")

    def test_too_large(self):
        with pytest.raises(InvalidNumberError):
            parse_number("99999999999999999999")


# =============================================================================
# Comment and Line Tracking Tests
# =============================================================================

class TestComments:
    """{ } comments and line counting."""

    def test_comment_skipped(self):
        tokens = tokenize("{ a comment } x")
        assert len(tokens) == 1
        assert tokens[0].value == "x"

    def test_comment_without_space(self):
        tokens = tokenize("x{c}y")
        assert [t.value for t in tokens] == ["x", "y"]

    def test_multi_line_comment_counts_lines(self):
        tokens = tokenize("{ line 1\nline 2\n} x")
        assert tokens[0].line == 3

    def test_newlines_counted(self):
        tokens = tokenize("a\nb\n\nc")
        assert [t.line for t in tokens] == [1, 2, 4]

    def test_columns(self):
        tokens = tokenize("var x;")
        assert [t.column for t in tokens] == [1, 5, 6]

    def test_unterminated_comment(self):
        with pytest.raises(UnterminatedCommentError) as exc_info:
            tokenize("x { never closed\n")
        assert "unterminated comment" in str(exc_info.value)

    def test_unterminated_comment_reports_last_line(self):
        with pytest.raises(UnterminatedCommentError) as exc_info:
            tokenize("{\n\n")
        assert exc_info.value.line == 3

    def test_comment_does_not_nest(self):
        """The first '}' closes the comment."""
        with pytest.raises(UnknownTokenError):
            tokenize("{ outer { inner } still }")


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Lexical error conditions."""

    def test_unknown_character(self):
        with pytest.raises(UnknownTokenError) as exc_info:
            tokenize("x ! y")
        assert "unknown token: '!'" in str(exc_info.value)

    def test_colon_without_equals(self):
        with pytest.raises(UnknownTokenError) as exc_info:
            tokenize("x :- 1")
        assert "unknown token: ':-'" in str(exc_info.value)

    def test_colon_at_end(self):
        with pytest.raises(UnknownTokenError):
            tokenize("x :")

    def test_carriage_return_is_not_whitespace(self):
        with pytest.raises(UnknownTokenError):
            tokenize("x\r\ny")

    def test_error_is_syntax_error(self):
        with pytest.raises(PL0SyntaxError):
            tokenize("@")

    def test_error_line_number(self):
        with pytest.raises(UnknownTokenError) as exc_info:
            tokenize("x\ny\n  ?")
        assert exc_info.value.line == 3
        assert str(exc_info.value).startswith("error: 3: unknown token: '?'")

    def test_error_shows_source_line(self):
        with pytest.raises(UnknownTokenError) as exc_info:
            tokenize("begin x := 1 $ end")
        message = str(exc_info.value)
        assert "    begin x := 1 $ end" in message
        assert "\n" + " " * 17 + "^" in message


# =============================================================================
# Token Tests
# =============================================================================

class TestToken:
    """Token helpers."""

    def test_repr(self):
        token = Token(TokenType.IDENTIFIER, "x", 1, 5)
        assert repr(token) == "Token(IDENTIFIER, 'x', 1:5)"

    def test_repr_eof(self):
        token = Token(TokenType.EOF, None, 2, 1)
        assert repr(token) == "Token(EOF, 2:1)"

    def test_location(self):
        token = Token(TokenType.NUMBER, "1", 3, 7, "prog.pl0")
        assert str(token.location) == "prog.pl0:3:7"

    def test_describe(self):
        assert Token(TokenType.IDENTIFIER, "x", 1, 1).describe() == "identifier 'x'"
        assert Token(TokenType.BEGIN, "begin", 1, 1).describe() == "'begin'"
        assert Token(TokenType.ASSIGN, ":=", 1, 1).describe() == "':='"
        assert Token(TokenType.EOF, None, 1, 1).describe() == "end of input"
