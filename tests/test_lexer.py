"""
Unit tests for the Monkey lexer.
"""

import pytest
from monkey import Lexer, tokenize, TokenType, Token, lookup_ident, KEYWORDS


def token_types(source: str):
    """Helper to get token types from source (excluding EOF)."""
    tokens = tokenize(source)
    return [t.type for t in tokens if t.type != TokenType.EOF]


def token_pairs(source: str):
    """Helper to get (type, literal) pairs from source (excluding EOF)."""
    return [(t.type, t.literal) for t in tokenize(source) if t.type != TokenType.EOF]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].literal == ""

    def test_whitespace_only(self):
        """Whitespace-only source produces only EOF."""
        tokens = tokenize("   \t\r\n  \n")
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_let_statement(self):
        """A let statement lexes into its tokens."""
        assert token_pairs("let five = 5;") == [
            (TokenType.LET, "let"),
            (TokenType.IDENT, "five"),
            (TokenType.ASSIGN, "="),
            (TokenType.INT, "5"),
            (TokenType.SEMICOLON, ";"),
        ]

    def test_function_definition(self):
        """Function literal with parameters and a body."""
        assert token_types("let add = fn(x, y) { x + y; };") == [
            TokenType.LET, TokenType.IDENT, TokenType.ASSIGN,
            TokenType.FUNCTION, TokenType.LPAREN, TokenType.IDENT,
            TokenType.COMMA, TokenType.IDENT, TokenType.RPAREN,
            TokenType.LBRACE, TokenType.IDENT, TokenType.PLUS,
            TokenType.IDENT, TokenType.SEMICOLON, TokenType.RBRACE,
            TokenType.SEMICOLON,
        ]

    def test_next_token_repeats_eof(self):
        """Once exhausted the lexer keeps returning EOF."""
        lexer = Lexer("x")
        assert lexer.next_token().type == TokenType.IDENT
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF


class TestOperators:
    """Test operator tokens."""

    def test_single_char_operators(self):
        """Single-character operators."""
        assert token_types("+ - * / < > ! =") == [
            TokenType.PLUS, TokenType.MINUS, TokenType.ASTERISK,
            TokenType.SLASH, TokenType.LT, TokenType.GT,
            TokenType.BANG, TokenType.ASSIGN,
        ]

    def test_two_char_operators(self):
        """== and != are single tokens."""
        assert token_pairs("10 == 10; 10 != 9;") == [
            (TokenType.INT, "10"),
            (TokenType.EQ, "=="),
            (TokenType.INT, "10"),
            (TokenType.SEMICOLON, ";"),
            (TokenType.INT, "10"),
            (TokenType.NOT_EQ, "!="),
            (TokenType.INT, "9"),
            (TokenType.SEMICOLON, ";"),
        ]

    def test_bang_followed_by_bang(self):
        """!! is two BANG tokens."""
        assert token_types("!!true") == [
            TokenType.BANG, TokenType.BANG, TokenType.TRUE,
        ]

    def test_assign_then_equals(self):
        """=== lexes greedily as == followed by =."""
        assert token_types("===") == [TokenType.EQ, TokenType.ASSIGN]


class TestDelimiters:
    """Test delimiter tokens."""

    def test_delimiters(self):
        """Parentheses, braces, comma and semicolon."""
        assert token_types("(){},;") == [
            TokenType.LPAREN, TokenType.RPAREN,
            TokenType.LBRACE, TokenType.RBRACE,
            TokenType.COMMA, TokenType.SEMICOLON,
        ]


class TestKeywords:
    """Test keyword recognition."""

    def test_all_keywords(self):
        """Every keyword maps to its own token type."""
        assert token_types("fn let true false if else return") == [
            TokenType.FUNCTION, TokenType.LET, TokenType.TRUE,
            TokenType.FALSE, TokenType.IF, TokenType.ELSE, TokenType.RETURN,
        ]

    def test_keyword_prefix_is_identifier(self):
        """Identifiers that start with a keyword are still identifiers."""
        assert token_pairs("letter iffy fnord") == [
            (TokenType.IDENT, "letter"),
            (TokenType.IDENT, "iffy"),
            (TokenType.IDENT, "fnord"),
        ]

    def test_lookup_ident(self):
        """lookup_ident falls back to IDENT."""
        assert lookup_ident("fn") == TokenType.FUNCTION
        assert lookup_ident("return") == TokenType.RETURN
        assert lookup_ident("foobar") == TokenType.IDENT
        assert set(KEYWORDS) == {"fn", "let", "true", "false", "if", "else", "return"}

    def test_identifiers_with_underscores_and_digits(self):
        """Identifiers may contain underscores and digits after the first character."""
        assert token_pairs("_tmp foo_bar x1") == [
            (TokenType.IDENT, "_tmp"),
            (TokenType.IDENT, "foo_bar"),
            (TokenType.IDENT, "x1"),
        ]


class TestLiterals:
    """Test integer and string literals."""

    def test_integer(self):
        """Integers keep their source text as the literal."""
        assert token_pairs("0 42 1234567890") == [
            (TokenType.INT, "0"),
            (TokenType.INT, "42"),
            (TokenType.INT, "1234567890"),
        ]

    def test_oversized_integer_still_lexes(self):
        """Range checking is left to the parser."""
        assert token_pairs("99999999999999999999") == [
            (TokenType.INT, "99999999999999999999"),
        ]

    def test_string(self):
        """String literal is the text between the quotes."""
        assert token_pairs('"foo bar"') == [(TokenType.STRING, "foo bar")]

    def test_empty_string(self):
        """Empty string literal."""
        assert token_pairs('""') == [(TokenType.STRING, "")]

    def test_string_escapes(self):
        """Escape sequences are decoded."""
        tokens = tokenize(r'"a\nb\t\"c\"\\"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].literal == 'a\nb\t"c"\\'

    def test_unknown_escape_kept(self):
        """Unknown escapes keep the backslash."""
        tokens = tokenize(r'"a\qb"')
        assert tokens[0].literal == "a\\qb"

    def test_unterminated_string_is_illegal(self):
        """An unterminated string becomes a single ILLEGAL token."""
        assert token_pairs('"abc') == [(TokenType.ILLEGAL, '"abc')]


class TestComments:
    """Test comment handling."""

    def test_comment_skipped(self):
        """Comments run to end of line."""
        assert token_pairs("# a comment\n5 # trailing\n") == [(TokenType.INT, "5")]

    def test_comment_at_end_of_input(self):
        """A comment without a trailing newline."""
        assert token_types("x # done") == [TokenType.IDENT]


class TestIllegalCharacters:
    """Test characters outside the language."""

    def test_illegal_character(self):
        """Unknown characters become ILLEGAL tokens and lexing continues."""
        assert token_pairs("1 @ 2") == [
            (TokenType.INT, "1"),
            (TokenType.ILLEGAL, "@"),
            (TokenType.INT, "2"),
        ]

    @pytest.mark.parametrize("source", ["\u0663", "\u00b2", "\u00e9"])
    def test_non_ascii_is_illegal(self, source):
        """Digits and letters outside ASCII are not numbers or names."""
        assert token_pairs(source) == [(TokenType.ILLEGAL, source)]

    def test_non_ascii_ends_identifier(self):
        """An identifier stops at the first non-ASCII character."""
        assert token_pairs("x٣") == [
            (TokenType.IDENT, "x"),
            (TokenType.ILLEGAL, "٣"),
        ]

    def test_non_ascii_ends_integer(self):
        """An integer stops at the first non-ASCII digit."""
        assert token_pairs("12٣") == [
            (TokenType.INT, "12"),
            (TokenType.ILLEGAL, "٣"),
        ]


class TestSourceLocations:
    """Test token spans."""

    def test_line_and_column(self):
        """Spans are 1-indexed and track newlines."""
        tokens = tokenize("let x\n  = 1;")
        assign = tokens[2]
        assert assign.type == TokenType.ASSIGN
        assert assign.span.start.line == 2
        assert assign.span.start.column == 3
        assert assign.span.start.offset == 8

    def test_span_end(self):
        """Span end is just past the token."""
        tokens = tokenize("foobar")
        assert tokens[0].span.start.column == 1
        assert tokens[0].span.end.column == 7

    def test_filename(self):
        """Filename is carried into locations."""
        tokens = tokenize("x", filename="prog.mk")
        assert str(tokens[0].span.start) == "prog.mk:1:1"


class TestLexerIterator:
    """Test the iterator protocol."""

    def test_iteration_includes_eof(self):
        """Iterating a Lexer yields every token up to and including EOF."""
        tokens = list(Lexer("a + b"))
        assert [t.type for t in tokens] == [
            TokenType.IDENT, TokenType.PLUS, TokenType.IDENT, TokenType.EOF,
        ]

    def test_token_str(self):
        """Token __str__ is a compact debug form."""
        assert str(Token(TokenType.IDENT, "x")) == "IDENT('x')"
        assert str(Token(TokenType.PLUS, "+")) == "PLUS"
