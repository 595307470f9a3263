"""
Token types for the Monkey lexer.

Token type values double as their display text: operator and delimiter kinds
are spelled the way they appear in source, so parser messages such as
"expected next token to be =" read naturally.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Special ---
    ILLEGAL = "ILLEGAL"         # unknown character, unterminated string
    EOF = "EOF"                 # end of input

    # --- Identifiers and literals ---
    IDENT = "IDENT"             # add, foobar, x, y
    INT = "INT"                 # 1343456
    STRING = "STRING"           # "hello"

    # --- Operators ---
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # --- Delimiters ---
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # --- Keywords ---
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceLocation:
    """A point in the source: 1-based line and column, 0-based offset."""
    line: int
    column: int
    offset: int
    filename: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"{self.filename}:" if self.filename else ""
        return f"{prefix}{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Half-open range [start, end) of source text."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    type: TokenType
    literal: str
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.type in (TokenType.INT, TokenType.STRING, TokenType.IDENT,
                         TokenType.ILLEGAL):
            return f"{self.type.name}({self.literal!r})"
        return self.type.name


KEYWORDS: Dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}


def lookup_ident(ident: str) -> TokenType:
    """Return the keyword token type for `ident`, or IDENT."""
    return KEYWORDS.get(ident, TokenType.IDENT)
