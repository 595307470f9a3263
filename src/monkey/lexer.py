"""
Lexer for the Monkey language.

Turns source text into tokens, each carrying the span it came from. The lexer
never raises: a character outside the language, or a string that never
closes, comes out as an ILLEGAL token and the parser reports it.

Comments start with '#' and run to the end of the line.
"""

import string
from typing import Callable, Iterator, List, Optional
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, lookup_ident,
)

_END = ""
_DIGITS = string.digits
_IDENT_START = string.ascii_letters + "_"
_IDENT_CHARS = _IDENT_START + string.digits


class Lexer:
    """
    Tokenizer for Monkey source code.

        lexer = Lexer('let x = "hi";')
        lexer.next_token()   # LET
        list(lexer)          # IDENT, ASSIGN, STRING, SEMICOLON, EOF

    Iterating stops after yielding EOF; calling next_token() past the end
    keeps producing EOF.
    """

    ESCAPES = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '"': '"',
        '\\': '\\',
    }

    # Longest match first: these are tried before OPERATORS
    DOUBLE_OPERATORS = {
        '==': TokenType.EQ,
        '!=': TokenType.NOT_EQ,
    }

    OPERATORS = {
        '=': TokenType.ASSIGN,
        '!': TokenType.BANG,
        '+': TokenType.PLUS,
        '-': TokenType.MINUS,
        '*': TokenType.ASTERISK,
        '/': TokenType.SLASH,
        '<': TokenType.LT,
        '>': TokenType.GT,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        '{': TokenType.LBRACE,
        '}': TokenType.RBRACE,
    }

    def __init__(self, source: str, filename: Optional[str] = None):
        self.text = source
        self.filename = filename
        self._index = 0
        self._line = 1
        self._col = 1

    # --- cursor ---

    def _char(self, ahead: int = 0) -> str:
        """The character `ahead` places from the cursor, or '' past the end."""
        i = self._index + ahead
        return self.text[i] if i < len(self.text) else _END

    def _bump(self) -> str:
        ch = self._char()
        if ch == _END:
            return ch
        self._index += 1
        if ch == '\n':
            self._line, self._col = self._line + 1, 1
        else:
            self._col += 1
        return ch

    def _take_while(self, accept: Callable[[str], bool]) -> None:
        while self._char() != _END and accept(self._char()):
            self._bump()

    def _here(self) -> SourceLocation:
        return SourceLocation(self._line, self._col, self._index, self.filename)

    def _emit(self, token_type: TokenType, start: SourceLocation,
              literal: Optional[str] = None) -> Token:
        """Build a token spanning `start` to the cursor; literal defaults to that text."""
        if literal is None:
            literal = self.text[start.offset:self._index]
        return Token(token_type, literal, SourceSpan(start, self._here()))

    # --- scanners ---

    def _skip_trivia(self) -> None:
        while True:
            ch = self._char()
            if ch and ch.isspace():
                self._bump()
            elif ch == '#':
                self._take_while(lambda c: c != '\n')
            else:
                return

    def _string(self, start: SourceLocation) -> Token:
        self._bump()  # opening quote
        out: List[str] = []
        while True:
            ch = self._bump()
            if ch == _END:
                return self._emit(TokenType.ILLEGAL, start)
            if ch == '"':
                return self._emit(TokenType.STRING, start, ''.join(out))
            if ch == '\\' and self._char() in self.ESCAPES:
                out.append(self.ESCAPES[self._bump()])
            else:
                out.append(ch)

    def _word(self, start: SourceLocation) -> Token:
        self._take_while(lambda c: c in _IDENT_CHARS)
        word = self.text[start.offset:self._index]
        return self._emit(lookup_ident(word), start, word)

    def _operator(self, start: SourceLocation) -> Token:
        pair = self._char() + self._char(1)
        if pair in self.DOUBLE_OPERATORS:
            self._bump()
            self._bump()
            return self._emit(self.DOUBLE_OPERATORS[pair], start)
        ch = self._bump()
        return self._emit(self.OPERATORS.get(ch, TokenType.ILLEGAL), start)

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self._skip_trivia()
        start = self._here()
        ch = self._char()

        if ch == _END:
            return self._emit(TokenType.EOF, start, "")
        if ch == '"':
            return self._string(start)
        if ch in _DIGITS:
            self._take_while(lambda c: c in _DIGITS)
            return self._emit(TokenType.INT, start)
        if ch in _IDENT_START:
            return self._word(start)
        return self._operator(start)

    def tokenize(self) -> List[Token]:
        """All remaining tokens, EOF included."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        token = self.next_token()
        while token.type != TokenType.EOF:
            yield token
            token = self.next_token()
        yield token


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Tokenize a complete source text.

    Args:
        source: Monkey source code
        filename: Optional filename recorded in every token's span

    Returns:
        The tokens in order, ending with EOF
    """
    return Lexer(source, filename).tokenize()
