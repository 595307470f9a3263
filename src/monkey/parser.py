"""
Pratt (precedence-climbing) parser for the Monkey language.

Converts a token stream into an Abstract Syntax Tree (AST). The parser never
raises on malformed input: each defect is recorded as a diagnostic and the
parser carries on, so a single pass reports as many problems as it can.
"""

from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple
from .tokens import Token, TokenType, SourceSpan
from .ast import (
    Program, Statement, Expression,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    IntegerLiteral, BooleanLiteral, StringLiteral, Identifier,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression,
)
from .errors import (
    Diagnostic,
    DiagnosticCollector,
    error_unexpected_token,
    error_no_prefix_rule,
    error_invalid_integer,
)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class Precedence(IntEnum):
    """Binding power of operators, loosest first."""
    LOWEST = 1
    EQUALS = 2          # ==
    LESSGREATER = 3     # > or <
    SUM = 4             # +
    PRODUCT = 5         # *
    PREFIX = 6          # -x or !x
    CALL = 7            # f(x)


PrefixRule = Callable[[], Optional[Expression]]
InfixRule = Callable[[Expression], Optional[Expression]]


class Parser:
    """
    Pratt parser for Monkey with two tokens of lookahead.

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        if parser.errors:
            ...

    Expressions are parsed from two tables keyed by token type: prefix rules
    start an expression, infix rules extend an already-parsed left operand.
    `_parse_expression(threshold)` keeps folding while the next operator
    binds tighter than the threshold:

        Lowest:  == !=
                 < >
                 + -
                 * /
                 -x !x
        Highest: f(x)

    Cursor convention: expression rules start on the first token of the
    expression and stop on its last token. Statement parsing then steps past
    the statement (and an optional ';'), always advancing at least one token.
    """

    PRECEDENCES = {
        TokenType.EQ: Precedence.EQUALS,
        TokenType.NOT_EQ: Precedence.EQUALS,
        TokenType.LT: Precedence.LESSGREATER,
        TokenType.GT: Precedence.LESSGREATER,
        TokenType.PLUS: Precedence.SUM,
        TokenType.MINUS: Precedence.SUM,
        TokenType.SLASH: Precedence.PRODUCT,
        TokenType.ASTERISK: Precedence.PRODUCT,
        TokenType.LPAREN: Precedence.CALL,
    }

    def __init__(self, tokens: Iterable[Token], source: Optional[str] = None,
                 max_errors: int = 20):
        self._tokens: Iterator[Token] = iter(tokens)
        self.source = source  # Original source code, for diagnostics
        self._lines: Optional[List[str]] = None
        self.diagnostics = DiagnosticCollector(max_errors)

        self.prefix_rules: Dict[TokenType, PrefixRule] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
        }
        self.infix_rules: Dict[TokenType, InfixRule] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.ASTERISK: self._parse_infix_expression,
            TokenType.EQ: self._parse_infix_expression,
            TokenType.NOT_EQ: self._parse_infix_expression,
            TokenType.LT: self._parse_infix_expression,
            TokenType.GT: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
        }

        # Prime current and peek
        self.cur_token = self._pull()
        self.peek_token = self._pull()

    @property
    def errors(self) -> List[str]:
        """Messages for every parse defect found so far."""
        return self.diagnostics.messages

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _pull(self) -> Token:
        """Fetch the next token; an exhausted stream reads as endless EOF."""
        token = next(self._tokens, None)
        if token is None:
            return Token(TokenType.EOF, "")
        if token.type == TokenType.EOF:
            # Keep yielding EOF without touching the source again
            self._tokens = iter(())
        return token

    def _next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self._pull()

    def _cur_is(self, token_type: TokenType) -> bool:
        return self.cur_token.type == token_type

    def _peek_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def _expect_peek(self, token_type: TokenType) -> bool:
        """Advance onto the peek token if it has the given type, else record an error."""
        if self._peek_is(token_type):
            self._next_token()
            return True
        found = self.peek_token.literal or self.peek_token.type.value
        self._error(error_unexpected_token(
            token_type.value, found, self.peek_token.span,
            self._source_line(self.peek_token.span),
        ))
        return False

    def _peek_precedence(self) -> Precedence:
        return self.PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return self.PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    def _source_line(self, span: Optional[SourceSpan]) -> Optional[str]:
        """Get the source line a span starts on, if source text is available."""
        if span is None or self.source is None:
            return None
        if self._lines is None:
            self._lines = self.source.splitlines()
        line_num = span.start.line
        if 1 <= line_num <= len(self._lines):
            return self._lines[line_num - 1]
        return None

    def _error(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.add(diagnostic)

    def _span_from(self, start: Token) -> Optional[SourceSpan]:
        """Span from the start token to the end of the current token."""
        if start.span is None or self.cur_token.span is None:
            return start.span
        return SourceSpan(start.span.start, self.cur_token.span.end)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF (or until the error limit is reached)."""
        start = self.cur_token
        statements: List[Statement] = []

        while not self._cur_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            if self.diagnostics.should_stop:
                break

        return Program(span=self._span_from(start), statements=tuple(statements))

    def _parse_statement(self) -> Optional[Statement]:
        """Parse one statement and step past it, skipping an optional ';'."""
        if self._cur_is(TokenType.LET):
            stmt = self._parse_let_statement()
        elif self._cur_is(TokenType.RETURN):
            stmt = self._parse_return_statement()
        else:
            stmt = self._parse_expression_statement()

        if self._peek_is(TokenType.SEMICOLON):
            self._next_token()
        self._next_token()
        return stmt

    def _parse_let_statement(self) -> Optional[LetStatement]:
        start = self.cur_token  # 'let'

        if not self._expect_peek(TokenType.IDENT):
            return None
        name = Identifier(span=self.cur_token.span, name=self.cur_token.literal)

        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        return LetStatement(span=self._span_from(start), name=name, value=value)

    def _parse_return_statement(self) -> Optional[ReturnStatement]:
        start = self.cur_token  # 'return'
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        return ReturnStatement(span=self._span_from(start), value=value)

    def _parse_expression_statement(self) -> Optional[ExpressionStatement]:
        start = self.cur_token
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        return ExpressionStatement(span=self._span_from(start), expression=expression)

    def _parse_block_statement(self) -> BlockStatement:
        """Parse '{' statements '}', leaving the cursor on the closing brace."""
        start = self.cur_token  # '{'
        self._next_token()

        statements: List[Statement] = []
        while not self._cur_is(TokenType.RBRACE) and not self._cur_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            if self.diagnostics.should_stop:
                break

        return BlockStatement(span=self._span_from(start), statements=tuple(statements))

    # =========================================================================
    # Expression Parsing (Pratt)
    # =========================================================================

    def _parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """Parse an expression whose operators all bind tighter than `precedence`."""
        prefix = self.prefix_rules.get(self.cur_token.type)
        if prefix is None:
            self._error(error_no_prefix_rule(
                self.cur_token.type.value, self.cur_token.span,
                self._source_line(self.cur_token.span),
            ))
            return None
        left = prefix()

        while (left is not None and not self._peek_is(TokenType.SEMICOLON)
               and precedence < self._peek_precedence()):
            infix = self.infix_rules.get(self.peek_token.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(span=self.cur_token.span, name=self.cur_token.literal)

    def _parse_integer_literal(self) -> Optional[Expression]:
        token = self.cur_token
        try:
            value = int(token.literal, 10)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self._error(error_invalid_integer(
                token.literal, token.span, self._source_line(token.span),
            ))
            return None
        return IntegerLiteral(span=token.span, value=value)

    def _parse_string_literal(self) -> Expression:
        return StringLiteral(span=self.cur_token.span, value=self.cur_token.literal)

    def _parse_boolean(self) -> Expression:
        return BooleanLiteral(span=self.cur_token.span,
                              value=self._cur_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Optional[Expression]:
        start = self.cur_token
        self._next_token()
        right = self._parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(span=self._span_from(start),
                                operator=start.literal, right=right)

    def _parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        operator = self.cur_token.literal
        precedence = self._cur_precedence()
        self._next_token()
        right = self._parse_expression(precedence)
        if right is None:
            return None
        span = None
        if left.span is not None and right.span is not None:
            span = SourceSpan(left.span.start, right.span.end)
        return InfixExpression(span=span, left=left, operator=operator, right=right)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        self._next_token()  # consume '('
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_if_expression(self) -> Optional[Expression]:
        start = self.cur_token  # 'if'

        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self._expect_peek(TokenType.RPAREN):
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None
        consequence = self._parse_block_statement()

        alternative = None
        if self._peek_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()

        return IfExpression(
            span=self._span_from(start),
            condition=condition,
            consequence=consequence,
            alternative=alternative,
        )

    def _parse_function_literal(self) -> Optional[Expression]:
        start = self.cur_token  # 'fn'

        if not self._expect_peek(TokenType.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None

        if not self._expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()

        return FunctionLiteral(span=self._span_from(start),
                               parameters=parameters, body=body)

    def _parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        """Parse 'a, b, c)' after the opening parenthesis."""
        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return ()

        if not self._expect_peek(TokenType.IDENT):
            return None
        identifiers = [Identifier(span=self.cur_token.span, name=self.cur_token.literal)]

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(span=self.cur_token.span,
                                          name=self.cur_token.literal))

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return tuple(identifiers)

    def _parse_call_expression(self, function: Expression) -> Optional[Expression]:
        arguments = self._parse_call_arguments()
        if arguments is None:
            return None
        span = None
        if function.span is not None and self.cur_token.span is not None:
            span = SourceSpan(function.span.start, self.cur_token.span.end)
        return CallExpression(span=span, function=function, arguments=arguments)

    def _parse_call_arguments(self) -> Optional[Tuple[Expression, ...]]:
        """Parse 'x, y + 1)' after the opening parenthesis."""
        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return ()

        self._next_token()
        first = self._parse_expression(Precedence.LOWEST)
        if first is None:
            return None
        args = [first]

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            arg = self._parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return tuple(args)


def parse(tokens: Iterable[Token], source: Optional[str] = None,
          max_errors: int = 20) -> Tuple[Program, List[str]]:
    """
    Convenience function to parse tokens into a program.

    Args:
        tokens: Token stream (a Lexer, or any iterable of tokens)
        source: Optional original source code for diagnostics
        max_errors: Stop after this many parse errors

    Returns:
        (program, errors) - the possibly partial tree and the error messages;
        a non-empty error list means the program must not be evaluated
    """
    parser = Parser(tokens, source=source, max_errors=max_errors)
    program = parser.parse_program()
    return program, parser.errors
