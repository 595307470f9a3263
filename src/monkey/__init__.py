"""
Monkey - a small interpreted language with first-class functions.

This package provides:
- Lexer: Tokenizes Monkey source code
- Parser: Builds an AST from tokens (Pratt parser)
- Evaluator: Tree-walking evaluation with closures and error values
- REPL: Line-at-a-time interactive session

Usage:
    from monkey import tokenize, parse, run

    program, errors = parse(tokenize('let x = 1 + 2 * 3;'))
    print(program)          # let x = (1 + (2 * 3));

    # Or lex, parse and evaluate in one step
    result = run('''
    let adder = fn(x) { fn(y) { x + y } };
    let add_two = adder(2);
    add_two(40);
    ''')
    if result.success:
        print(result.output)    # 42
    else:
        for msg in result.parse_errors:
            print(msg)
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    lookup_ident,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    Precedence,
    parse,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    Expression,
    Statement,
    # Expressions
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    Identifier,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    # Statements
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
    # Printing
    SourcePrinter,
    PrintVisitor,
    print_ast,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
)

from .runtime import (
    Evaluator,
    Environment,
    ExecutionResult,
    Value,
    evaluate,
    run,
)

from .config import ReplConfig

__version__ = "0.1.0"

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    "SourceSpan",
    "KEYWORDS",
    "lookup_ident",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "Precedence",
    "parse",
    # AST
    "AstNode",
    "AstVisitor",
    "Expression",
    "Statement",
    "IntegerLiteral",
    "BooleanLiteral",
    "StringLiteral",
    "Identifier",
    "PrefixExpression",
    "InfixExpression",
    "IfExpression",
    "FunctionLiteral",
    "CallExpression",
    "LetStatement",
    "ReturnStatement",
    "ExpressionStatement",
    "BlockStatement",
    "Program",
    "SourcePrinter",
    "PrintVisitor",
    "print_ast",
    # Errors
    "ErrorSeverity",
    "Diagnostic",
    "DiagnosticCollector",
    # Runtime
    "Evaluator",
    "Environment",
    "ExecutionResult",
    "Value",
    "evaluate",
    "run",
    # Config
    "ReplConfig",
]
