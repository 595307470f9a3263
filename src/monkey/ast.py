"""
Abstract Syntax Tree (AST) node definitions for the Monkey language.

The AST represents the structure of a parsed program, which is then walked by
the evaluator. Nodes are frozen: once the parser has built a tree nothing
rewrites it, and a function literal's body is shared by every Function value
created from it.

`str(node)` renders a node back to source text that parses to the same tree.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple, Any
from abc import ABC
from .tokens import SourceSpan


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: Optional[SourceSpan] = field(compare=False, repr=False)

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)

    def __str__(self) -> str:
        return self.accept(SourcePrinter())


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


@dataclass(frozen=True)
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass(frozen=True)
class Statement(AstNode):
    """Base class for all statements."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str


@dataclass(frozen=True)
class Identifier(Expression):
    """A variable or function name reference."""
    name: str


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """A unary operation (e.g., !ok, -n)."""
    operator: str
    right: Expression


@dataclass(frozen=True)
class InfixExpression(Expression):
    """A binary operation (e.g., a + b, x == y)."""
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True)
class IfExpression(Expression):
    """An if/else expression; the missing alternative evaluates to null."""
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """A function literal.

    The environment it closes over is not part of the tree; it is captured
    when the literal is evaluated and stored on the resulting Function value.
    """
    parameters: Tuple[Identifier, ...]
    body: "BlockStatement"


@dataclass(frozen=True)
class CallExpression(Expression):
    """A call (e.g., add(1, 2) or fn(x) { x }(5))."""
    function: Expression
    arguments: Tuple[Expression, ...]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class LetStatement(Statement):
    """A binding (e.g., let x = 5;)."""
    name: Identifier
    value: Expression


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """A statement consisting of a single expression."""
    expression: Expression


@dataclass(frozen=True)
class BlockStatement(Statement):
    """A braced sequence of statements (function bodies, if/else arms)."""
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class Program(AstNode):
    """The root of every parse: the top-level statements in order."""
    statements: Tuple[Statement, ...]


# =============================================================================
# Visitor Helpers
# =============================================================================

def _quote(text: str) -> str:
    escaped = (text.replace('\\', '\\\\').replace('"', '\\"')
               .replace('\n', '\\n').replace('\t', '\\t').replace('\r', '\\r'))
    return f'"{escaped}"'


class SourcePrinter(AstVisitor):
    """Renders nodes back to Monkey source.

    Prefix and infix expressions are fully parenthesized so precedence is
    explicit, and every statement is terminated with ';'.
    """

    def _statement(self, stmt: Statement) -> str:
        text = stmt.accept(self)
        if isinstance(stmt, ExpressionStatement):
            return text + ";"
        return text

    def visit_Program(self, node: Program) -> str:
        return " ".join(self._statement(s) for s in node.statements)

    def visit_LetStatement(self, node: LetStatement) -> str:
        return f"let {node.name.accept(self)} = {node.value.accept(self)};"

    def visit_ReturnStatement(self, node: ReturnStatement) -> str:
        return f"return {node.value.accept(self)};"

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> str:
        return node.expression.accept(self)

    def visit_BlockStatement(self, node: BlockStatement) -> str:
        if not node.statements:
            return "{ }"
        body = " ".join(self._statement(s) for s in node.statements)
        return f"{{ {body} }}"

    def visit_IntegerLiteral(self, node: IntegerLiteral) -> str:
        return str(node.value)

    def visit_BooleanLiteral(self, node: BooleanLiteral) -> str:
        return "true" if node.value else "false"

    def visit_StringLiteral(self, node: StringLiteral) -> str:
        return _quote(node.value)

    def visit_Identifier(self, node: Identifier) -> str:
        return node.name

    def visit_PrefixExpression(self, node: PrefixExpression) -> str:
        return f"({node.operator}{node.right.accept(self)})"

    def visit_InfixExpression(self, node: InfixExpression) -> str:
        return f"({node.left.accept(self)} {node.operator} {node.right.accept(self)})"

    def visit_IfExpression(self, node: IfExpression) -> str:
        text = f"if ({node.condition.accept(self)}) {node.consequence.accept(self)}"
        if node.alternative is not None:
            text += f" else {node.alternative.accept(self)}"
        return text

    def visit_FunctionLiteral(self, node: FunctionLiteral) -> str:
        params = ", ".join(p.accept(self) for p in node.parameters)
        return f"fn({params}) {node.body.accept(self)}"

    def visit_CallExpression(self, node: CallExpression) -> str:
        args = ", ".join(a.accept(self) for a in node.arguments)
        return f"{node.function.accept(self)}({args})"


class PrintVisitor(AstVisitor):
    """Writes an indented outline of a tree, one field per line."""

    def __init__(self, indent: int = 0, out=None):
        self.indent = indent
        self.out = out

    def _line(self, depth: int, text: str) -> None:
        print("  " * (self.indent + depth) + text, file=self.out)

    def _field(self, depth: int, name: str, value: Any) -> None:
        if isinstance(value, AstNode):
            self._line(depth, f"{name}:")
            self._node(depth + 1, value)
        elif isinstance(value, tuple):
            self._line(depth, f"{name}: ({len(value)})")
            for item in value:
                self._node(depth + 1, item)
        else:
            self._line(depth, f"{name}: {value!r}")

    def _node(self, depth: int, node: AstNode) -> None:
        self._line(depth, type(node).__name__)
        for f in fields(node):
            if f.name != "span":
                self._field(depth + 1, f.name, getattr(node, f.name))

    def generic_visit(self, node: AstNode) -> None:
        self._node(0, node)


def print_ast(node: AstNode, out=None) -> None:
    """Dump `node` and everything under it to `out` (stdout by default)."""
    node.accept(PrintVisitor(out=out))
