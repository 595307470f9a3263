"""
Tree-walking evaluator for Monkey programs.

Evaluates AST nodes against an Environment to produce runtime Values.
Runtime errors are Error values, not exceptions: every composite step checks
its sub-results for a Signal (Error or pending ReturnValue) and hands it
straight back before doing anything else.
"""

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .values import (
    Value, Integer, String, Function, Builtin, ReturnValue, Error,
    TRUE, FALSE, NULL, native_bool, is_truthy, is_signal,
    wrap_int64, trunc_div,
)
from .environment import Environment, enclosed
from .builtins import BuiltinRegistry, get_builtin_registry

from ..ast import (
    AstNode, Program, Statement, Expression,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    IntegerLiteral, BooleanLiteral, StringLiteral, Identifier,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression,
)
from ..errors import Diagnostic

# Python frames allowed while a program runs; one Monkey call costs about nine
RECURSION_LIMIT = 10000


@contextmanager
def recursion_limit(limit: int = RECURSION_LIMIT):
    """
    Raise the interpreter recursion limit to at least `limit` for the duration
    of the block, restoring the previous limit afterwards.

        with recursion_limit():
            evaluator.evaluate(program, env)
    """
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class Evaluator:
    """
    Tree-walking evaluator.

    Evaluates AST nodes by dispatching on node type. Recursion depth follows
    the nesting depth of the program being run, so deeply recursive Monkey
    functions can exhaust the host stack (see run()).
    """

    def __init__(self, builtins: Optional[BuiltinRegistry] = None):
        self.builtins = builtins if builtins is not None else get_builtin_registry()

    def evaluate(self, node: AstNode, env: Environment) -> Value:
        """Evaluate any node to a Value."""
        if isinstance(node, Program):
            return self._eval_program(node, env)
        elif isinstance(node, Statement):
            return self._execute_statement(node, env)
        elif isinstance(node, Expression):
            return self._evaluate(node, env)
        else:
            raise RuntimeError(f"Unknown node type: {type(node).__name__}")

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_program(self, program: Program, env: Environment) -> Value:
        """Run top-level statements; a `return` ends the program with its bare value."""
        result: Value = NULL
        for stmt in program.statements:
            result = self._execute_statement(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def _execute_statement(self, stmt: Statement, env: Environment) -> Value:
        if isinstance(stmt, ExpressionStatement):
            return self._evaluate(stmt.expression, env)
        elif isinstance(stmt, LetStatement):
            return self._execute_let(stmt, env)
        elif isinstance(stmt, ReturnStatement):
            return self._execute_return(stmt, env)
        elif isinstance(stmt, BlockStatement):
            return self._execute_block(stmt, env)
        else:
            raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_let(self, stmt: LetStatement, env: Environment) -> Value:
        value = self._evaluate(stmt.value, env)
        if is_signal(value):
            return value
        env.set(stmt.name.name, value)
        return NULL

    def _execute_return(self, stmt: ReturnStatement, env: Environment) -> Value:
        value = self._evaluate(stmt.value, env)
        if is_signal(value):
            return value
        return ReturnValue(value)

    def _execute_block(self, block: BlockStatement, env: Environment) -> Value:
        """
        Run a block in the current environment. A Signal stops the block and
        is passed up as-is, so a ReturnValue stays wrapped until the call
        boundary.
        """
        result: Value = NULL
        for stmt in block.statements:
            result = self._execute_statement(stmt, env)
            if is_signal(result):
                return result
        return result

    # =========================================================================
    # Expressions
    # =========================================================================

    def _evaluate(self, expr: Expression, env: Environment) -> Value:
        """Evaluate an expression to produce a Value."""
        if isinstance(expr, IntegerLiteral):
            return Integer(expr.value)
        elif isinstance(expr, BooleanLiteral):
            return native_bool(expr.value)
        elif isinstance(expr, StringLiteral):
            return String(expr.value)
        elif isinstance(expr, Identifier):
            return self._eval_identifier(expr, env)
        elif isinstance(expr, PrefixExpression):
            return self._eval_prefix(expr, env)
        elif isinstance(expr, InfixExpression):
            return self._eval_infix(expr, env)
        elif isinstance(expr, IfExpression):
            return self._eval_if(expr, env)
        elif isinstance(expr, FunctionLiteral):
            return Function(parameters=expr.parameters, body=expr.body, env=env)
        elif isinstance(expr, CallExpression):
            return self._eval_call(expr, env)
        else:
            raise RuntimeError(f"Unknown expression type: {type(expr).__name__}")

    def _eval_identifier(self, ident: Identifier, env: Environment) -> Value:
        """Environment chain first, then builtins."""
        value = env.get(ident.name)
        if value is not None:
            return value
        builtin = self.builtins.get(ident.name)
        if builtin is not None:
            return builtin
        return Error(f"identifier not found: {ident.name}")

    def _eval_prefix(self, expr: PrefixExpression, env: Environment) -> Value:
        right = self._evaluate(expr.right, env)
        if is_signal(right):
            return right

        if expr.operator == "!":
            return FALSE if is_truthy(right) else TRUE
        elif expr.operator == "-":
            if not isinstance(right, Integer):
                return Error(f"unknown operator: -{right.type_name}")
            return Integer(wrap_int64(-right.value))
        else:
            return Error(f"unknown operator: {expr.operator}{right.type_name}")

    def _eval_infix(self, expr: InfixExpression, env: Environment) -> Value:
        """Evaluate left, then right, then apply the operator."""
        left = self._evaluate(expr.left, env)
        if is_signal(left):
            return left
        right = self._evaluate(expr.right, env)
        if is_signal(right):
            return right
        return self.apply_infix(expr.operator, left, right)

    def apply_infix(self, operator: str, left: Value, right: Value) -> Value:
        """Apply a binary operator to two evaluated operands."""
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._integer_infix(operator, left, right)
        if isinstance(left, String) and isinstance(right, String):
            return self._string_infix(operator, left, right)
        if operator == "==":
            return native_bool(left is right)
        if operator == "!=":
            return native_bool(left is not right)
        if left.type_name != right.type_name:
            return Error(f"type mismatch: {left.type_name} {operator} {right.type_name}")
        return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")

    def _integer_infix(self, operator: str, left: Integer, right: Integer) -> Value:
        a, b = left.value, right.value
        if operator == "+":
            return Integer(wrap_int64(a + b))
        elif operator == "-":
            return Integer(wrap_int64(a - b))
        elif operator == "*":
            return Integer(wrap_int64(a * b))
        elif operator == "/":
            try:
                return Integer(wrap_int64(trunc_div(a, b)))
            except ZeroDivisionError:
                return Error(f"division by zero: {left.inspect()} / {right.inspect()}")
        elif operator == "<":
            return native_bool(a < b)
        elif operator == ">":
            return native_bool(a > b)
        elif operator == "==":
            return native_bool(a == b)
        elif operator == "!=":
            return native_bool(a != b)
        return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")

    def _string_infix(self, operator: str, left: String, right: String) -> Value:
        if operator == "+":
            return String(left.value + right.value)
        elif operator == "==":
            return native_bool(left.value == right.value)
        elif operator == "!=":
            return native_bool(left.value != right.value)
        return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")

    def _eval_if(self, expr: IfExpression, env: Environment) -> Value:
        condition = self._evaluate(expr.condition, env)
        if is_signal(condition):
            return condition

        if is_truthy(condition):
            return self._execute_block(expr.consequence, env)
        elif expr.alternative is not None:
            return self._execute_block(expr.alternative, env)
        else:
            return NULL

    def _eval_call(self, call: CallExpression, env: Environment) -> Value:
        function = self._evaluate(call.function, env)
        if is_signal(function):
            return function

        args: List[Value] = []
        for arg_expr in call.arguments:
            arg = self._evaluate(arg_expr, env)
            if is_signal(arg):
                return arg
            args.append(arg)

        return self.apply_function(function, args)

    def apply_function(self, function: Value, args: Sequence[Value]) -> Value:
        """Call a Function or Builtin with already-evaluated arguments."""
        if isinstance(function, Function):
            call_env = enclosed(function.env)
            # Surplus parameters are left unbound; surplus arguments are ignored
            for param, arg in zip(function.parameters, args):
                call_env.set(param.name, arg)
            result = self._execute_block(function.body, call_env)
            if isinstance(result, ReturnValue):
                return result.value
            return result
        elif isinstance(function, Builtin):
            return function.fn(list(args))
        return Error(f"not a function: {function.type_name}")


def evaluate(node: AstNode, env: Optional[Environment] = None) -> Value:
    """
    Evaluate a node with the default builtins.

    This is a convenience wrapper around Evaluator.evaluate(); a fresh global
    environment is used when none is given.
    """
    return Evaluator().evaluate(node, env if env is not None else Environment())


@dataclass
class ExecutionResult:
    """Result of running a piece of source code."""
    value: Optional[Value] = None
    parse_errors: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        """True when the source parsed and evaluated to a non-Error value."""
        return (not self.parse_errors and self.error_message is None
                and not isinstance(self.value, Error))

    @property
    def output(self) -> Optional[str]:
        """The rendered result value, if there is one."""
        if self.value is None:
            return None
        return self.value.inspect()


def run(
    source: str,
    env: Optional[Environment] = None,
    evaluator: Optional[Evaluator] = None,
    filename: Optional[str] = None,
    max_errors: int = 20,
) -> ExecutionResult:
    """
    High-level API to lex, parse and evaluate source code in one call.

        from monkey import run

        result = run('''
            let add = fn(a, b) { a + b };
            add(1, 2);
        ''')

        if result.success:
            print(result.output)
        else:
            print(result.parse_errors or result.output or result.error_message)

    Args:
        source: Monkey source code
        env: Environment to evaluate in (a fresh one if omitted); bindings
             made by the program persist in it
        evaluator: Evaluator to use (one with the default builtins if omitted)
        filename: Optional filename for diagnostics
        max_errors: Stop parsing after this many errors

    Returns:
        ExecutionResult; parse errors mean nothing was evaluated
    """
    from ..lexer import Lexer
    from ..parser import Parser

    parser = Parser(Lexer(source, filename), source=source, max_errors=max_errors)
    program = parser.parse_program()
    if parser.errors:
        return ExecutionResult(
            parse_errors=parser.errors,
            diagnostics=list(parser.diagnostics.diagnostics),
        )

    if env is None:
        env = Environment()
    if evaluator is None:
        evaluator = Evaluator()

    try:
        with recursion_limit():
            value = evaluator.evaluate(program, env)
    except RecursionError:
        return ExecutionResult(
            error_message="maximum recursion depth exceeded while evaluating",
        )
    return ExecutionResult(value=value)
