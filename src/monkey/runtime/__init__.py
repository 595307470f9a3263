"""
Monkey runtime - tree-walking evaluation of parsed programs.

This module provides:
- Evaluator: Walks the AST and produces runtime values
- Value: Runtime values (integers, booleans, strings, functions, ...)
- Environment: Lexically chained name bindings
- BuiltinRegistry: Host-provided functions (len, puts)
"""

from .values import (
    Value,
    Integer,
    Boolean,
    Null,
    String,
    Function,
    Builtin,
    Signal,
    ReturnValue,
    Error,
    TRUE,
    FALSE,
    NULL,
    native_bool,
    is_truthy,
    is_signal,
    is_error,
    new_error,
)

from .environment import (
    Environment,
    enclosed,
)

from .builtins import (
    BuiltinRegistry,
    get_builtin_registry,
)

from .evaluator import (
    Evaluator,
    ExecutionResult,
    evaluate,
    recursion_limit,
    run,
)

__all__ = [
    # Values
    "Value",
    "Integer",
    "Boolean",
    "Null",
    "String",
    "Function",
    "Builtin",
    "Signal",
    "ReturnValue",
    "Error",
    "TRUE",
    "FALSE",
    "NULL",
    "native_bool",
    "is_truthy",
    "is_signal",
    "is_error",
    "new_error",
    # Environment
    "Environment",
    "enclosed",
    # Builtins
    "BuiltinRegistry",
    "get_builtin_registry",
    # Evaluator
    "Evaluator",
    "ExecutionResult",
    "evaluate",
    "recursion_limit",
    "run",
]
