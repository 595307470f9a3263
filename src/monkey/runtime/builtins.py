"""
Built-in function registry for the Monkey evaluator.

Builtins are consulted only after an identifier misses in every scope of the
environment chain, so user bindings can shadow them. Each one receives the
already-evaluated argument list and returns a Value; misuse is reported as an
Error value, never raised.
"""

import sys
from typing import Callable, Dict, List, Optional, TextIO

from .values import (
    Value, Builtin, Integer, String, Error, NULL,
)


BuiltinFn = Callable[[List[Value]], Value]


def wrong_arg_count(got: int, want: int) -> Error:
    return Error(f"wrong number of arguments. got={got}, want={want}")


class BuiltinRegistry:
    """
    Registry of host-provided functions, keyed by the name programs call
    them by.

    `output` is where `puts` writes; None means the current sys.stdout.
    """

    def __init__(self, output: Optional[TextIO] = None):
        self._functions: Dict[str, Builtin] = {}
        self.output = output
        self._register_all()

    def get(self, name: str) -> Optional[Builtin]:
        """Look up a builtin by name."""
        return self._functions.get(name)

    def register(self, name: str, fn: BuiltinFn) -> Builtin:
        """Register (or replace) a builtin."""
        builtin = Builtin(fn=fn, name=name)
        self._functions[name] = builtin
        return builtin

    def names(self) -> List[str]:
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        self.register("len", self._len)
        self.register("puts", self._puts)

    def _len(self, args: List[Value]) -> Value:
        if len(args) != 1:
            return wrong_arg_count(len(args), 1)
        arg = args[0]
        if isinstance(arg, String):
            return Integer(len(arg.value))
        return Error(f"argument to `len` not supported, got {arg.type_name}")

    def _puts(self, args: List[Value]) -> Value:
        out = self.output if self.output is not None else sys.stdout
        for arg in args:
            print(arg.inspect(), file=out)
        return NULL


_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry
