"""
Runtime values for the Monkey evaluator.

Every value knows its type name (used verbatim in error messages) and how to
render itself with `inspect()`. TRUE, FALSE and NULL are process-wide
singletons: `==` between values that are not both integers or both strings
compares identity, so these three must never be constructed again.

ReturnValue and Error are Signals. A Signal is not an ordinary result: it is
an outcome every composite evaluation step checks for and hands straight back
to its caller, which is how `return` and runtime errors unwind.
"""

from dataclasses import dataclass, field
from typing import Callable, ClassVar, List, Optional, Tuple, TYPE_CHECKING

from ..ast import BlockStatement, Identifier

if TYPE_CHECKING:
    from .environment import Environment


INT64_MASK = (1 << 64) - 1
INT64_SIGN = 1 << 63


def wrap_int64(n: int) -> int:
    """Reduce an unbounded int to signed 64-bit two's complement."""
    n &= INT64_MASK
    return n - (1 << 64) if n & INT64_SIGN else n


def trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero; raises ZeroDivisionError on b == 0."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


@dataclass(eq=False)
class Value:
    """Base class for all runtime values."""
    type_name: ClassVar[str] = "VALUE"

    def inspect(self) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class Integer(Value):
    type_name: ClassVar[str] = "INTEGER"
    value: int

    def inspect(self) -> str:
        return str(self.value)


@dataclass(eq=False)
class Boolean(Value):
    type_name: ClassVar[str] = "BOOLEAN"
    value: bool

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(eq=False)
class Null(Value):
    type_name: ClassVar[str] = "NULL"

    def inspect(self) -> str:
        return "null"


@dataclass(eq=False)
class String(Value):
    type_name: ClassVar[str] = "STRING"
    value: str

    def inspect(self) -> str:
        return self.value


@dataclass(eq=False)
class Function(Value):
    """
    A user-defined function: parameters, body and the environment the
    literal was evaluated in (shared, not copied - this is the closure).
    """
    type_name: ClassVar[str] = "FUNCTION"
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    env: "Environment" = field(repr=False)

    def inspect(self) -> str:
        params = ", ".join(p.name for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(eq=False)
class Builtin(Value):
    """A host-provided function taking the evaluated argument list."""
    type_name: ClassVar[str] = "BUILTIN"
    fn: Callable[[List[Value]], Value]
    name: str = ""

    def inspect(self) -> str:
        return "builtin function"


@dataclass(eq=False)
class Signal(Value):
    """Base for outcomes that stop the evaluation of the enclosing construct."""
    pass


@dataclass(eq=False)
class ReturnValue(Signal):
    """
    A pending `return`. Blocks pass it up still wrapped; the function call
    boundary (or the program) unwraps it exactly once.
    """
    type_name: ClassVar[str] = "RETURN_VALUE"
    value: Value

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(eq=False)
class Error(Signal):
    """A runtime error; propagates until it reaches the top level."""
    type_name: ClassVar[str] = "ERROR"
    message: str

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(b: bool) -> Boolean:
    """Map a host bool onto the interned TRUE/FALSE."""
    return TRUE if b else FALSE


def is_truthy(value: Value) -> bool:
    """Only false and null are falsy; every other value, 0 included, is truthy."""
    return not (value is FALSE or value is NULL)


def is_signal(value: Optional[Value]) -> bool:
    return isinstance(value, Signal)


def is_error(value: Optional[Value]) -> bool:
    return isinstance(value, Error)


def new_error(message: str) -> Error:
    return Error(message)
