"""
Tests for the Monkey runtime support: values, environments and builtins.
"""

import io

import pytest

from monkey.runtime import (
    Value, Integer, Boolean, Null, String, Builtin, ReturnValue, Error,
    TRUE, FALSE, NULL, native_bool, is_truthy, is_signal, is_error, new_error,
    Environment, enclosed,
    BuiltinRegistry, get_builtin_registry,
)
from monkey.runtime.values import wrap_int64, trunc_div
from monkey.runtime.builtins import wrong_arg_count


# --- Value Tests ---

class TestValues:
    """Test runtime values."""

    def test_type_names(self):
        """Type names are the upper-case names used in error messages."""
        assert Integer(1).type_name == "INTEGER"
        assert TRUE.type_name == "BOOLEAN"
        assert NULL.type_name == "NULL"
        assert String("").type_name == "STRING"
        assert Error("x").type_name == "ERROR"
        assert ReturnValue(NULL).type_name == "RETURN_VALUE"
        assert Builtin(fn=lambda args: NULL).type_name == "BUILTIN"

    def test_inspect(self):
        """inspect() renders values for display."""
        assert Integer(-12).inspect() == "-12"
        assert TRUE.inspect() == "true"
        assert FALSE.inspect() == "false"
        assert NULL.inspect() == "null"
        assert String("hi there").inspect() == "hi there"
        assert Error("boom").inspect() == "ERROR: boom"
        assert ReturnValue(Integer(3)).inspect() == "3"
        assert Builtin(fn=lambda args: NULL, name="f").inspect() == "builtin function"

    def test_singletons(self):
        """native_bool always hands back the shared booleans."""
        assert native_bool(True) is TRUE
        assert native_bool(False) is FALSE
        assert native_bool(1 == 1) is native_bool(2 == 2)

    def test_values_compare_by_identity(self):
        """Runtime values have no structural equality."""
        assert Integer(1) != Integer(1)
        a = Integer(1)
        assert a == a

    def test_is_truthy(self):
        """Only false and null are falsy."""
        assert is_truthy(TRUE) is True
        assert is_truthy(FALSE) is False
        assert is_truthy(NULL) is False
        assert is_truthy(Integer(0)) is True  # Zero is truthy
        assert is_truthy(String("")) is True

    def test_signals(self):
        """ReturnValue and Error are signals; ordinary values are not."""
        assert is_signal(ReturnValue(Integer(1)))
        assert is_signal(Error("x"))
        assert not is_signal(Integer(1))
        assert not is_signal(NULL)
        assert not is_signal(None)
        assert is_error(Error("x"))
        assert not is_error(ReturnValue(NULL))

    def test_new_error(self):
        """new_error builds an Error value."""
        err = new_error("identifier not found: x")
        assert isinstance(err, Error)
        assert err.message == "identifier not found: x"


class TestIntegerArithmetic:
    """Test the 64-bit integer helpers."""

    def test_wrap_in_range(self):
        """Values already in range are unchanged."""
        assert wrap_int64(0) == 0
        assert wrap_int64(-5) == -5
        assert wrap_int64(2**63 - 1) == 2**63 - 1

    def test_wrap_overflow(self):
        """Overflow wraps two's-complement style."""
        assert wrap_int64(2**63) == -(2**63)
        assert wrap_int64(-(2**63) - 1) == 2**63 - 1
        assert wrap_int64(2**64 + 7) == 7

    @pytest.mark.parametrize("a,b,expected", [
        (7, 2, 3),
        (-7, 2, -3),
        (7, -2, -3),
        (-7, -2, 3),
        (6, 3, 2),
        (0, 5, 0),
    ])
    def test_trunc_div(self, a, b, expected):
        """Division truncates toward zero."""
        assert trunc_div(a, b) == expected

    def test_trunc_div_by_zero(self):
        """Division by zero raises for the evaluator to report."""
        with pytest.raises(ZeroDivisionError):
            trunc_div(1, 0)


# --- Environment Tests ---

class TestEnvironment:
    """Test lexical environments."""

    def test_unbound_is_none(self):
        """Missing names come back as None."""
        env = Environment()
        assert env.get("x") is None
        assert "x" not in env

    def test_set_and_get(self):
        """Bindings are visible in the same scope."""
        env = Environment()
        value = Integer(5)
        assert env.set("x", value) is value
        assert env.get("x") is value
        assert "x" in env

    def test_outer_lookup(self):
        """Lookups fall back to enclosing scopes."""
        outer = Environment()
        outer.set("x", Integer(1))
        inner = enclosed(outer)
        assert inner.get("x") is outer.get("x")

    def test_shadowing(self):
        """A local binding shadows without touching the outer one."""
        outer = Environment()
        outer_x = outer.set("x", Integer(1))
        inner = enclosed(outer)
        inner_x = inner.set("x", Integer(2))
        assert inner.get("x") is inner_x
        assert outer.get("x") is outer_x

    def test_rebinding_replaces(self):
        """Setting a name twice keeps the newest value."""
        env = Environment()
        env.set("x", Integer(1))
        second = env.set("x", Integer(2))
        assert env.get("x") is second

    def test_outer_changes_visible(self):
        """Inner scopes see later changes to outer scopes."""
        outer = Environment()
        inner = enclosed(outer)
        value = outer.set("late", TRUE)
        assert inner.get("late") is value

    def test_depth(self):
        """depth() counts scopes to the outermost."""
        env = Environment()
        assert env.depth() == 1
        assert enclosed(enclosed(env)).depth() == 3

    def test_names(self):
        """Scopes are named for debugging."""
        assert Environment().name == "global"
        assert enclosed(Environment()).name == "call"
        assert enclosed(Environment(), name="block").name == "block"


# --- Builtin Tests ---

class TestBuiltinRegistry:
    """Test the builtin registry."""

    def test_default_builtins(self):
        """len and puts are registered."""
        registry = BuiltinRegistry()
        assert registry.names() == ["len", "puts"]
        assert "len" in registry
        assert "nope" not in registry
        assert registry.get("nope") is None

    def test_global_registry(self):
        """The global registry is created once."""
        assert get_builtin_registry() is get_builtin_registry()
        assert isinstance(get_builtin_registry().get("len"), Builtin)

    def test_register_custom(self):
        """Custom builtins can be added."""
        registry = BuiltinRegistry()
        builtin = registry.register("answer", lambda args: Integer(42))
        assert registry.get("answer") is builtin
        assert builtin.name == "answer"
        assert builtin.fn([]).value == 42

    def test_wrong_arg_count_message(self):
        """Arity errors name the counts."""
        assert wrong_arg_count(2, 1).message == "wrong number of arguments. got=2, want=1"


class TestLen:
    """Test the len builtin."""

    def setup_method(self):
        self.len = BuiltinRegistry().get("len").fn

    def test_string_length(self):
        """len of a string is its character count."""
        assert self.len([String("")]).value == 0
        assert self.len([String("four")]).value == 4
        assert self.len([String("hello world")]).value == 11

    def test_unsupported_argument(self):
        """Non-strings are rejected."""
        result = self.len([Integer(1)])
        assert isinstance(result, Error)
        assert result.message == "argument to `len` not supported, got INTEGER"

    def test_wrong_arity(self):
        """Exactly one argument is required."""
        assert self.len([]).message == "wrong number of arguments. got=0, want=1"
        assert self.len([String("a"), String("b")]).message == (
            "wrong number of arguments. got=2, want=1")


class TestPuts:
    """Test the puts builtin."""

    def test_writes_each_argument(self):
        """Each argument is printed on its own line."""
        out = io.StringIO()
        puts = BuiltinRegistry(output=out).get("puts").fn
        result = puts([String("hello"), Integer(5), TRUE])
        assert result is NULL
        assert out.getvalue() == "hello\n5\ntrue\n"

    def test_no_arguments(self):
        """puts() prints nothing and returns null."""
        out = io.StringIO()
        puts = BuiltinRegistry(output=out).get("puts").fn
        assert puts([]) is NULL
        assert out.getvalue() == ""

    def test_defaults_to_stdout(self, capsys):
        """Without an output stream puts writes to stdout."""
        puts = BuiltinRegistry().get("puts").fn
        puts([String("to stdout")])
        assert capsys.readouterr().out == "to stdout\n"
