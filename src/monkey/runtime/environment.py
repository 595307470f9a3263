"""
Lexical environments for the Monkey evaluator.

Environments form a chain via `outer`. A Function value holds on to the
environment its literal was evaluated in, and every call of that function
creates a child of it, so frames are shared by reference between closures
and activations and are released by ordinary garbage collection once nothing
refers to them.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .values import Value


@dataclass(eq=False)
class Environment:
    """
    A single scope containing name bindings.

    Lookups walk outwards through the chain; bindings are only ever added to
    the local scope, shadowing any outer binding of the same name.
    """
    store: Dict[str, Value] = field(default_factory=dict)
    outer: Optional["Environment"] = field(default=None, repr=False)
    name: str = "global"  # For debugging

    def get(self, name: str) -> Optional[Value]:
        """Look up a name in this scope or enclosing scopes; None if unbound."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Value) -> Value:
        """Bind a name in this scope (shadowing an outer binding if one exists)."""
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def depth(self) -> int:
        """Number of scopes from here to the outermost one, inclusive."""
        count = 0
        env: Optional[Environment] = self
        while env is not None:
            count += 1
            env = env.outer
        return count


def enclosed(outer: Environment, name: str = "call") -> Environment:
    """Create a new scope whose lookups fall back to `outer`."""
    return Environment(outer=outer, name=name)
