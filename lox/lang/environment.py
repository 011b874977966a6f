"""Scopes for lox variables. Environments form a parent-linked chain: one per block and per function call, with the
globals at the root. A closure keeps the environment it was defined in alive for as long as the closure is reachable;
since a scope only ever points at its ancestors, the chain itself never forms a cycle.
"""

from lox.lang.error import UndefinedVariable


class Environment:
    """Mutable mapping of names to values, plus an optional enclosing Environment."""

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope only. Redefinition is allowed."""
        self.values[name] = value

    def get(self, name):
        """Returns the value of name (a Token), searching outwards from this scope."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing

        raise UndefinedVariable(name)

    def assign(self, name, value):
        """Rebinds name (a Token) in the nearest scope that defines it. Never creates a new binding."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing

        raise UndefinedVariable(name)

    def __repr__(self):
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"Environment(depth={depth}, names={sorted(self.values)})"
