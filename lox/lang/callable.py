"""Callables in lox: user-defined functions and native (Python) functions share one invocation contract."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from lox.lang.environment import Environment


@dataclass(frozen=True)
class Returning:
    """Result of executing a `return` statement: carried back through statement execution to the nearest call
    boundary. Not an exception.
    """
    value: Any = None


class LoxCallable(ABC):
    """Superclass of every value that can be called."""

    @property
    @abstractmethod
    def arity(self):
        """Exact number of arguments this callable expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable. len(arguments) == self.arity has already been checked by the interpreter."""


class NativeFunction(LoxCallable):
    """A callable implemented in Python. function receives the evaluated arguments as positional args."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    @property
    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return f"<native fn {self.name}>"

    def __repr__(self):
        return f"NativeFunction(name='{self.name}', arity={self._arity})"


class UserFunction(LoxCallable):
    """A function declared in lox. closure is the environment active where the function was declared: calls run in a
    child of closure, not of the caller's environment.
    """

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    @property
    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        env = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        result = interpreter.execute_block(self.declaration.body, env)
        if isinstance(result, Returning):
            return result.value
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self):
        return f"UserFunction(name='{self.declaration.name.lexeme}', arity={self.arity})"


def clock():
    """Seconds since an arbitrary, monotonic epoch."""
    return time.monotonic()


NATIVES = [
    NativeFunction("clock", 0, clock),
]
