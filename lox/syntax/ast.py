"""Typed AST definitions for lox. Every node is immutable once built and the tree never points back up: the only
shared ownership in a running program comes from environments and closures, not from here.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from lox.syntax.tokens import Token


class Expr:
    """Superclass of all expression nodes."""


class Stmt:
    """Superclass of all statement nodes."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """Short-circuiting "and"/"or"."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    """paren is the opening parenthesis, kept to report runtime errors of the call."""
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None
