"""Typed AST nodes for rangeFn formulas.

Node Hierarchy:
Node (base)
├── Expr
│   ├── Number
│   ├── Variable
│   ├── UnaryOp
│   ├── BinaryOp
│   └── Call
└── Statement
    ├── Assign
    └── ExprStatement

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from typing import Literal

# Only these two names exist in a formula
VariableName = Literal["start", "end"]
VARIABLES: frozenset[str] = frozenset({"start", "end"})


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all formula nodes.

    Attributes:
        column: Column of the node's first token (1-indexed)
    """

    column: int


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for nodes that produce a value."""


@dataclass(frozen=True, slots=True)
class Number(Expr):
    value: float | int


@dataclass(frozen=True, slots=True)
class Variable(Expr):
    name: VariableName


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    op: Literal["-", "+"]
    operand: Expr


@dataclass(frozen=True, slots=True)
class BinaryOp(Expr):
    op: Literal["+", "-", "*", "/", "%", "**"]
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Call(Expr):
    """Builtin function call (min, max, abs, floor, ceil, round)."""

    name: str
    args: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Statement(Node):
    """Base class for formula statements."""


@dataclass(frozen=True, slots=True)
class Assign(Statement):
    """``target op= value``; op is ``""`` for plain assignment."""

    target: VariableName
    op: Literal["", "+", "-", "*", "/", "%"]
    value: Expr


@dataclass(frozen=True, slots=True)
class ExprStatement(Statement):
    """A bare expression; evaluated for errors, result discarded."""

    expr: Expr
