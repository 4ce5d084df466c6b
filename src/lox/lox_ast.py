"""
Defines the abstract syntax tree (AST) node variants for the lox language.

Expression variants (subclasses of `Expr`):
    Literal, Variable, Assign, Ternary, Comma, Binary, Unary, Grouping

Statement variants (subclasses of `Stmt`):
    ExpressionStmt, PrintStmt, VarDecl, Block

Every node is a frozen dataclass that owns its children exclusively, so a parsed
program is an immutable tree. Each node tracks:
    kind (str): The syntactic construct (e.g. "binary", "print", "block"), used for dispatch.
    line (int): Source line of the originating token.
    col (int): Source column of the originating token.

Positions are keyword-only and are left out of equality and repr: two nodes are
equal when they have the same shape, operators, names and literal values.

Usage:
    This module is the parser's output and the input of every consumer (printer,
    evaluator). Consumers dispatch on `kind` and must handle every variant.

Example:
    Binary("+", Literal(1.0), Literal(2.0), line=1, col=3)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from lox.lox_constants import KEYWORDS

LiteralValue = float | str | bool | None


@dataclass(frozen=True)
class Node:
    kind: ClassVar[str] = "node"

    line: int = field(default=0, kw_only=True, compare=False, repr=False)
    col: int = field(default=0, kw_only=True, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Converts the node (and all descendants) into nested plain dictionaries."""
        data: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            val = getattr(self, f.name)
            if isinstance(val, Node):
                val = val.to_dict()
            elif isinstance(val, tuple):
                val = [v.to_dict() for v in val]
            data[f.name] = val
        return data


@dataclass(frozen=True)
class Expr(Node):
    pass


@dataclass(frozen=True)
class Stmt(Node):
    pass


# Expressions


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    kind: ClassVar[str] = "literal"

    value: LiteralValue

    def __eq__(self, other: Any) -> bool:
        # true == 1.0 in Python, the literal types must match too
        return (
            isinstance(other, Literal)
            and type(self.value) is type(other.value)
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Variable(Expr):
    kind: ClassVar[str] = "variable"

    name: str


@dataclass(frozen=True)
class Assign(Expr):
    """Assignment to a bare identifier. `name` is the target, never an expression."""

    kind: ClassVar[str] = "assign"

    name: str
    value: Expr

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not is_identifier(self.name):
            raise ValueError(f"Invalid assignment target: {self.name!r}")


@dataclass(frozen=True)
class Ternary(Expr):
    kind: ClassVar[str] = "ternary"

    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True)
class Comma(Expr):
    kind: ClassVar[str] = "comma"

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    kind: ClassVar[str] = "binary"

    operator: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    kind: ClassVar[str] = "unary"

    operator: str
    operand: Expr


@dataclass(frozen=True)
class Grouping(Expr):
    kind: ClassVar[str] = "grouping"

    expression: Expr


# Statements


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    kind: ClassVar[str] = "expression"

    expression: Expr


@dataclass(frozen=True)
class PrintStmt(Stmt):
    kind: ClassVar[str] = "print"

    expression: Expr


@dataclass(frozen=True)
class VarDecl(Stmt):
    kind: ClassVar[str] = "var"

    name: str
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block(Stmt):
    kind: ClassVar[str] = "block"

    statements: tuple[Stmt, ...] = ()

    def __post_init__(self) -> None:
        # accept any iterable, store an owned tuple
        object.__setattr__(self, "statements", tuple(self.statements))


def is_identifier(name: str) -> bool:
    """True if `name` would scan as a single IDENT token."""
    return (
        bool(name)
        and (name[0].isalpha() or name[0] == "_")
        and all(ch.isalnum() or ch == "_" for ch in name)
        and name not in KEYWORDS
    )


__all__ = [
    "Assign",
    "Binary",
    "Block",
    "Comma",
    "Expr",
    "ExpressionStmt",
    "Grouping",
    "Literal",
    "LiteralValue",
    "Node",
    "PrintStmt",
    "Stmt",
    "Ternary",
    "Unary",
    "VarDecl",
    "Variable",
]
