"""
Emits canonical lox source text from syntax trees.

The printer walks statements and expressions in source order and dispatches each
node to an `emit_<kind>` method, in the same way a backend emitter would. The
output re-parses into an equal tree: the tree already records every parenthesis
as a `Grouping` node, so no precedence-driven parenthesization is added.

Formatting:
    - One statement per line, blocks indented by four spaces.
    - Single spaces around binary, comma (after only), ternary and assignment operators.
    - Numbers in positional decimal form (`3.0`, `0.00001`), never with an exponent.
    - Strings in double quotes, `true`, `false` and `nil` for keyword literals.

Example:
    >>> SourcePrinter().print(parse_source("print 1+2*3;").statements)
    'print 1.0 + 2.0 * 3.0;'

Raises:
    NotImplementedError: If a node kind has no emit method.
    ValueError: If a number literal is infinite or NaN.
"""

import math
from decimal import Decimal

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Comma,
    Expr,
    ExpressionStmt,
    Grouping,
    Literal,
    Node,
    PrintStmt,
    Stmt,
    Ternary,
    Unary,
    VarDecl,
    Variable,
)


def format_number(value: float) -> str:
    """Formats a number literal so that it scans back to the same float.

    Raises:
        ValueError: If `value` is infinite or NaN, which no lox literal denotes.
    """
    if not math.isfinite(value):
        raise ValueError(f"Number {value!r} has no lox literal form.")
    return format(Decimal(repr(value)), "f")


class SourcePrinter:
    """Emits lox source code from statement and expression nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted code.
        indent (int): Current indentation level.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return "    " * self.indent

    def print(self, statements: list[Stmt]) -> str:
        """Emits a whole program and returns it as a single string."""
        self.lines = []
        self.indent = 0
        for stmt in statements:
            self._visit(stmt)
        return "\n".join(self.lines)

    def print_expr(self, expr: Expr) -> str:
        """Emits a single expression without a trailing semicolon."""
        return self.emit_expr(expr)

    def _visit(self, node: Node) -> None:
        """Dispatches a statement node to its `emit_<kind>` method.

        Raises:
            NotImplementedError: If no emitter exists for the node kind.
        """
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No emitter method for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        method(node)

    def emit_expr(self, node: Expr) -> str:
        """Dispatches an expression node to its `emit_expr_<kind>` method.

        Returns:
            str: The expression as source text.

        Raises:
            NotImplementedError: If no emitter exists for the node kind.
        """
        method = getattr(self, f"emit_expr_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No expression emitter for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        result: str = method(node)
        return result

    # Statements

    def emit_expression(self, node: ExpressionStmt) -> None:
        self.lines.append(f"{self.indent_str()}{self.emit_expr(node.expression)};")

    def emit_print(self, node: PrintStmt) -> None:
        self.lines.append(
            f"{self.indent_str()}print {self.emit_expr(node.expression)};"
        )

    def emit_var(self, node: VarDecl) -> None:
        """Emits `var name;` or `var name = init;`."""
        if node.initializer is None:
            self.lines.append(f"{self.indent_str()}var {node.name};")
        else:
            init = self.emit_expr(node.initializer)
            self.lines.append(f"{self.indent_str()}var {node.name} = {init};")

    def emit_block(self, node: Block) -> None:
        """Emits braces on their own lines with the body indented one level."""
        self.lines.append(f"{self.indent_str()}{{")
        self.indent += 1
        for stmt in node.statements:
            self._visit(stmt)
        self.indent -= 1
        self.lines.append(f"{self.indent_str()}}}")

    # Expressions

    def emit_expr_literal(self, node: Literal) -> str:
        """Emits `true`, `false`, `nil`, a quoted string or a positional number."""
        val = node.value
        if val is True:
            return "true"
        if val is False:
            return "false"
        if val is None:
            return "nil"
        if isinstance(val, str):
            return f'"{val}"'
        return format_number(val)

    def emit_expr_variable(self, node: Variable) -> str:
        return node.name

    def emit_expr_assign(self, node: Assign) -> str:
        return f"{node.name} = {self.emit_expr(node.value)}"

    def emit_expr_ternary(self, node: Ternary) -> str:
        cond = self.emit_expr(node.condition)
        then = self.emit_expr(node.then_branch)
        other = self.emit_expr(node.else_branch)
        return f"{cond} ? {then} : {other}"

    def emit_expr_comma(self, node: Comma) -> str:
        return f"{self.emit_expr(node.left)}, {self.emit_expr(node.right)}"

    def emit_expr_binary(self, node: Binary) -> str:
        left = self.emit_expr(node.left)
        right = self.emit_expr(node.right)
        return f"{left} {node.operator} {right}"

    def emit_expr_unary(self, node: Unary) -> str:
        """Emits a prefix operator directly before its operand."""
        operand = self.emit_expr(node.operand)
        # `- -x` rather than `--x`
        sep = " " if operand.startswith(node.operator) else ""
        return f"{node.operator}{sep}{operand}"

    def emit_expr_grouping(self, node: Grouping) -> str:
        return f"({self.emit_expr(node.expression)})"


__all__ = ["SourcePrinter", "format_number"]
