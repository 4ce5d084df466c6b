"""
lox Language Parser

Parses lox token lists into immutable syntax trees (see `lox.lox_ast`).

The parser is a recursive-descent parser with one method per precedence level.
Levels, from loosest to tightest binding:

    1. ternary      `cond ? then : else`     right-associative
    2. comma        `a, b, c`                left-associative
    3. assignment   `name = value`           right-associative
    4. equality     `==` `!=`                left-associative
    5. comparison   `>` `>=` `<` `<=`        left-associative
    6. term         `+` `-`                  left-associative
    7. factor       `*` `/`                  left-associative
    8. unary        `!` `-`                  prefix, right-recursive
    9. primary      literals, identifiers, `( expression )`

Note that the comma operator sits between the ternary and assignment levels, so
`a = 1, b = 2` is a comma of two assignments and `x = c ? 1 : 2` assigns `c`
before the conditional is applied.

Statements
----------
    program     → declaration* EOF
    declaration → varDecl | statement
    varDecl     → "var" IDENT ( "=" expression )? ";"
    statement   → exprStmt | printStmt | block
    exprStmt    → expression ";"
    printStmt   → "print" expression ";"
    block       → "{" declaration* "}"

Error recovery
--------------
Rules raise `LoxSyntaxError` when no alternative matches. `declaration()` catches
it, reports it, and skips to the next statement boundary with `synchronize()`, so
one pass reports every independent syntax error. Invalid assignment targets are
reported without raising. Errors at end of input end the parse: only the first one
is reported.

Entry Points
------------
- `parse()`: Parse a full program into a list of statements.
- `parse_expression()`: Parse a single expression that spans the whole token list.
- `parse_source()`: Scan and parse source text, returning statements and diagnostics.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Comma,
    Expr,
    ExpressionStmt,
    Grouping,
    Literal,
    PrintStmt,
    Stmt,
    Ternary,
    Unary,
    VarDecl,
    Variable,
)
from lox.lox_constants import (
    COMPARISON_OPS,
    EQUALITY_OPS,
    FACTOR_OPS,
    STATEMENT_STARTS,
    TERM_OPS,
    UNARY_OPS,
)
from lox.lox_errors import Diagnostic, ErrorReporter, LoxSyntaxError
from lox.lox_lexer import Token, scan

KEYWORD_LITERALS = {"TRUE": True, "FALSE": False, "NIL": None}


def synchronize(tokens: list[Token], position: int) -> int:
    """Returns the position to resume parsing from after a syntax error at `position`.

    If the offending token itself begins a statement (`var`, `print` or `{`),
    parsing resumes there. Otherwise the offending token is skipped and the
    cursor stops right after the next `;` or right before the next statement
    keyword. Never moves past the EOF token.

    Args:
        tokens (list[Token]): The token list, ending in EOF.
        position (int): Index of the token the error was reported at.

    Returns:
        int: Index of the token to resume parsing from.
    """
    last = len(tokens) - 1
    if position >= last:
        return last
    # Declarations consume their leading keyword, so a statement keyword at the
    # error position always lies past the start of the failed declaration.
    if tokens[position].type in STATEMENT_STARTS:
        return position
    position += 1
    while position < last:
        if tokens[position - 1].type == "SEMICOLON":
            return position
        if tokens[position].type in STATEMENT_STARTS:
            return position
        position += 1
    return last


class ParseResult(NamedTuple):
    statements: list[Stmt]
    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class Parser:
    """
    lox Parser Class

    Transforms a token list ending in EOF into a list of statements.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream to be parsed.
    position : int
        Current index into the token stream.
    reporter : ErrorReporter
        Sink for syntax errors.
    exhausted : bool
        Set once an error has been reported at end of input.
    """

    def __init__(self, tokens: list[Token], reporter: ErrorReporter | None = None) -> None:
        if not tokens or tokens[-1].type != "EOF":
            tokens = list(tokens) + [
                Token("EOF", "EOF", tokens[-1].line if tokens else 1, 0)
            ]
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.exhausted: bool = False

    # Cursor

    def current(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def peek(self, offset: int = 1) -> Token:
        """Returns the token `offset` places ahead, clamped to EOF."""
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def is_at_end(self) -> bool:
        return self.current().type == "EOF"

    def advance(self) -> Token:
        """Consumes the current token and returns it. EOF is never consumed.

        Returns:
            Token: The token that was current before the call.
        """
        tok = self.current()
        if not self.is_at_end():
            self.position += 1
        return tok

    def check(self, *types: str) -> bool:
        return self.current().type in types

    def match(self, *types: str) -> Token | None:
        """Consumes and returns the current token if its type is in `types`.

        Returns:
            Token | None: The consumed token, or None with the cursor left in place.
        """
        if self.check(*types):
            return self.advance()
        return None

    def consume(self, type_: str, message: str) -> Token:
        """Consumes a token of the expected type.

        Args:
            type_ (str): The required token type.
            message (str): The error message if the current token does not match.

        Returns:
            Token: The consumed token.

        Raises:
            LoxSyntaxError: If the current token is not of type `type_`.
        """
        if self.check(type_):
            return self.advance()
        raise LoxSyntaxError(self.current(), message)

    def error(self, token: Token, message: str) -> None:
        """Reports a syntax error. Only the first error at end of input is kept."""
        if token.type == "EOF":
            if self.exhausted:
                return
            self.exhausted = True
        self.reporter.error(token, message)

    def synchronize(self) -> None:
        """Moves the cursor from the error position to the next statement boundary."""
        self.position = synchronize(self.tokens, self.position)

    # Entry points

    def parse(self) -> list[Stmt]:
        """Parse a full program and return its top-level statements."""
        statements: list[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self) -> Expr | None:
        """Parse one expression that must be followed by end of input."""
        try:
            expr = self.expression()
            self.consume("EOF", "Expected end of expression.")
            return expr
        except LoxSyntaxError as e:
            self.error(e.token, e.message)
            return None

    # Declarations and statements

    def declaration(self) -> Stmt | None:
        """Parse one declaration, recovering from a syntax error inside it."""
        try:
            if self.match("VAR"):
                return self.var_declaration()
            return self.statement()
        except LoxSyntaxError as e:
            self.error(e.token, e.message)
            self.synchronize()
            return None

    def var_declaration(self) -> Stmt:
        """Parse `"var" IDENT ( "=" expression )? ";"` after the `var` keyword.

        Returns:
            Stmt: A VarDecl positioned at the `var` keyword.
        """
        var_tok = self.previous()
        name = self.consume("IDENT", "Expected variable name.")

        initializer = None
        if self.match("ASSIGN"):
            initializer = self.expression()

        self.consume("SEMICOLON", "Expected ';' after variable declaration.")
        return VarDecl(name.value, initializer, line=var_tok.line, col=var_tok.col)

    def statement(self) -> Stmt:
        """Dispatch on the leading token to a print, block or expression statement."""
        if self.match("PRINT"):
            return self.print_statement()
        if self.match("LBRACE"):
            return self.block()
        return self.expression_statement()

    def print_statement(self) -> Stmt:
        """Parse `expression ";"` after the `print` keyword."""
        print_tok = self.previous()
        value = self.expression()
        self.consume("SEMICOLON", "Expected ';' after value.")
        return PrintStmt(value, line=print_tok.line, col=print_tok.col)

    def expression_statement(self) -> Stmt:
        start = self.current()
        expr = self.expression()
        self.consume("SEMICOLON", "Expected ';' after expression.")
        return ExpressionStmt(expr, line=start.line, col=start.col)

    def block(self) -> Stmt:
        """Parse `declaration* "}"` after the opening brace.

        Errors inside the block are recovered by the nested `declaration()` calls,
        so only a missing closing brace escapes this rule.

        Returns:
            Stmt: A Block that owns its statements as a tuple.
        """
        brace = self.previous()
        statements: list[Stmt] = []
        while not self.check("RBRACE") and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume("RBRACE", "Expected '}' after block.")
        return Block(tuple(statements), line=brace.line, col=brace.col)

    # Expressions

    def expression(self) -> Expr:
        return self.ternary()

    def ternary(self) -> Expr:
        """Parse `comma ( "?" ternary ":" ternary )?`, right-associative.

        Returns:
            Expr: A Ternary positioned at `?`, or the bare condition.
        """
        condition = self.comma()

        question = self.match("QUESTION")
        if question is None:
            return condition

        then_branch = self.ternary()
        self.consume(
            "COLON", "Expected ':' after then branch of conditional expression."
        )
        else_branch = self.ternary()
        return Ternary(
            condition,
            then_branch,
            else_branch,
            line=question.line,
            col=question.col,
        )

    def comma(self) -> Expr:
        """Parse `assignment ( "," assignment )*` into left-nested Comma nodes."""
        expr = self.assignment()
        while True:
            comma_tok = self.match("COMMA")
            if comma_tok is None:
                return expr
            right = self.assignment()
            expr = Comma(expr, right, line=comma_tok.line, col=comma_tok.col)

    def assignment(self) -> Expr:
        """Parse `equality ( "=" assignment )?`, right-associative.

        The left operand must be a Variable. Any other target is reported as an
        invalid assignment target and returned unchanged.

        Returns:
            Expr: An Assign node, or the left operand.
        """
        expr = self.equality()

        equals = self.match("ASSIGN")
        if equals is None:
            return expr

        value = self.assignment()
        if isinstance(expr, Variable):
            return Assign(expr.name, value, line=expr.line, col=expr.col)

        # Reported, not raised: the statement keeps the left operand.
        self.error(equals, "Invalid assignment target.")
        return expr

    def equality(self) -> Expr:
        return self.left_associative(self.comparison, EQUALITY_OPS)

    def comparison(self) -> Expr:
        return self.left_associative(self.term, COMPARISON_OPS)

    def term(self) -> Expr:
        return self.left_associative(self.factor, TERM_OPS)

    def factor(self) -> Expr:
        return self.left_associative(self.unary, FACTOR_OPS)

    def left_associative(
        self, operand: Callable[[], Expr], operators: tuple[str, ...]
    ) -> Expr:
        """Parse `operand (op operand)*` and fold it into left-nested Binary nodes."""
        expr = operand()
        while True:
            op_tok = self.match(*operators)
            if op_tok is None:
                return expr
            right = operand()
            expr = Binary(op_tok.value, expr, right, line=op_tok.line, col=op_tok.col)

    def unary(self) -> Expr:
        """Parse `("!" | "-") unary | primary`."""
        op_tok = self.match(*UNARY_OPS)
        if op_tok is not None:
            operand = self.unary()
            return Unary(op_tok.value, operand, line=op_tok.line, col=op_tok.col)
        return self.primary()

    def primary(self) -> Expr:
        """Parse a literal, an identifier or a parenthesized expression.

        Returns:
            Expr: A Literal, Variable or Grouping node.

        Raises:
            LoxSyntaxError: If the current token cannot start an expression.
        """
        tok = self.current()

        if tok.type in KEYWORD_LITERALS:
            self.advance()
            return Literal(KEYWORD_LITERALS[tok.type], line=tok.line, col=tok.col)

        if tok.type in ("NUMBER", "STRING"):
            self.advance()
            return Literal(tok.literal, line=tok.line, col=tok.col)

        if tok.type == "IDENT":
            self.advance()
            return Variable(tok.value, line=tok.line, col=tok.col)

        if tok.type == "LPAREN":
            self.advance()
            expr = self.expression()
            self.consume("RPAREN", "Expected ')' after expression.")
            return Grouping(expr, line=tok.line, col=tok.col)

        raise LoxSyntaxError(tok, "Expected expression.")


def parse_source(source: str) -> ParseResult:
    """Scan and parse `source`, collecting lexical and syntax errors in order."""
    reporter = ErrorReporter()
    tokens = scan(source, reporter)
    statements = Parser(tokens, reporter).parse()
    return ParseResult(statements, list(reporter.diagnostics))


__all__ = ["ParseResult", "Parser", "parse_source", "synchronize"]
