"""
Diagnostics for the lox front-end.

Scanning and parsing never stop at the first problem. Both phases hand what they
find to an `ErrorReporter`, a passive sink that keeps diagnostics in the order they
were reported. The caller inspects it once the parse is over and decides whether the
(possibly partial) syntax tree is usable.

Classes:
    Diagnostic: One reported problem with its source position.
    ErrorReporter: Ordered collection of diagnostics.
    LoxSyntaxError: Raised inside parser rules, caught at the declaration level.

Example:
    >>> reporter = ErrorReporter()
    >>> reporter.report(1, 5, "Unexpected character '@'.", phase="lexical")
    >>> print(reporter.diagnostics[0])
    [line 1, col 5] Error: Unexpected character '@'.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from lox.lox_lexer import Token


@dataclass(frozen=True)
class Diagnostic:
    """A single lexical or syntax error.

    Attributes:
        line (int): 1-based line of the offending lexeme.
        col (int): 1-based column of the offending lexeme.
        message (str): Rule-level expectation, e.g. "Expected ';' after value.".
        where (str): Location suffix such as "at ';'" or "at end". Empty for lexical errors.
        phase (str): "lexical" or "syntax".
    """

    line: int
    col: int
    message: str
    where: str = ""
    phase: str = "syntax"

    def __str__(self) -> str:
        location = f" {self.where}" if self.where else ""
        return f"[line {self.line}, col {self.col}] Error{location}: {self.message}"


class ErrorReporter:
    """Accumulates diagnostics without interrupting control flow."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def report(
        self, line: int, col: int, message: str, where: str = "", phase: str = "syntax"
    ) -> None:
        self.diagnostics.append(Diagnostic(line, col, message, where, phase))

    def error(self, token: Token, message: str) -> None:
        """Report a syntax error positioned at `token`."""
        where = "at end" if token.type == "EOF" else f"at '{token.value}'"
        self.report(token.line, token.col, message, where)

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)


class LoxSyntaxError(SyntaxError):
    """Raised by a parser rule that has no valid alternative left.

    Attributes:
        token (Token): The token the rule could not accept.
    """

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message


__all__ = ["Diagnostic", "ErrorReporter", "LoxSyntaxError"]
