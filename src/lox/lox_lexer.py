"""
Lexical analyzer for the lox language.

This module converts raw source text into the token list consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Immutable lexeme with type, literal payload, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace and single-line comments (`//`)
    - Longest-match recognition of operators (`!=` before `!`, `<=` before `<`, ...)
    - Recognizes:
        * Identifiers and the keywords `var`, `print`, `true`, `false`, `nil`
        * Numbers (digits with an optional fraction)
        * Strings (double quoted, may span lines, no escapes)
        * Operators and punctuation

Lexical errors (unexpected characters, unterminated strings, number literals too
large for a float) are reported to an `ErrorReporter` and scanning carries on, so
the token list always ends with EOF.

Example:
    >>> tokens = scan("print 42;")
    >>> tokens
    [Token(PRINT, print), Token(NUMBER, 42), Token(SEMICOLON, ;), Token(EOF, EOF)]

Exports:
    - CharacterStream
    - Token
    - Lexer
    - scan
    - token_hashmap
"""

import math
from dataclasses import dataclass
from typing import Any

from lox.lox_constants import KEYWORDS, MAX_OPERATOR_LENGTH, WHITESPACE, token_hashmap
from lox.lox_errors import ErrorReporter


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or an empty string if out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True, repr=False)
class Token:
    """Represents a single lexical token in the lox language.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'EOF').
        value (str): The lexeme. For strings, the text between the quotes.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
        literal (Any): Parsed payload: float for NUMBER, str for STRING and IDENT.
    """

    type: str
    value: str
    line: int = 0
    col: int = 0
    literal: Any = None

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"


class Lexer:
    """Lexical analyzer for the lox language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        reporter (ErrorReporter): Sink for lexical errors.
    """

    def __init__(
        self, stream: CharacterStream, reporter: ErrorReporter | None = None
    ) -> None:
        self.stream = stream
        self.reporter = reporter if reporter is not None else ErrorReporter()

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead without consuming it."""
        return self.stream.peek(offset)

    def advance(self) -> str:
        """Consumes and returns the next character from the stream."""
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in WHITESPACE:
                self.advance()
            elif self.peek() == "/" and self.peek(1) == "/":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Advances through the stream until the end of a comment line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def read_identifier(self, line: int, col: int) -> Token:
        """Reads an identifier or keyword starting at (`line`, `col`).

        Returns:
            Token: A keyword token, or an IDENT token carrying its name as literal.
        """
        ident = ""
        while not self.stream.end_of_file() and (
            self.peek().isalnum() or self.peek() == "_"
        ):
            ident += self.advance()
        if ident in KEYWORDS:
            return Token(KEYWORDS[ident], ident, line, col)
        return Token("IDENT", ident, line, col, ident)

    def read_number(self, line: int, col: int) -> Token:
        """Reads digits with an optional fractional part.

        A literal too large for a float is reported as a lexical error. The token
        is still returned so that parsing can go on.

        Args:
            line (int): Line of the first digit.
            col (int): Column of the first digit.

        Returns:
            Token: A NUMBER token whose literal is a float.
        """
        num = ""
        while is_digit(self.peek()):
            num += self.advance()
        # A trailing '.' without digits is not part of the number.
        if self.peek() == "." and is_digit(self.peek(1)):
            num += self.advance()
            while is_digit(self.peek()):
                num += self.advance()
        value = float(num)
        if math.isinf(value):
            self.reporter.report(
                line, col, "Number literal out of range.", phase="lexical"
            )
        return Token("NUMBER", num, line, col, value)

    def read_string(self, line: int, col: int) -> Token | None:
        """Reads a double-quoted string that may span several lines.

        Returns:
            Token | None: A STRING token, or None if the input ends before the
            closing quote (reported as "Unterminated string.").
        """
        self.advance()  # opening quote
        val = ""
        while not self.stream.end_of_file() and self.peek() != '"':
            val += self.advance()
        if self.stream.end_of_file():
            self.reporter.report(line, col, "Unterminated string.", phase="lexical")
            return None
        self.advance()  # closing quote
        return Token("STRING", val, line, col, val)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Unexpected characters and unterminated strings are reported and skipped,
        so this always returns a real token or EOF.
        """
        while True:
            self.skip_whitespace()

            if self.stream.end_of_file():
                return Token("EOF", "EOF", self.stream.line, self.stream.column)

            ch = self.peek()
            line, col = self.stream.line, self.stream.column

            # 1. Identifier or keyword
            if ch.isalpha() or ch == "_":
                return self.read_identifier(line, col)

            # 2. Number
            if is_digit(ch):
                return self.read_number(line, col)

            # 3. String
            if ch == '"':
                string_token = self.read_string(line, col)
                if string_token is not None:
                    return string_token
                continue

            # 4. Compound or symbolic operator
            token = self.match_operator()
            if token:
                return token

            # 5. Unknown character
            self.reporter.report(
                line, col, f"Unexpected character {self.advance()!r}.", phase="lexical"
            )

    def scan_tokens(self) -> list[Token]:
        """Scans the rest of the stream. The last token is always EOF."""
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == "EOF":
                return tokens


def scan(source: str, reporter: ErrorReporter | None = None) -> list[Token]:
    """Tokenizes a whole source string."""
    return Lexer(CharacterStream(source), reporter).scan_tokens()


__all__ = ["CharacterStream", "Lexer", "Token", "scan", "token_hashmap"]
