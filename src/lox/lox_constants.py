"""
Token tables shared by the lox lexer and parser.

Exports:
    token_hashmap: Lexeme to canonical token type, for operators, punctuation and keywords.
    KEYWORDS: Reserved words that are never scanned as identifiers.
    WHITESPACE: Characters skipped between tokens.
    STATEMENT_STARTS: Token types that begin a declaration or statement.
"""

operator_tokens: dict[str, str] = {
    "=": "ASSIGN",
    ",": "COMMA",
    "?": "QUESTION",
    ":": "COLON",
    "!=": "NE",
    "==": "EQ",
    ">": "GT",
    ">=": "GE",
    "<": "LT",
    "<=": "LE",
    "-": "SUB",
    "+": "PLUS",
    "/": "DIV",
    "*": "MULT",
    "!": "NOT",
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ";": "SEMICOLON",
}

KEYWORDS: dict[str, str] = {
    "var": "VAR",
    "print": "PRINT",
    "true": "TRUE",
    "false": "FALSE",
    "nil": "NIL",
}

token_hashmap: dict[str, str] = {**operator_tokens, **KEYWORDS}

# Longest lexeme in operator_tokens, bounds the lexer's lookahead.
MAX_OPERATOR_LENGTH = max(len(op) for op in operator_tokens)

# Pattern_White_Space
WHITESPACE = frozenset("\t\n\x0b\x0c\r \x85\u200e\u200f\u2028\u2029")

EQUALITY_OPS = ("EQ", "NE")
COMPARISON_OPS = ("GT", "GE", "LT", "LE")
TERM_OPS = ("PLUS", "SUB")
FACTOR_OPS = ("MULT", "DIV")
UNARY_OPS = ("NOT", "SUB")

STATEMENT_STARTS = frozenset({"VAR", "PRINT", "LBRACE"})

__all__ = [
    "COMPARISON_OPS",
    "EQUALITY_OPS",
    "FACTOR_OPS",
    "KEYWORDS",
    "MAX_OPERATOR_LENGTH",
    "STATEMENT_STARTS",
    "TERM_OPS",
    "UNARY_OPS",
    "WHITESPACE",
    "operator_tokens",
    "token_hashmap",
]
