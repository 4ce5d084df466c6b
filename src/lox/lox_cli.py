"""
lox CLI Entrypoint.

Command-line driver around the lox front-end. It reads source text, scans and
parses it, prints diagnostics to stderr, and writes the resulting syntax tree.

Features:
    - Read source from `.lox` files, inline strings, or standard input.
    - Dump the token list, the tree as canonical source, or the tree as JSON.
    - Output to console or file.

Example usage:
    lox hello.lox
    lox -s "print 1 + 2 * 3;" --json
    lox myfile.lox -o formatted.lox
    echo "var a = 1;" | lox

Exit status is 0 on success and 65 (EX_DATAERR) when any diagnostic was reported.

Functions:
    run_lox(source: str, is_string: bool = False, tokens: bool = False, as_json: bool = False,
            out: str | None = None, pretty: bool = False) -> int:
        Executes the full pipeline (scan → parse → output).

    main(argv: list[str] | None = None) -> None:
        Parses CLI arguments and invokes `run_lox`.
"""

import argparse
import json
import sys

from lox.lox_errors import ErrorReporter
from lox.lox_lexer import scan
from lox.lox_parser import Parser
from lox.lox_printer import SourcePrinter

EX_DATAERR = 65


def run_lox(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    as_json: bool = False,
    out: str | None = None,
    pretty: bool = False,
) -> int:
    """
    Run the lox front-end: scan, parse, and write the token list or the tree.

    Args:
        source (str): The lox source code or path to a `.lox` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, prints the token list instead of the tree.
        as_json (bool): If True, prints the tree as JSON instead of canonical source.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        pretty (bool): If True, prints banners around the output.

    Returns:
        int: 0 on success, 65 if any lexical or syntax error was reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.lox'.
    """
    if not is_string and not source.endswith(".lox"):
        raise ValueError("Only .lox files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Scanning
    reporter = ErrorReporter()
    token_list = scan(source, reporter)

    # 3. Parsing
    statements = Parser(token_list, reporter).parse()

    # 4. Diagnostics
    for diagnostic in reporter:
        print(diagnostic, file=sys.stderr)
    if reporter.had_error:
        return EX_DATAERR

    # 5. Render
    if tokens:
        title = "Tokens"
        code = "\n".join(
            f"{tok.line}:{tok.col} {tok.type} {tok.value!r}" for tok in token_list
        )
    elif as_json:
        title = "Syntax Tree"
        code = json.dumps([stmt.to_dict() for stmt in statements], indent=2)
    else:
        title = "Canonical Source"
        code = SourcePrinter().print(statements)

    # 6. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(code + "\n")
        if pretty:
            print(f"(wrote to {out})")
    elif pretty:
        banner = "=" * 20
        print(f"{banner}\n{title}\n{banner}\n{code}\n{banner}")
    else:
        print(code)
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the lox CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token list.
        - `--json`: Print the syntax tree as JSON.
        - `-o`, `--out`: Write output to a file.
        - `-p`, `--pretty`: Show banners around the output.

    With no source (or `-`), the program is read from standard input.
    """
    parser = argparse.ArgumentParser(prog="lox")
    parser.add_argument(
        "source", nargs="?", help="Filename, raw source (with -s), or '-' for stdin"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--tokens", action="store_true", help="Print the token list instead of the tree"
    )
    output.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show output with banners"
    )

    args = parser.parse_args(argv)

    source, is_string = args.source, args.string
    if source is None or source == "-":
        source, is_string = sys.stdin.read(), True

    try:
        status = run_lox(
            source=source,
            is_string=is_string,
            tokens=args.tokens,
            as_json=args.as_json,
            out=args.out,
            pretty=args.pretty,
        )
    except (OSError, ValueError) as e:
        parser.error(str(e))
    sys.exit(status)


if __name__ == "__main__":
    main()
