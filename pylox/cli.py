"""
Command-line driver for pylox.

    pylox [script]      parse a file, or start a prompt when no file is given

Each well-formed expression is printed in parenthesized prefix form.
Diagnostics go to stderr; trees from an input with errors are not printed.
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from . import __version__
from .lexer.errors import ErrorReporter
from .parser.parser import ParseResult, DEFAULT_MAX_DEPTH, parse_string
from .parser.printer import AstPrinter

logger = logging.getLogger(__name__)

# sysexits.h codes
EX_DATAERR = 65
EX_NOINPUT = 66


def run(source: str, reporter: ErrorReporter, out: TextIO,
        max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
    """Scan and parse `source`, printing the trees if nothing went wrong."""
    result = parse_string(source, reporter, max_depth=max_depth)

    if result.had_error:
        logger.debug("Suppressing output: %d diagnostics", len(result.diagnostics))
        return result

    printer = AstPrinter()
    for expr in result.expressions:
        out.write(printer.print(expr) + "\n")

    return result


def run_file(path: str, max_depth: int = DEFAULT_MAX_DEPTH, explain: bool = False,
             out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
    except OSError as e:
        err.write(f"Could not read '{path}': {e.strerror or e}\n")
        return EX_NOINPUT

    reporter = ErrorReporter(stream=err, verbose=explain)
    result = run(source, reporter, out, max_depth)

    return EX_DATAERR if result.had_error else 0


def run_prompt(max_depth: int = DEFAULT_MAX_DEPTH, explain: bool = False,
               stdin: Optional[TextIO] = None, out: Optional[TextIO] = None,
               err: Optional[TextIO] = None) -> int:
    stdin = stdin if stdin is not None else sys.stdin
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    reporter = ErrorReporter(stream=err, verbose=explain)

    while True:
        out.write("> ")
        out.flush()

        line = stdin.readline()
        if not line:
            break

        run(line, reporter, out, max_depth)
        # One bad line must not poison the rest of the session
        reporter.reset()

    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pylox",
        description="Parse Lox expressions and print their syntax trees."
    )
    parser.add_argument("script", nargs="?", help="source file to parse (omit for a prompt)")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help="maximum expression nesting depth (default: %(default)s)")
    parser.add_argument("--explain", action="store_true",
                        help="show help text and suggestions with each diagnostic")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(name)s %(levelname)s: %(message)s"
    )

    if args.max_depth < 1:
        sys.stderr.write("--max-depth must be at least 1\n")
        return 2

    if args.script:
        return run_file(args.script, args.max_depth, args.explain)
    return run_prompt(args.max_depth, args.explain)


if __name__ == "__main__":
    sys.exit(main())
