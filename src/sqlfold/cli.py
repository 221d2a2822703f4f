"""Command-line wrapper around :func:`sqlfold.format_sql`.

Usage::

    sqlfold [INPUT] [--check] [--max-width N] [-v]

With a file path, the file is rewritten in place when formatting changes it. Without one (or with ``-``), SQL is
read from stdin and the formatted text is written to stdout. ``--check`` writes nothing and exits with status 1 when
the input would be reformatted. Parse and render errors exit with status 2.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

from sqlfold.errors import ParseError, SqlFoldError, WouldFormatError
from sqlfold.format import format_sql
from sqlfold.format.constants import DEFAULT_MAX_WIDTH

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

#: Environment variable holding the default for ``--max-width``.
MAX_WIDTH_ENV: Final = "SQLFOLD_MAX_WIDTH"

EXIT_OK: Final = 0
EXIT_WOULD_FORMAT: Final = 1
EXIT_ERROR: Final = 2


def _width(value: str) -> int:
    try:
        width = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid width: {value!r}") from None
    if width < 1:
        raise argparse.ArgumentTypeError(f"width must be at least 1, got {width}")
    return width


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``sqlfold`` command."""
    parser = argparse.ArgumentParser(prog="sqlfold", description="An opinionated SQL formatter.")
    parser.add_argument("input", nargs="?", help="SQL file to format in place; omit or pass '-' to use stdin/stdout")
    parser.add_argument("--check", action="store_true", help="report whether formatting would occur, without writing")
    parser.add_argument(
        "--max-width",
        type=_width,
        default=os.environ.get(MAX_WIDTH_ENV, str(DEFAULT_MAX_WIDTH)),
        help=f"maximum line width before wrapping (default: ${MAX_WIDTH_ENV} or {DEFAULT_MAX_WIDTH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return its exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    from_stdin = args.input is None or args.input == "-"
    source = "<stdin>" if from_stdin else args.input
    sql = sys.stdin.read() if from_stdin else Path(args.input).read_text(encoding="utf-8")

    try:
        formatted = "".join(format_sql(sql, max_width=args.max_width, check=args.check))
    except WouldFormatError:
        print(f"sqlfold: {source} would be reformatted", file=sys.stderr)
        return EXIT_WOULD_FORMAT
    except ParseError as exc:
        print(f"sqlfold: {source}: {exc.message} (position {exc.cursorpos})", file=sys.stderr)
        return EXIT_ERROR
    except SqlFoldError as exc:
        print(f"sqlfold: {source}: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if args.check:
        logger.info("%s is already formatted", source)
    elif from_stdin:
        sys.stdout.write(formatted)
    elif formatted != sql:
        Path(args.input).write_text(formatted, encoding="utf-8")
        logger.info("reformatted %s", source)
    else:
        logger.info("%s is already formatted", source)
    return EXIT_OK
