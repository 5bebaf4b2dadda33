#!/usr/bin/env python3
"""
Expr - semantic checker for a small typed expression language.

Usage:
    expr <file.expr>              Check the program and print it back
    expr <file.expr> --check      Only run semantic checks
    expr <file.expr> --ast        Print the parsed AST (for debugging)
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from tatsu.util import asjson

from exprlang.ExprParser import ExprSyntaxError, parser
from exprlang.ExprPrinter import to_source
from exprlang.ExprSemanticChecker import analyze

# Version
VERSION = "0.1.0"

# Log level for the exprlang loggers, overridden by --log-level
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_LOG_LEVEL = os.environ.get("EXPR_LOG_LEVEL", "WARNING").upper()
if DEFAULT_LOG_LEVEL not in LOG_LEVELS:
    DEFAULT_LOG_LEVEL = "WARNING"


# Colors for terminal output
class Colors:
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"


def color_enabled():
    """Check if colors should be enabled."""
    return sys.stdout.isatty() and sys.stderr.isatty()


def c(text, color):
    """Colorize text if colors are enabled."""
    if color_enabled():
        return f"{color}{text}{Colors.ENDC}"
    return text


def print_error(msg):
    """Print an error message."""
    print(c("error:", Colors.RED + Colors.BOLD), msg, file=sys.stderr)


def print_warning(msg):
    """Print a warning message."""
    print(c("warning:", Colors.YELLOW + Colors.BOLD), msg, file=sys.stderr)


def print_success(msg):
    """Print a success message."""
    print(c("✓", Colors.GREEN + Colors.BOLD), msg, file=sys.stderr)


def print_help():
    """Print custom help message with proper alignment."""
    if color_enabled():
        Y = Colors.YELLOW + Colors.BOLD  # Options
        G = Colors.GREEN  # Args
        C = Colors.CYAN + Colors.BOLD  # Headers
        E = Colors.ENDC  # End
    else:
        Y = G = C = E = ""

    print(f"""expr {VERSION} - semantic checker for the Expr language

{C}Usage:{E} expr {G}FILE{E} [{Y}OPTIONS{E}]

{C}Arguments:{E}
  {G}FILE{E}                   Expr source file (.expr)

{C}Options:{E}
  {Y}-h{E}, {Y}--help{E}             Show this help message and exit
  {Y}-v{E}, {Y}--version{E}          Show version and exit
  {Y}--check{E}                Only run semantic checks
  {Y}--ast{E}                  Print the parsed AST
  {Y}--no-color{E}             Disable colored output
  {Y}--log-level{E}={G}LEVEL{E}      Logging level (default: $EXPR_LOG_LEVEL or WARNING)
  {Y}-q{E}, {Y}--quiet{E}            Suppress info messages

{C}Types:{E}
  {G}int{E}    {G}float{E}    {G}bool{E}
""")


def parse_args(argv=None):
    """Parse command line arguments."""
    argv = sys.argv[1:] if argv is None else argv

    if "-h" in argv or "--help" in argv:
        print_help()
        sys.exit(0)

    if "-v" in argv or "--version" in argv:
        print(f"expr {VERSION} - semantic checker for the Expr language")
        sys.exit(0)

    arg_parser = argparse.ArgumentParser(prog="expr", add_help=False)
    arg_parser.add_argument("file", metavar="FILE")
    arg_parser.add_argument("--check", action="store_true")
    arg_parser.add_argument("--ast", action="store_true")
    arg_parser.add_argument("--no-color", action="store_true")
    arg_parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=DEFAULT_LOG_LEVEL
    )
    arg_parser.add_argument("--quiet", "-q", action="store_true")

    return arg_parser.parse_args(argv)


def read_source(file_path: Path) -> str:
    try:
        with open(file_path, "r") as f:
            return f.read()
    except FileNotFoundError:
        print_error(f"file not found: {file_path}")
        sys.exit(1)
    except PermissionError:
        print_error(f"permission denied: {file_path}")
        sys.exit(1)


def main(argv=None):
    args = parse_args(argv)

    if args.no_color:
        global color_enabled
        color_enabled = lambda: False

    logging.basicConfig(
        level=args.log_level,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    file_path = Path(args.file)
    if not file_path.suffix == ".expr":
        print_warning(f"file does not have .expr extension: {file_path}")

    source = read_source(file_path)

    try:
        if args.ast:
            print(json.dumps(asjson(parser.parse_raw(source)), indent=2))
            sys.exit(0)
        tree = parser.parse(source)
    except ExprSyntaxError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    result = analyze(tree)

    if result.fatal:
        print_error(result.messages[0])
        sys.exit(1)

    if result.errors:
        print_error(f"found {len(result.errors)} error(s) in {file_path}")
        for message in result.messages:
            print(f"  {c('→', Colors.RED)} {message}", file=sys.stderr)
        sys.exit(1)

    if args.check:
        print_success(f"no errors in {file_path}")
        sys.exit(0)

    if not args.quiet:
        print_success(f"{len(result.program)} statement(s) checked")
    print(to_source(result.program))


if __name__ == "__main__":
    main()
