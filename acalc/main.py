"""Runs acalc over a file, standard input, or in command-line mode. Also uses the error handling context manager.
Called from the acalc console script.
"""

import argparse
import os
import sys

from acalc.lang.error import ErrorHandler
from acalc.lang.session import Session
from acalc.lang.shell import Shell


def make_parser():
    parser = argparse.ArgumentParser(prog="acalc", description="Evaluates sums of non-negative integers.")
    parser.add_argument("file", help="file to evaluate ('-' for stdin; if empty, reads piped stdin or goes to "
                                     "command-line mode)", nargs="?")
    parser.add_argument("--trace", action="store_true", help="print every token, tree and value as it is produced")
    parser.add_argument("--no-color", action="store_true", help="disable colored diagnostics")
    return parser


def main(argv=None, stdin=None):
    """Runs acalc. Called from the acalc console script."""
    args = make_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin

    if args.no_color:
        os.environ["ANSI_COLORS_DISABLED"] = "1"

    with ErrorHandler(trace=args.trace) as error_handler:
        if args.file is not None and args.file != "-":
            Session.from_path(error_handler, args.file).run(echo=True)

        elif args.file == "-" or not stdin.isatty():
            Session.from_stream(error_handler, stdin.buffer).run(echo=True)

        else:
            Shell(error_handler).cmdloop()


if __name__ == "__main__":
    main()
