"""Runs the wwulang compiler over a file (one compilation unit per line) or in command-line mode. Also uses error
handling context manager. Called from the wwulang console script.
"""

import argparse
import logging

from wwulang.lang.config import Config
from wwulang.lang.error import ErrorHandler
from wwulang.lang.session import Session
from wwulang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="wwulang", description="Compiles wwulang lines into LLVM IR and runs them.")
    parser.add_argument("file", help="file to compile line by line (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ir", action="store_true", help="print the LLVM IR of every compiled line")
    parser.add_argument("--no-exec", action="store_true", help="lower only, do not JIT-execute")
    parser.add_argument("--no-color", action="store_true", help="disable colored diagnostics")
    parser.add_argument("-v", "--verbose", action="store_true", help="log compiler internals to stderr")
    return parser


def main(argv=None):
    """Runs wwulang compiler. Called from wwulang executable script."""
    args = build_parser().parse_args(argv)
    config = Config.from_args(args)

    logging.basicConfig(level=logging.DEBUG if config.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    with ErrorHandler(fatal=args.file is not None, color=config.color) as error_handler:
        if args.file is not None:
            Session(error_handler, args.file, config).run_file()
        else:
            Shell(Session(error_handler, Session.SH_FILE, config)).cmdloop()


if __name__ == "__main__":
    main()
