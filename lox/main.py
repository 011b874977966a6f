"""Runs .lox scripts or starts the interactive shell. Installed as the `lox` console script; also runnable with
`python -m lox.main`.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler, ExitStatus
from lox.lang.session import Session
from lox.lang.shell import Shell


def main(argv=None):
    """Runs lox interpreter. Called from lox console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the lox language.")
        parser.add_argument("file", help="script to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--ast", action="store_true", help="print parsed statements before running them")
        parser.add_argument("--no-color", action="store_true", help="do not color error messages")
        args = parser.parse_args(argv)

        error_handler.color = not args.no_color

        if args.file is not None:
            status = Session(error_handler, args.file, show_ast=args.ast).run_file()
            if status != ExitStatus.OK:
                sys.exit(status)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, show_ast=args.ast)).cmdloop()


if __name__ == "__main__":
    main()
