"""Runs the Monkey interpreter on a .mk file, or in command-line mode. Also uses error handling context manager. Called
from the monkey console script.
"""

import argparse
import sys

from monkey.lang.error import ErrorHandler
from monkey.lang.objects import Null
from monkey.lang.session import Session
from monkey.lang.shell import Shell


def main():
    """Runs Monkey interpreter. Called from monkey console script."""
    parser = argparse.ArgumentParser(prog="monkey", description="Monkey language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-v", "--verbose", help="print the parsed AST and value of every program", action="store_true")
    parser.add_argument("--tokens", help="print the token stream of every program", action="store_true")
    args = parser.parse_args()

    with ErrorHandler(verbose=args.verbose) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tokens=args.tokens)
            sess.run()

            for value in sess.results:
                if not isinstance(value, Null):
                    print(value)

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, show_tokens=args.tokens)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    sys.exit(main())
