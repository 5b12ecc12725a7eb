"""Error handling for the Monkey language. Only MonkeyExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

There are three error families, and they are never conflated:
    1. lexical errors are not exceptions at all: the lexer emits ILLEGAL tokens and the parser reacts to them
    2. syntax errors are collected by the parser (ParseError) and raised together (ParserErrors)
    3. runtime errors stop evaluation at the first one (EvalError)
"""

import sys

from termcolor import colored

from monkey.lang.objects import Error


class MonkeyException(Exception):
    """Templates an error message so that it can be displayed with a diagnosis of the offending source text. start and
    end are offsets into expr; end == -1 means "until the end of expr".
    """

    def __init__(self, msg, expr="", start=0, end=-1, diagnosis=True, internal=False):
        super().__init__(msg)

        self.msg = msg
        self.expr = expr  # source text that caused the error
        self.start = start
        self.end = end if end != -1 else len(self.expr)

        self.diagnosis = diagnosis
        self.internal = internal

    def locate(self, expr, start, end):
        """Attaches source text and offsets to this error (if it doesn't have any yet). Returns self."""
        if not self.expr:
            self.expr, self.start, self.end = expr, start, end
        return self

    def __str__(self):
        return self.msg


class ParseError(MonkeyException):
    """A single syntax error: what was expected (a TokenType, if any) and the token found instead."""

    def __init__(self, msg, found=None, expected=None):
        super().__init__(msg)
        self.found = found
        self.expected = expected

        if found is not None:
            self.start, self.end = found.start, found.end

    def __str__(self):
        if self.found is None or self.expected is None:
            return self.msg
        return f"{self.msg}, got {self.found.type.name} instead"

    def __repr__(self):
        return f"ParseError({str(self)!r})"

    def __eq__(self, other):
        return isinstance(other, ParseError) and (self.msg, self.found, self.expected) == \
            (other.msg, other.found, other.expected)

    def __hash__(self):
        return hash((self.msg, self.found, self.expected))


class ParserErrors(MonkeyException):
    """Raised by parse when any syntax error was found. errors is never empty."""

    def __init__(self, errors, expr=""):
        assert errors, "ParserErrors needs at least one ParseError"
        self.errors = list(errors)

        first = self.errors[0]
        super().__init__(str(first), expr, first.start, first.end if expr else -1)

    def __iter__(self):
        return iter(self.errors)

    def __len__(self):
        return len(self.errors)

    def __str__(self):
        return "\n".join(str(error) for error in self.errors)


class EvalError(MonkeyException):
    """Runtime error. Evaluation is fail-fast, so exactly one of these surfaces per evaluation."""

    @property
    def value(self):
        """The runtime Error object for this error."""
        return Error(self.msg)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report Monkey errors/warnings instead. Also acts as
    the console log for the interpreter: warnings and (when verbose) evaluation steps are printed through it.
    """
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def log(label, text):
        """Prints a labelled trace line."""
        print(colored(f"[{label}] ", ErrorHandler.STEP, attrs=["bold"]) + str(text))

    def register_step(self, label, text):
        """Logs a trace step (AST, value...) if this handler is verbose."""
        if self.verbose:
            ErrorHandler.log(label, text)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with carets under it."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        # only the line holding the error is shown
        line_start = error.expr.rfind("\n", 0, error.start) + 1
        line_end = error.expr.find("\n", error.start)
        if line_end == -1:
            line_end = len(error.expr)

        start = error.start - line_start
        end = max(min(error.end, line_end) - line_start, start + 1)
        line = error.expr[line_start:line_end]

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, msg, expr="", start=0, end=-1):
        """Generates and prints a warning message."""
        warning = MonkeyException(msg, expr, start, end)

        print(colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + warning.msg)
        if warning.expr:
            print(ErrorHandler.diagnose(warning, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a MonkeyException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        if isinstance(error, ParserErrors):
            for parse_error in error:
                print(error_msg + colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + str(parse_error))
                error_msg = ""
                if error.expr and error.diagnosis:
                    print(ErrorHandler.diagnose(parse_error.locate(error.expr, parse_error.start, parse_error.end)))
        else:
            print(error_msg + colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg)
            if not error.internal and error.expr and error.diagnosis:
                print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # reset after a non-fatal error

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(MonkeyException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(MonkeyException("maximum recursion depth exceeded", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, MonkeyException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(MonkeyException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
