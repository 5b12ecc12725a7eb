"""Session control for the Monkey language. Ties the lexer, parser and evaluator together to run the interpreter, either
in command-line mode or file interpretation mode.
"""

from monkey.lang.ast import LetStatement
from monkey.lang.environment import Environment
from monkey.lang.error import MonkeyException
from monkey.lang.evaluator import evaluate
from monkey.lang.lexer import tokenize
from monkey.lang.parser import parse


class Session:
    """Governs a Monkey session: one global Environment shared by every program added to it."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = "//"
    OPENERS = "({["
    CLOSERS = ")}]"

    def __init__(self, error_handler, path, cmd_line, show_tokens=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.cmd_line = cmd_line        # whether or not in command-line mode
        self.show_tokens = show_tokens  # print the token stream of everything added

        self.env = Environment()
        self.to_exec = []  # list of (line num, source, Program) to evaluate
        self.results = []  # values of evaluated programs, most recent last

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    lines = [Session.strip_comment(line) for line in file]
            except OSError:
                raise MonkeyException(f"'{path}' could not be opened", diagnosis=False)

            self.add("\n".join(lines), 1)

        elif not cmd_line:
            raise MonkeyException("'<in>' is a reserved filename")

    @staticmethod
    def _scan(line):
        """Yields (idx, char) for every char of line that is outside a string literal."""
        in_string = escaped = False
        for idx, char in enumerate(line):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == "\"":
                    in_string = False
            elif char == "\"":
                in_string = True
            else:
                yield idx, char

    @staticmethod
    def strip_comment(line):
        """Removes a // comment (if any) and trailing whitespace from line."""
        for idx, char in Session._scan(line):
            if line.startswith(Session.COMMENT, idx):
                line = line[:idx]
                break
        return line.rstrip()

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the line without comments, and whether or not it leaves a
        bracket open (and so needs a continuation line).
        """
        line = Session.strip_comment(line)

        depth = 0
        for __, char in Session._scan(line):
            if char in Session.OPENERS:
                depth += 1
            elif char in Session.CLOSERS:
                depth -= 1

        return line, depth > 0

    def add(self, source, line_num=1):
        """Parses source and queues it for evaluation. Evaluation is delayed until run is called. Raises ParserErrors if
        source has syntax errors.
        """
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        if self.show_tokens:
            for token in tokenize(source):
                self.error_handler.log("token", repr(token))

        program = parse(source, self.error_handler)
        self.error_handler.register_step("ast", program)
        self.to_exec.append((line_num, source, program))

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates this session's queued programs against the session's environment. Will raise the first error that
        is encountered. A program ending in a let statement has no result.
        """
        while self.to_exec:
            line_num, source, program = self.to_exec.pop(0)
            self.error_handler.register_line(self.path, source, line_num)

            value = evaluate(program, self.env)
            self.error_handler.register_step("value", repr(value))

            if not program.statements or not isinstance(program.statements[-1], LetStatement):
                self.results.append(value)

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
