"""Handles interactive/command-line mode for the Monkey interpreter. Uses cmd as backend."""

import cmd

from monkey.lang.objects import inspect


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    intro = "Monkey interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations
    COMMANDS = ("env", "help", "exit")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0
        self.start_line_num = 0  # line a continued input began on

    def parseline(self, line):
        """A line is a shell command only if it is exactly a command word that is not bound in the environment, and is
        not part of a continued input. Anything else is Monkey source.
        """
        command, arg, line = super().parseline(line)
        if command == "EOF":
            return command, arg, line
        elif command in Shell.COMMANDS and not arg and not self._tmp_line and command not in self.sess.env:
            return command, arg, line
        return None, None, line

    def default(self, line):
        """Executes arbitrary Monkey source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self.start_line_num = self.line_num
            else:
                line = self._tmp_line + "\n" + line
            line, add_to_prev = self.sess.preprocess_line(line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not line:
                return  # only a comment

            self.sess.add(line, self.start_line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_env(self, arg):
        """Lists the bindings of the global environment."""
        for name, value in self.sess.env:
            print(f"{name} = {inspect(value)}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Monkey interpreter!\n\n"
              "Monkey is a small expression-oriented language: integers, booleans, strings, arrays,\n"
              "hashes, first-class functions and closures.\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b };'. This will bind a function to\n"
              "the name 'add'. Next, try typing 'add(1, 2)'. This will give '3' as the result.\n"
              "Type 'env' to list bindings and 'exit' to quit.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
