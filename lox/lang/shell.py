"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.lang.error import Diagnostics
from lox.syntax.scanner import scan
from lox.syntax.tokens import TokenType


class Shell(cmd.Cmd):
    """lox interpreter shell."""
    intro = "lox interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def needs_continuation(source):
        """Whether or not source has unclosed braces or parentheses. Strings and comments are skipped by the scanner."""
        types = [token.type for token in scan(source, Diagnostics())]
        return (types.count(TokenType.LEFT_BRACE) > types.count(TokenType.RIGHT_BRACE)
                or types.count(TokenType.LEFT_PAREN) > types.count(TokenType.RIGHT_PAREN))

    def default(self, line):
        """Executes arbitrary lox code, waiting for more lines while braces/parentheses are open."""
        source = self._tmp_line + line

        if Shell.needs_continuation(source):
            self._tmp_line = source + "\n"
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.run(source)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")

        print("Welcome to the lox interpreter!\n\n"
              "lox is a small dynamically-typed scripting language with first-class functions \n"
              "and closures. Statements end with ';' and blocks can span several lines.\n\n"
              "Try it out by typing 'var greeting = \"hello\";', then 'print greeting + \" world\";'.\n"
              "Functions are declared with 'fun add(a, b) { return a + b; }'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        if self._tmp_line:
            self._tmp_line += "\n"
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter. Anything after 'exit' is treated as lox code (ex: 'exit = 1;')."""
        if arg:
            return self.default(f"exit {arg}")
        return True
