"""Session control for the lox language: glues scanning, parsing and interpreting together to run lox either from a file
or from the interactive shell.
"""

from lox.lang.error import Diagnostics, ErrorHandler, ExitStatus, LoxException
from lox.lang.interpreter import Interpreter
from lox.syntax.parser import Parser
from lox.syntax.printer import AstPrinter
from lox.syntax.scanner import Scanner


class Session:
    """Governs a lox session. Every call to run is independent (its own Diagnostics) except for the globals, which the
    session's interpreter keeps between runs.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, show_ast=False):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.show_ast = show_ast  # whether or not to print parsed statements before running them

        self.interpreter = Interpreter()
        self.printer = AstPrinter()

        if self.cmd_line:
            self.error_handler.fatal = False
        elif path == Session.SH_FILE:
            raise LoxException("'{}' is a reserved filename", Session.SH_FILE, status=ExitStatus.USAGE)

    def run(self, source):
        """Scans, parses and interprets source. Diagnostics are printed through the error handler. Static errors
        prevent evaluation entirely.
        """
        diagnostics = Diagnostics()

        tokens = Scanner(source, diagnostics).scan_tokens()
        statements = Parser(tokens, diagnostics).parse()

        if diagnostics.had_error:
            self.error_handler.report(diagnostics, source, self._path_prefix())
            return ExitStatus.DATA_ERROR

        if self.show_ast:
            for stmt in statements:
                print(self.printer.print(stmt))

        self.interpreter.interpret(statements, diagnostics)

        if diagnostics.had_runtime_error:
            self.error_handler.report(diagnostics, source, self._path_prefix())
            return ExitStatus.SOFTWARE
        return ExitStatus.OK

    def run_file(self):
        """Runs the script at self.path."""
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                source = file.read()
        except OSError:
            raise LoxException("'{}' could not be opened", self.path, status=ExitStatus.NO_INPUT)

        return self.run(source)

    def _path_prefix(self):
        return None if self.path == Session.SH_FILE else self.path


def run(source, error_handler=None):
    """Runs source in a fresh session and returns its ExitStatus. Diagnostics are printed, never raised."""
    if error_handler is None:
        error_handler = ErrorHandler(fatal=False)
    return Session(error_handler, cmd_line=True).run(source)
