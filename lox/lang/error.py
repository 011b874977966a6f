"""Error handling for the lox language. There are two kinds of lox errors:

- static errors, found by the scanner and the parser. They are never raised out of those stages: they are recorded in a
  Diagnostics collector (one per run) and a run with any static error is never evaluated.
- runtime errors (LoxRuntimeError and subclasses), raised by the interpreter, propagated unchanged up to
  Interpreter.interpret and recorded there.

Only LoxExceptions should be encountered while running: if another type of error makes it all the way to ErrorHandler,
it is assumed to be an internal issue.
"""

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from termcolor import colored

from lox.syntax.tokens import TokenType


class ExitStatus(IntEnum):
    """Process exit statuses, borrowed from sysexits.h."""
    OK = 0
    USAGE = 64
    DATA_ERROR = 65  # static (scan/parse) errors
    NO_INPUT = 66    # script could not be read
    SOFTWARE = 70    # runtime errors


class LoxException(Exception):
    """Templates an error message so that it can be thrown as a lox error. exprs are formatted into msg, token is the
    offending token (if any) and is used for line reporting.
    """

    def __init__(self, msg, exprs=None, token=None, internal=False, status=ExitStatus.SOFTWARE):
        if exprs is None:
            exprs = ()
        if isinstance(exprs, str):
            exprs = (exprs,)

        self.msg = msg.format(*exprs)
        self.token = token
        self.internal = internal
        self.status = status

        super().__init__(self.msg)


class ParseError(LoxException):
    """Unwinds the parser to the enclosing declaration. Already reported by the time it is raised."""

    def __init__(self, token, msg):
        super().__init__("{}", msg, token=token, status=ExitStatus.DATA_ERROR)


class LoxRuntimeError(LoxException):
    """Superclass of all errors raised while evaluating. Always carries the offending token."""

    def __init__(self, token, msg, exprs=None):
        super().__init__(msg, exprs, token=token)


class UndefinedVariable(LoxRuntimeError):

    def __init__(self, name):
        super().__init__(name, "Undefined variable '{}'.", name.lexeme)


class LoxTypeError(LoxRuntimeError):
    """Operand(s) of the wrong runtime type."""


class DivisionByZero(LoxRuntimeError):

    def __init__(self, operator):
        super().__init__(operator, "Division by zero.")


class ArityMismatch(LoxRuntimeError):

    def __init__(self, paren, expected, got):
        self.expected = expected
        self.got = got
        super().__init__(paren, "Expected {} arguments but got {}.", (expected, got))


class NotCallable(LoxRuntimeError):

    def __init__(self, paren):
        super().__init__(paren, "Can only call functions.")


@dataclass(frozen=True)
class Diagnostic:
    """A single reported error. where is "", " at end" or " at '<lexeme>'"."""
    line: int
    where: str
    msg: str
    lexeme: str = ""
    runtime: bool = False
    column: Optional[int] = None

    def __str__(self):
        if self.runtime:
            return f"[line {self.line}] runtime error: {self.msg}"
        return f"[line {self.line}] Error{self.where}: {self.msg}"


class Diagnostics:
    """Collects the errors of a single run. Threaded through the scanner, parser and interpreter instead of a global
    flag, so a fresh run (ex: the next shell input) always starts clean.
    """

    def __init__(self):
        self.errors = []

    @property
    def had_error(self):
        """Whether or not a static error was reported."""
        return any(not error.runtime for error in self.errors)

    @property
    def had_runtime_error(self):
        return any(error.runtime for error in self.errors)

    def error(self, line, msg):
        """Reports an error that can only be pinned to a line (scanner errors)."""
        self.errors.append(Diagnostic(line, "", msg))

    def token_error(self, token, msg):
        """Reports an error at token (parser errors)."""
        if token.type is TokenType.EOF:
            self.errors.append(Diagnostic(token.line, " at end", msg))
        else:
            self.errors.append(Diagnostic(token.line, f" at '{token.lexeme}'", msg, token.lexeme, column=token.column))

    def runtime_error(self, error):
        """Records a LoxRuntimeError caught at the top level."""
        self.errors.append(Diagnostic(
            error.token.line, "", error.msg, error.token.lexeme, runtime=True, column=error.token.column
        ))

    def __iter__(self):
        return iter(self.errors)

    def __len__(self):
        return len(self.errors)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print lox errors instead."""
    ERROR = "red"

    def __init__(self, fatal=True, color=True):
        self.fatal = fatal
        self.color = color

    def colored(self, text, color=None, attrs=None):
        return colored(text, color, attrs=attrs, no_color=not self.color)

    def diagnose(self, line, lexeme, column=None):
        """Returns line with lexeme highlighted and underlined, or None if lexeme is not in line. The occurrence at
        column is used when it matches, the first occurrence otherwise.
        """
        if not lexeme or lexeme not in line:
            return None

        if column is not None and line[column:column + len(lexeme)] == lexeme:
            start = column
        else:
            start = line.index(lexeme)
        end = start + len(lexeme)

        diagnosis = "    " + line[:start]
        diagnosis += self.colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "    " + " " * start
        diagnosis += self.colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def report(self, diagnostics, source="", path=None):
        """Prints every diagnostic in diagnostics, followed by the offending source line when it can be found."""
        lines = source.splitlines()

        for error in diagnostics:
            error_msg = ""
            if path is not None:
                error_msg += self.colored(f"{path}:", attrs=["bold"])
            error_msg += self.colored(f"[line {error.line}] ", attrs=["bold"])

            if error.runtime:
                error_msg += self.colored("runtime error: ", ErrorHandler.ERROR, attrs=["bold"])
            else:
                error_msg += self.colored(f"Error{error.where}: ", ErrorHandler.ERROR, attrs=["bold"])
            print(error_msg + error.msg)

            if 0 < error.line <= len(lines):
                diagnosis = self.diagnose(lines[error.line - 1], error.lexeme, error.column)
                if diagnosis:
                    print(diagnosis)

    def throw(self, error):
        """Prints error (a LoxException) and exits with its status if this handler is fatal."""
        error_msg = ""
        if error.internal:
            error_msg += self.colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        if error.token is not None:
            error_msg += self.colored(f"[line {error.token.line}] ", attrs=["bold"])

        error_msg += self.colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if self.fatal:
            sys.exit(error.status)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LoxException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LoxException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, LoxException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LoxException("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            do_exit = True

        return not do_exit
