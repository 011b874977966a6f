"""Tree-walking evaluator for lox. Statements are executed directly against an explicitly passed Environment, so leaving
a scope (normally, by returning or by raising) never needs to restore anything.

Runtime values are plain Python objects:

```
nil      -> None
boolean  -> bool
number   -> float
string   -> str
function -> LoxCallable
```
"""

import math
import operator
from decimal import Decimal

from lox.lang.callable import NATIVES, LoxCallable, Returning, UserFunction
from lox.lang.environment import Environment
from lox.lang.error import (
    ArityMismatch,
    DivisionByZero,
    LoxException,
    LoxRuntimeError,
    LoxTypeError,
    NotCallable,
)
from lox.syntax.ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expression,
    Function,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Ternary,
    Unary,
    Var,
    Variable,
    While,
)
from lox.syntax.tokens import TokenType


class Interpreter:
    """Executes statements. Globals outlive a single call to interpret, so an interactive session can build on earlier
    inputs.
    """
    # operators that need two numbers
    ARITHMETIC = {
        TokenType.MINUS: operator.sub,
        TokenType.STAR: operator.mul,
        TokenType.SLASH: operator.truediv,
        TokenType.GREATER: operator.gt,
        TokenType.GREATER_EQUAL: operator.ge,
        TokenType.LESS: operator.lt,
        TokenType.LESS_EQUAL: operator.le,
    }

    def __init__(self):
        self.globals = Environment()
        for native in NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, statements, diagnostics):
        """Executes statements in order. The first runtime error is recorded in diagnostics and stops the remaining
        statements; whatever already happened stays done. Returns whether or not every statement ran.
        """
        try:
            for stmt in statements:
                self.execute(stmt, self.globals)
        except LoxRuntimeError as error:
            diagnostics.runtime_error(error)
            return False
        return True

    # ----------------------------------------------------------------------------------------------------------------
    # statements

    def execute(self, stmt, env):
        """Executes stmt in env. Returns a Returning if a `return` was executed, else None."""
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression, env)

        elif isinstance(stmt, Print):
            print(stringify(self.evaluate(stmt.expression, env)))

        elif isinstance(stmt, Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer, env)
            env.define(stmt.name.lexeme, value)

        elif isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(env))

        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition, env)):
                return self.execute(stmt.then_branch, env)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch, env)

        elif isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition, env)):
                result = self.execute(stmt.body, env)
                if result is not None:
                    return result

        elif isinstance(stmt, Function):
            env.define(stmt.name.lexeme, UserFunction(stmt, env))

        elif isinstance(stmt, Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value, env)
            return Returning(value)

        else:
            raise LoxException("unknown statement '{}'", type(stmt).__name__, internal=True)

        return None

    def execute_block(self, statements, env):
        """Executes statements in env (usually a fresh child scope), stopping early on a `return`."""
        for stmt in statements:
            result = self.execute(stmt, env)
            if result is not None:
                return result
        return None

    # ----------------------------------------------------------------------------------------------------------------
    # expressions

    def evaluate(self, expr, env):
        if isinstance(expr, Literal):
            return expr.value

        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression, env)

        if isinstance(expr, Unary):
            right = self.evaluate(expr.right, env)
            if expr.operator.type is TokenType.BANG:
                return not is_truthy(right)
            check_number_operand(expr.operator, right)
            return -right

        if isinstance(expr, Binary):
            return self.binary(expr, env)

        if isinstance(expr, Logical):
            left = self.evaluate(expr.left, env)
            if expr.operator.type is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right, env)

        if isinstance(expr, Ternary):
            if is_truthy(self.evaluate(expr.condition, env)):
                return self.evaluate(expr.then_branch, env)
            return self.evaluate(expr.else_branch, env)

        if isinstance(expr, Variable):
            return env.get(expr.name)

        if isinstance(expr, Assign):
            value = self.evaluate(expr.value, env)
            env.assign(expr.name, value)
            return value

        if isinstance(expr, Call):
            return self.call(expr, env)

        raise LoxException("unknown expression '{}'", type(expr).__name__, internal=True)

    def binary(self, expr, env):
        left = self.evaluate(expr.left, env)
        right = self.evaluate(expr.right, env)
        op = expr.operator

        if op.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op.type is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise LoxTypeError(op, "Operands must be two numbers or include a string.")

        check_number_operands(op, left, right)
        if op.type is TokenType.SLASH and right == 0.0:
            raise DivisionByZero(op)
        return Interpreter.ARITHMETIC[op.type](left, right)

    def call(self, expr, env):
        callee = self.evaluate(expr.callee, env)
        arguments = [self.evaluate(argument, env) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise NotCallable(expr.paren)
        if len(arguments) != callee.arity:
            raise ArityMismatch(expr.paren, callee.arity, len(arguments))

        return callee.call(self, arguments)


def is_number(value):
    """bool is a subclass of int, not float, so true/false never pass as numbers."""
    return isinstance(value, float)


def is_truthy(value):
    """nil and false are falsy, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Equality without coercion: values of different types are never equal (in Python, 1.0 == True)."""
    if type(left) is not type(right):
        return False
    return left == right


def check_number_operand(op, operand):
    if not is_number(operand):
        raise LoxTypeError(op, "Operand must be a number.")


def check_number_operands(op, left, right):
    if not (is_number(left) and is_number(right)):
        raise LoxTypeError(op, "Operands must be numbers.")


def stringify(value):
    """Returns the text `print` shows for value. Integral numbers lose their trailing ".0"."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = format_number(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def format_number(value):
    """Formats a number with the shortest digits that round-trip: plainly within [1e-3, 1e7), in scientific notation
    with a mantissa of at least one decimal outside it.

    ```
    1234567.0 -> 1234567.0      1e7  -> 1.0E7
    0.001     -> 0.001          1e-4 -> 1.0E-4
    inf       -> Infinity       nan  -> NaN
    ```
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0.0 or 1e-3 <= abs(value) < 1e7:
        return repr(value)

    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    exponent += len(digits) - 1
    digits = "".join(str(digit) for digit in digits).rstrip("0")

    mantissa = digits[0] + "." + (digits[1:] or "0")
    return ("-" if sign else "") + f"{mantissa}E{exponent}"
