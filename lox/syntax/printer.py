"""Readable renderings of syntax trees. Used by `lox --ast` and handy when debugging the parser.

Format (parenthesized prefix notation):
    (* (- 123.0) (group 45.67))
    (ternary (< a b) a b)
    (block (var x 1.0) (print x))
"""

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


class AstPrinter:
    """Renders expressions and statements in parenthesized prefix form."""

    def print(self, node):
        if isinstance(node, Literal):
            return AstPrinter.literal(node.value)
        if isinstance(node, Grouping):
            return self.parenthesize("group", node.expression)
        if isinstance(node, Unary):
            return self.parenthesize(node.operator.lexeme, node.right)
        if isinstance(node, (Binary, Logical)):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, Ternary):
            return self.parenthesize("ternary", node.condition, node.then_branch, node.else_branch)
        if isinstance(node, Variable):
            return node.name.lexeme
        if isinstance(node, Assign):
            return self.parenthesize(f"= {node.name.lexeme}", node.value)
        if isinstance(node, Call):
            return self.parenthesize("call", node.callee, *node.arguments)

        if isinstance(node, Expression):
            return self.parenthesize(";", node.expression)
        if isinstance(node, Print):
            return self.parenthesize("print", node.expression)
        if isinstance(node, Var):
            if node.initializer is None:
                return f"(var {node.name.lexeme})"
            return self.parenthesize(f"var {node.name.lexeme}", node.initializer)
        if isinstance(node, Block):
            return self.parenthesize("block", *node.statements)
        if isinstance(node, If):
            if node.else_branch is None:
                return self.parenthesize("if", node.condition, node.then_branch)
            return self.parenthesize("if", node.condition, node.then_branch, node.else_branch)
        if isinstance(node, While):
            return self.parenthesize("while", node.condition, node.body)
        if isinstance(node, Function):
            params = " ".join(param.lexeme for param in node.params)
            return self.parenthesize(f"fun {node.name.lexeme} ({params})", *node.body)
        if isinstance(node, Return):
            if node.value is None:
                return "(return)"
            return self.parenthesize("return", node.value)

        raise TypeError(f"cannot print {type(node).__name__}")

    def parenthesize(self, name, *nodes):
        return f"({' '.join([name] + [self.print(node) for node in nodes])})"

    @staticmethod
    def literal(value):
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return f'"{value}"'
        return str(value)


def to_rpn(expr):
    """Renders an arithmetic expression in reverse Polish notation: (1 + 2) * (4 - 3) is "1.0 2.0 + 4.0 3.0 - *".
    Unary minus is written "~".
    """
    if isinstance(expr, (Binary, Logical)):
        return f"{to_rpn(expr.left)} {to_rpn(expr.right)} {expr.operator.lexeme}"
    if isinstance(expr, Grouping):
        return to_rpn(expr.expression)
    if isinstance(expr, Unary):
        operator = "~" if expr.operator.lexeme == "-" else expr.operator.lexeme
        return f"{to_rpn(expr.right)} {operator}"
    if isinstance(expr, Ternary):
        return f"{to_rpn(expr.condition)} {to_rpn(expr.then_branch)} {to_rpn(expr.else_branch)} ?:"
    if isinstance(expr, Literal):
        return AstPrinter.literal(expr.value)
    if isinstance(expr, Variable):
        return expr.name.lexeme

    raise TypeError(f"no reverse Polish form for {type(expr).__name__}")
