"""Recursive-descent parser for lox. Consumes the scanner's tokens and builds a list of statements.

Formally, the grammar (precedence from loosest to tightest) is

```
<program>     ::= <declaration>* EOF
<declaration> ::= <fun_decl> | <var_decl> | <statement>
<fun_decl>    ::= "fun" IDENTIFIER "(" <params>? ")" <block>
<var_decl>    ::= "var" IDENTIFIER ( "=" <expression> )? ";"
<statement>   ::= <expr_stmt> | <for_stmt> | <if_stmt> | <print_stmt> | <return_stmt> | <while_stmt> | <block>
<for_stmt>    ::= "for" "(" ( <var_decl> | <expr_stmt> | ";" ) <expression>? ";" <expression>? ")" <statement>
                                                        ; desugared into a while loop, see Parser.for_statement
<block>       ::= "{" <declaration>* "}"

<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <logic_or>          ; right-associative
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <ternary> ( "and" <ternary> )*
<ternary>     ::= <equality> ( "?" <expression> ":" <ternary> )?   ; right-associative
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <addition> ( ( ">" | ">=" | "<" | "<=" ) <addition> )*
<addition>    ::= <multiplication> ( ( "-" | "+" ) <multiplication> )*
<multiplication> ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" <arguments>? ")" )*
<primary>     ::= "true" | "false" | "nil" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")"
```

Parsing never raises outward. A syntax error is reported to the Diagnostics collector and unwinds (as a ParseError) to
the enclosing declaration, which synchronizes to the next statement boundary and carries on.
"""

from lox.lang.error import ParseError
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


class Parser:
    """Single-use parser over a list of tokens ending with EOF. Call parse once."""
    MAX_ARGS = 255

    # tokens that begin a declaration/statement, used to find a place to resume after an error
    SYNC_TOKENS = {
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
    }

    def __init__(self, tokens, diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics

        self.current = 0
        self.function_depth = 0  # number of function bodies enclosing the current token

    def parse(self):
        """Returns the list of successfully parsed statements. Malformed declarations are reported and left out."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ----------------------------------------------------------------------------------------------------------------
    # statements

    def declaration(self):
        """Parses a declaration. On a syntax error, synchronizes and returns None."""
        try:
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        self.function_depth += 1
        try:
            body = self.block()
        finally:
            self.function_depth -= 1

        return Function(name, tuple(params), tuple(body))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self):
        """There is no for node: `for (init; cond; incr) body` becomes `{ init; while (cond) { body; incr } }`, with
        cond defaulting to true.
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = Block((body, Expression(increment)))
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)

        if initializer is not None:
            body = Block((initializer, body))
        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()

        return If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self):
        keyword = self.previous()
        if self.function_depth == 0:
            self.error(keyword, "Can't return from top-level code.")

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")

        return While(condition, self.statement())

    def block(self):
        """Parses declarations up to the closing brace, assuming the opening brace has been consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # ----------------------------------------------------------------------------------------------------------------
    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            # reported only, parsing carries on
            self.error(equals, "Invalid assignment target.")
            return value

        return expr

    def logic_or(self):
        expr = self.logic_and()

        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)

        return expr

    def logic_and(self):
        expr = self.ternary()

        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.ternary()
            expr = Logical(expr, operator, right)

        return expr

    def ternary(self):
        expr = self.equality()

        if self.match(TokenType.QUESTION):
            then_branch = self.expression()
            self.consume(TokenType.COLON, "Expect ':' after then branch of ternary expression.")
            else_branch = self.ternary()
            return Ternary(expr, then_branch, else_branch)

        return expr

    def equality(self):
        return self.binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(
            self.addition, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def addition(self):
        return self.binary(self.multiplication, TokenType.MINUS, TokenType.PLUS)

    def multiplication(self):
        return self.binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def binary(self, operand, *types):
        """Left-associative binary operators of one precedence level. operand parses the next tighter level."""
        expr = operand()

        while self.match(*types):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)

        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return Unary(operator, self.unary())

        return self.call()

    def call(self):
        expr = self.primary()

        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)

        return expr

    def finish_call(self, callee):
        paren = self.previous()

        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # ----------------------------------------------------------------------------------------------------------------
    # helpers

    def match(self, *types):
        """Consumes the current token if it is any of types."""
        if any(self.check(token_type) for token_type in types):
            self.advance()
            return True
        return False

    def consume(self, token_type, msg):
        """Consumes and returns the current token, which must be of token_type."""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), msg)

    def check(self, token_type):
        if self.is_at_end():
            return False
        return self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def error(self, token, msg):
        """Reports msg at token and returns (does not raise) a ParseError for the caller to raise if needed."""
        self.diagnostics.token_error(token, msg)
        return ParseError(token, msg)

    def synchronize(self):
        """Discards tokens until the probable start of the next statement."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in Parser.SYNC_TOKENS:
                return
            self.advance()


def parse(tokens, diagnostics):
    """Returns the statements parsed from tokens. Errors are reported to diagnostics."""
    return Parser(tokens, diagnostics).parse()
