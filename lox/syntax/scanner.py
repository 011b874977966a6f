"""Lexical analysis for lox. Turns source text into a flat list of Tokens.

Scanning never fails: unexpected characters, unterminated strings and unterminated block comments are reported to the
Diagnostics collector and scanning carries on, so that the parser can still surface its own errors in the same run.

```
<comment>  ::= "//" <char>* <newline>
             | "/*" <char>* "*/"            ; no nesting, may span lines
<string>   ::= '"' <char>* '"'              ; may span lines, no escapes
<number>   ::= <digit>+ ( "." <digit>+ )?   ; no exponents, no leading "."
<ident>    ::= ( <alpha> | "_" ) ( <alpha> | <digit> | "_" )*
```
"""

from lox.syntax.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single-use scanner over source. Call scan_tokens once."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
        "?": TokenType.QUESTION,
        ":": TokenType.COLON,
    }
    # char: (token if followed by "=", token otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source, diagnostics):
        self.source = source
        self.diagnostics = diagnostics

        self.tokens = []
        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char about to be consumed
        self.line = 1
        self.line_start = 0  # offset of the first char of the current line

    def scan_tokens(self):
        """Scans all of self.source. Always ends with exactly one EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            if_equal, otherwise = Scanner.DOUBLE[char]
            self.add_token(if_equal if self.match("=") else otherwise)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            elif self.match("*"):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char == "\n":
            self.newline()
        elif char in Scanner.WHITESPACE:
            pass
        elif char == '"':
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            self.diagnostics.error(self.line, f"Unexpected character '{char}'.")

    def block_comment(self):
        """Consumes a block comment, assuming the opening "/*" has been consumed."""
        start_line = self.line

        while not (self.peek() == "*" and self.peek_next() == "/"):
            if self.is_at_end():
                self.diagnostics.error(start_line, "Unterminated block comment.")
                return
            if self.advance() == "\n":
                self.newline()

        self.current += 2  # closing "*/"

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            self.diagnostics.error(self.line, "Unterminated string.")
            return

        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        # fractional part needs at least one digit after the "."
        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def newline(self):
        """Moves to the next line, assuming its "\\n" has just been consumed."""
        self.line += 1
        self.line_start = self.current

    def match(self, expected):
        """Consumes the current char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        """Current char, or "" at end of input."""
        if self.is_at_end():
            return ""
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return ""
        return self.source[self.current + 1]

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def is_at_end(self):
        return self.current >= len(self.source)

    def add_token(self, token_type, literal=None):
        column = self.start - self.line_start
        if column < 0:
            column = None  # lexeme started on an earlier line
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line, column))

    @staticmethod
    def is_digit(char):
        """ASCII digits only."""
        return char != "" and "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return char == "_" or char.isalpha()

    @staticmethod
    def is_alphanumeric(char):
        return Scanner.is_alpha(char) or Scanner.is_digit(char)


def scan(source, diagnostics):
    """Returns the tokens of source. Errors are reported to diagnostics."""
    return Scanner(source, diagnostics).scan_tokens()
