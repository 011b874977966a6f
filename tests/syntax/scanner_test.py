import unittest

from lox.lang.error import Diagnostics
from lox.syntax.scanner import Scanner, scan
from lox.syntax.tokens import Token, TokenType


def types(source):
    return [token.type for token in scan(source, Diagnostics())]


class ScannerTestCase(unittest.TestCase):

    def test_operators(self):
        cases = {
            "(){},.-+;*?:/": [
                TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
                TokenType.STAR, TokenType.QUESTION, TokenType.COLON, TokenType.SLASH, TokenType.EOF,
            ],
            "! != = == < <= > >=": [
                TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.LESS,
                TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.EOF,
            ],
            "!==": [TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EOF],
            "<==>": [TokenType.LESS_EQUAL, TokenType.EQUAL, TokenType.GREATER, TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_keywords_and_identifiers(self):
        cases = {
            "and class else false for fun if nil or print return super this true var while": [
                TokenType.AND, TokenType.CLASS, TokenType.ELSE, TokenType.FALSE, TokenType.FOR, TokenType.FUN,
                TokenType.IF, TokenType.NIL, TokenType.OR, TokenType.PRINT, TokenType.RETURN, TokenType.SUPER,
                TokenType.THIS, TokenType.TRUE, TokenType.VAR, TokenType.WHILE, TokenType.EOF,
            ],
            "_foo foo1 orchid var_ classy": [TokenType.IDENTIFIER] * 5 + [TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_numbers(self):
        cases = {
            "123": [Token(TokenType.NUMBER, "123", 123.0, 1)],
            "1.5": [Token(TokenType.NUMBER, "1.5", 1.5, 1)],
            "1.": [Token(TokenType.NUMBER, "1", 1.0, 1), Token(TokenType.DOT, ".", None, 1)],
            ".5": [Token(TokenType.DOT, ".", None, 1), Token(TokenType.NUMBER, "5", 5.0, 1)],
            "1e3": [Token(TokenType.NUMBER, "1", 1.0, 1), Token(TokenType.IDENTIFIER, "e3", None, 1)],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, scan(case, Diagnostics())[:-1], case)

    def test_strings(self):
        diagnostics = Diagnostics()
        tokens = scan('"hello" "multi\nline"', diagnostics)

        self.assertEqual(Token(TokenType.STRING, '"hello"', "hello", 1), tokens[0])
        self.assertEqual(Token(TokenType.STRING, '"multi\nline"', "multi\nline", 2), tokens[1])
        self.assertEqual(Token(TokenType.EOF, "", None, 2), tokens[2])
        self.assertFalse(diagnostics.had_error)

    def test_comments(self):
        cases = {
            "// just a comment": ([TokenType.EOF], 1),
            "1 // one\n2": ([TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF], 2),
            "/* block */ 1": ([TokenType.NUMBER, TokenType.EOF], 1),
            "/* spans\nlines\n*/ 1": ([TokenType.NUMBER, TokenType.EOF], 3),
            "/* stars **/ 1": ([TokenType.NUMBER, TokenType.EOF], 1),
            "/**/1": ([TokenType.NUMBER, TokenType.EOF], 1),
            "/* /* not nested */ 1 */": ([TokenType.NUMBER, TokenType.STAR, TokenType.SLASH, TokenType.EOF], 1),
        }
        for case, (expected, line) in cases.items():
            diagnostics = Diagnostics()
            tokens = scan(case, diagnostics)
            self.assertEqual(expected, [token.type for token in tokens], case)
            self.assertEqual(line, tokens[-1].line, case)
            self.assertFalse(diagnostics.had_error, case)

    def test_errors(self):
        cases = {
            "@": ["[line 1] Error: Unexpected character '@'."],
            '"abc': ["[line 1] Error: Unterminated string."],
            '"a\nb': ["[line 2] Error: Unterminated string."],
            "/* abc\n": ["[line 1] Error: Unterminated block comment."],
            "1 # 2 $": ["[line 1] Error: Unexpected character '#'.", "[line 1] Error: Unexpected character '$'."],
        }
        for case, expected in cases.items():
            diagnostics = Diagnostics()
            scan(case, diagnostics)
            self.assertTrue(diagnostics.had_error, case)
            self.assertEqual(expected, [str(error) for error in diagnostics], case)

    def test_errors_do_not_stop_scanning(self):
        diagnostics = Diagnostics()
        tokens = Scanner("var @a = 1;", diagnostics).scan_tokens()

        self.assertEqual(1, len(diagnostics))
        self.assertEqual(
            [TokenType.VAR, TokenType.IDENTIFIER, TokenType.EQUAL, TokenType.NUMBER, TokenType.SEMICOLON,
             TokenType.EOF],
            [token.type for token in tokens]
        )

    def test_single_eof(self):
        should_pass = ["", "a", "a\n\n", "/* x", '"x']
        for case in should_pass:
            tokens = scan(case, Diagnostics())
            self.assertEqual(1, [token.type for token in tokens].count(TokenType.EOF), case)
            self.assertIs(TokenType.EOF, tokens[-1].type, case)

        self.assertEqual(3, scan("a\n\n", Diagnostics())[-1].line)

    def test_columns(self):
        tokens = scan("print a + a;\n  /* x\n */ b \"s\"", Diagnostics())
        self.assertEqual(
            [("print", 0), ("a", 6), ("+", 8), ("a", 10), (";", 11), ("b", 4), ("\"s\"", 6)],
            [(token.lexeme, token.column) for token in tokens[:-1]]
        )

        tokens = scan("x \"two\nlines\" y", Diagnostics())
        self.assertIsNone(tokens[1].column)
        self.assertEqual(7, tokens[2].column)

        self.assertEqual(Token(TokenType.IDENTIFIER, "a", None, 1, 0), Token(TokenType.IDENTIFIER, "a", None, 1, 5))


if __name__ == '__main__':
    unittest.main()
