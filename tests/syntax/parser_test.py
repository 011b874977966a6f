import unittest

from lox.lang.error import Diagnostics
from lox.syntax.ast import Assign, Call, Expression, Literal, Return, Variable, While
from lox.syntax.parser import Parser, parse
from lox.syntax.printer import AstPrinter
from lox.syntax.scanner import scan


def parse_source(source):
    diagnostics = Diagnostics()
    statements = parse(scan(source, diagnostics), diagnostics)
    return statements, diagnostics


def render(source):
    statements, diagnostics = parse_source(source)
    assert not diagnostics.had_error, [str(error) for error in diagnostics]
    printer = AstPrinter()
    return " ".join(printer.print(stmt) for stmt in statements)


class ExpressionTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3;": "(; (+ 1.0 (* 2.0 3.0)))",
            "(1 + 2) * 3;": "(; (* (group (+ 1.0 2.0)) 3.0))",
            "1 - 2 - 3;": "(; (- (- 1.0 2.0) 3.0))",
            "1 < 2 == true;": "(; (== (< 1.0 2.0) true))",
            "-1 - -2;": "(; (- (- 1.0) (- 2.0)))",
            "!!true;": "(; (! (! true)))",
            "a or b and c;": "(; (or a (and b c)))",
            "a and b or c;": "(; (or (and a b) c))",
            "a and b ? c : d;": "(; (and a (ternary b c d)))",
            "a == b ? c : d;": "(; (ternary (== a b) c d))",
            "nil;": "(; nil)",
            '"str";': '(; "str")',
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_right_associative(self):
        cases = {
            "a = b = c;": "(; (= a (= b c)))",
            "a ? b : c ? d : e;": "(; (ternary a b (ternary c d e)))",
            "a ? b = 1 : c;": "(; (ternary a (= b 1.0) c))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_calls(self):
        cases = {
            "f();": "(; (call f))",
            "f(1, a + b);": "(; (call f 1.0 (+ a b)))",
            "f(1)(2, 3);": "(; (call (call f 1.0) 2.0 3.0))",
            "-f();": "(; (- (call f)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_call_keeps_opening_paren(self):
        statements, __ = parse_source("f\n(1);")
        call = statements[0].expression

        self.assertIsInstance(call, Call)
        self.assertEqual("(", call.paren.lexeme)
        self.assertEqual(2, call.paren.line)
        self.assertEqual((Literal(1.0),), call.arguments)

    def test_assign(self):
        statements, __ = parse_source("x = 1;")
        assign = statements[0].expression

        self.assertIsInstance(assign, Assign)
        self.assertEqual("x", assign.name.lexeme)
        self.assertEqual(Literal(1.0), assign.value)


class StatementTestCase(unittest.TestCase):

    def test_statements(self):
        cases = {
            "print 1;": "(print 1.0)",
            "var x;": "(var x)",
            'var x = "s";': '(var x "s")',
            "{ var x = 1; print x; }": "(block (var x 1.0) (print x))",
            "{}": "(block)",
            "if (a) print 1;": "(if a (print 1.0))",
            "if (a) print 1; else print 2;": "(if a (print 1.0) (print 2.0))",
            "if (a) if (b) print 1; else print 2;": "(if a (if b (print 1.0) (print 2.0)))",
            "while (a) {}": "(while a (block))",
            "fun add(a, b) { return a + b; }": "(fun add (a b) (return (+ a b)))",
            "fun f() { return; }": "(fun f () (return))",
            "fun f() { fun g() {} return g; }": "(fun f () (fun g ()) (return g))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_for_desugaring(self):
        cases = {
            "for (var i = 0; i < 3; i = i + 1) print i;":
                "(block (var i 0.0) (while (< i 3.0) (block (print i) (; (= i (+ i 1.0))))))",
            "for (i = 0; i < 3;) print i;": "(block (; (= i 0.0)) (while (< i 3.0) (print i)))",
            "for (; i < 3; i = i + 1) print i;": "(while (< i 3.0) (block (print i) (; (= i (+ i 1.0)))))",
            "for (;;) print 1;": "(while true (print 1.0))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

        statements, __ = parse_source("for (;;) {}")
        self.assertIsInstance(statements[0], While)
        self.assertEqual(Literal(True), statements[0].condition)

    def test_return_keeps_keyword(self):
        statements, __ = parse_source("fun f() {\n return 1;\n}")
        ret = statements[0].body[0]

        self.assertIsInstance(ret, Return)
        self.assertEqual(2, ret.keyword.line)


class ErrorTestCase(unittest.TestCase):

    def test_errors(self):
        cases = {
            "print 1": ["[line 1] Error at end: Expect ';' after value."],
            "(1 + 2;": ["[line 1] Error at ';': Expect ')' after expression."],
            "var 1 = 2;": ["[line 1] Error at '1': Expect variable name."],
            "{ var a = 1;": ["[line 1] Error at end: Expect '}' after block."],
            "a ? b;": ["[line 1] Error at ';': Expect ':' after then branch of ternary expression."],
            "1 = 2;": ["[line 1] Error at '=': Invalid assignment target."],
            "a + b = c;": ["[line 1] Error at '=': Invalid assignment target."],
            "return 1;": ["[line 1] Error at 'return': Can't return from top-level code."],
            "fun (a) {}": ["[line 1] Error at '(': Expect function name."],
            "fun f(a, 1) {}": ["[line 1] Error at '1': Expect parameter name."],
            "fun f() print 1;": ["[line 1] Error at 'print': Expect '{' before function body."],
            "f(1;": ["[line 1] Error at ';': Expect ')' after arguments."],
            "if a) print 1;": ["[line 1] Error at 'a': Expect '(' after 'if'."],
            "while (a print 1;": ["[line 1] Error at 'print': Expect ')' after condition."],
            "for (var i = 0; i < 1 print i;": ["[line 1] Error at 'print': Expect ';' after loop condition."],
            "\n\n;": ["[line 3] Error at ';': Expect expression."],
        }
        for case, expected in cases.items():
            __, diagnostics = parse_source(case)
            self.assertTrue(diagnostics.had_error, case)
            self.assertEqual(expected, [str(error) for error in diagnostics], case)

    def test_invalid_assignment_target_keeps_value(self):
        statements, diagnostics = parse_source("1 = 2;")

        self.assertTrue(diagnostics.had_error)
        self.assertEqual([Expression(Literal(2.0))], statements)

    def test_synchronize(self):
        statements, diagnostics = parse_source("var = 1; print 2; var 3; print 4;")

        self.assertEqual(2, len(diagnostics))
        self.assertEqual("(print 2.0) (print 4.0)", " ".join(AstPrinter().print(stmt) for stmt in statements))

    def test_synchronize_inside_block(self):
        statements, diagnostics = parse_source("{ print ; print 1; }\nprint 2;")

        self.assertEqual(["[line 1] Error at ';': Expect expression."], [str(error) for error in diagnostics])
        self.assertEqual("(block (print 1.0)) (print 2.0)", " ".join(AstPrinter().print(stmt) for stmt in statements))

    def test_return_inside_function_is_fine(self):
        should_pass = ["fun f() { return; }", "fun f() { if (true) { return 1; } }", "fun f() { fun g() { return; } }"]
        for case in should_pass:
            __, diagnostics = parse_source(case)
            self.assertFalse(diagnostics.had_error, case)

        __, diagnostics = parse_source("fun f() {} return;")
        self.assertTrue(diagnostics.had_error)

    def test_too_many_arguments(self):
        args = ", ".join(["1"] * (Parser.MAX_ARGS + 1))
        statements, diagnostics = parse_source(f"f({args});")

        self.assertEqual(["[line 1] Error at '1': Can't have more than 255 arguments."], [str(e) for e in diagnostics])
        self.assertEqual(Parser.MAX_ARGS + 1, len(statements[0].expression.arguments))

    def test_never_raises(self):
        should_pass = ["", ")", "}", "{", "fun", "var", "for (", "print print print", "1 +", "class A {}", "this.x;"]
        for case in should_pass:
            statements, diagnostics = parse_source(case)
            self.assertIsInstance(statements, list, case)

    def test_variable(self):
        statements, __ = parse_source("x;")
        self.assertEqual(Variable, type(statements[0].expression))


if __name__ == '__main__':
    unittest.main()
