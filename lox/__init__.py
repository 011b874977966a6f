"""Tree-walking interpreter for lox, a small dynamically-typed scripting language.

For reference:
- `lox.syntax`: everything that turns source text into a syntax tree (tokens, scanner, AST, parser, printer)
- `lox.lang`: everything that runs a syntax tree (environments, callables, interpreter) plus session/shell glue

Basic program flow:
    1. Scanner: produces a flat list of tokens, reporting unexpected characters instead of raising
    2. Parser: recursive descent over the tokens, producing a list of statements
        - syntax errors are reported and the parser resumes at the next statement
        - for the grammar, see lox/syntax/parser.py
    3. Interpreter: walks the statements directly, no resolution pass and no bytecode

"""
