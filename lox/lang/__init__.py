"""Runtime for the lox language: errors, environments, callables, the interpreter and the session/shell around it."""
