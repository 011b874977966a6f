"""Scanning, parsing and printing of lox source. Nothing in here evaluates anything."""
