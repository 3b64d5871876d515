"""Compiler front end for SNL: lexing, parsing, symbol tables, semantic checks and quadruples."""

__version__ = "0.1.0"