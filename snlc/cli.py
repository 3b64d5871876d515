"""Command-line driver running the front end of the SNL compiler."""

from __future__ import annotations

import argparse
import shlex
import subprocess
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from snlc.lexer import Token, format_tokens, read_token_file, tokenize
from snlc.parser import ParseError, ParseResult, parse_program
from snlc.semantic import analyze
from snlc.symbol_builder import (
    SymbolNode,
    build_symbol_table,
    format_parsed_symbols,
    parse_symbol_table,
)
from snlc.symbols import SymbolTable
from snlc.syntax_tree import Node, parse_syntax_tree

LEXICAL_FILE = "Lexical Analysis.txt"
SYNTAX_FILE = "Syntax Analysis.txt"
SYMBOL_TABLE_FILE = "Symbol table.txt"
SEMANTIC_FILE = "Semantic Analysis.txt"


@dataclass
class CompilationResult:
    """Everything the front end produced for one program."""

    tokens: list[Token]
    parse: ParseResult
    tree: Node | None
    symbols: SymbolTable
    parsed_symbols: list[SymbolNode]
    messages: list[str]

    @property
    def ok(self) -> bool:
        """Whether the program parsed as a complete program."""
        return self.parse.ok


def _write(path: Path, text: str) -> None:
    path.write_text(text, encoding="utf-8")


def run_pipeline(
    tokens: Iterable[Token], output_dir: str | PathLike[str]
) -> CompilationResult:
    """Parse, build the symbol table and check a token sequence.

    Writes the syntax listing, symbol table and semantic messages into
    ``output_dir``. Raises ParseError when the tokens end mid-construct.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    token_list = list(tokens)

    parse = parse_program(token_list)
    _write(out / SYNTAX_FILE, parse.text)

    tree = parse_syntax_tree(parse.text)
    table = SymbolTable()
    build_symbol_table(tree, table)
    listing = table.format()
    parsed = parse_symbol_table(listing)
    _write(out / SYMBOL_TABLE_FILE, listing + format_parsed_symbols(parsed))

    messages = analyze(tree, table, parsed)
    _write(out / SEMANTIC_FILE, "".join(message + "\n" for message in messages))

    return CompilationResult(token_list, parse, tree, table, parsed, messages)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snlc", description="Check an SNL program and write the analysis files."
    )
    parser.add_argument("source", nargs="?", help="SNL source file")
    parser.add_argument("--tokens", help="read tokens from this file instead of lexing")
    parser.add_argument(
        "--lexer", help="external lexer command that writes the --tokens file"
    )
    parser.add_argument(
        "-o", "--output-dir", default=".", help="directory for the analysis files"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.lexer and not args.tokens:
        parser.error("--lexer needs --tokens to name the file it writes")
    if not args.source and not args.tokens:
        parser.error("a source file or --tokens is required")

    out = Path(args.output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
        text = ""
        if args.source:
            text = Path(args.source).read_text(encoding="utf-8")
            print(text)
        if args.lexer:
            subprocess.run(shlex.split(args.lexer), check=True)
        if args.tokens:
            tokens = read_token_file(args.tokens)
        else:
            tokens = tokenize(text)
            _write(out / LEXICAL_FILE, format_tokens(tokens))
        print(f"Loaded {len(tokens)} tokens")
        result = run_pipeline(tokens, out)
    except (OSError, subprocess.CalledProcessError, ParseError, ValueError) as exc:
        print(f"snlc: {exc}", file=sys.stderr)
        return 1

    print(result.parse.text, end="")
    if result.ok:
        print(f"Syntax tree written to {out / SYNTAX_FILE}")
    else:
        print("Syntax error: the program does not end with '.'")
    print("Symbol Table:")
    print(result.symbols.format(), end="")
    print(f"Symbol table written to {out / SYMBOL_TABLE_FILE}")
    print("Semantic Analysis Results:")
    for message in result.messages:
        print(message)
    print(f"Semantic messages written to {out / SEMANTIC_FILE}")
    return 0