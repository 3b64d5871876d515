# snlc

`snlc` is a compiler front end for SNL (Small Nested Language). SNL is a small teaching language in the Pascal family. The package checks a program in these stages:

- **Lexical analysis** (`snlc.lexer`):
  - `tokenize(text)` turns source text into `Token(kind, value)` values.
  - `format_tokens` renders tokens as `kind,value` lines ending in `EOF`.
  - `parse_token_lines` and `read_token_file` read such lines back. They skip lines that have no comma.
  - A comment that is never closed raises `ValueError`.
- **Syntax analysis** (`snlc.parser`):
  - `parse_program(tokens)`, or `Parser(tokens).parse()`, returns a `ParseResult`.
  - The result holds the tree (`root`) and the indented listing of the tree (`lines` and `text`).
  - `ok` is false when the program does not end with `.`.
  - `ParseError` is raised when the tokens run out in the middle of a construct.
- **Syntax-tree listing** (`snlc.syntax_tree`):
  - `parse_syntax_tree` and `read_syntax_tree` rebuild a `Node` tree from the indented listing.
  - `format_syntax_tree` and `format_syntax_tree_branches` render that tree.
- **Symbol tables** (`snlc.symbols`, `snlc.symbol_builder`):
  - `SymbolTable` records entries level by level: the program head, types, variables, arrays, procedures and parameters.
  - `build_symbol_table(tree, table)` fills a table from a syntax tree.
  - `SymbolTable.format()` renders the table listing.
  - `parse_symbol_table` reads that listing back into `SymbolNode` values, and `format_parsed_symbols` renders them.
- **Semantic checks** (`snlc.semantic`): `analyze(tree, table, parsed_symbols)`, or the `SemanticAnalyzer` class, returns a list of messages. The messages are written in Chinese. They cover:
  - undeclared identifiers
  - duplicate definitions
  - constants whose type does not fit the other operands
  - array subscripts out of range
  - identifiers of an unexpected kind
  - assignments whose left side is a number
  - assignments whose two sides have different types
  - procedure-call arguments whose type or count does not match the parameters
  - expressions under `IF`/`WHILE` statements, reported as non-boolean conditions
- **Quadruples** (`snlc.intermediate`):
  - `QuadrupleGenerator.process_syntax_tree(lines)` emits `Quadruple` values from a syntax-tree listing. It handles `READ`, `WRITE`, assignment, `IF`/`ELSE` and `CALL` statements.
  - `format()` and `write(path)` render the quadruples one per line.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install .[test]
```

## Command line

```
snlc program.snl -o out
snlc --tokens tokens.txt -o out
snlc --tokens tokens.txt --lexer "my-lexer program.snl" -o out
```

The command reads tokens in one of two ways:

- It lexes the given source file with `tokenize` and writes `Lexical Analysis.txt`.
- With `--tokens`, it reads a token file instead.
  - `--lexer` names an external command that is run first to produce that token file.

It then writes these files into the output directory. The default directory is the current one.

- `Syntax Analysis.txt`: the indented syntax tree
- `Symbol table.txt`: the symbol-table listing, followed by the identifiers read back from it
- `Semantic Analysis.txt`: one semantic message per line

It also prints each stage to standard output. On a read error, a lexing or parsing failure, or a failing lexer command, it prints the error and exits with status 1.

The parser treats constants as constants only when their tokens have the kinds `INTC` and `CHARC`. `tokenize` emits `NUM` and `CHAR` instead. With those tokens, numbers are listed as identifiers, and a statement that starts with a one-letter name is skipped. For full constant checking, supply a token file that uses `INTC`/`CHARC`.

## Library use

```python
from snlc.lexer import tokenize, format_tokens
from snlc.parser import parse_program

source = """
program p
var integer v1;
begin
  read(v1);
  write(v1)
end.
"""

tokens = tokenize(source)
print(format_tokens(tokens))

result = parse_program(tokens)
print(result.ok)
print(result.text)
```

`snlc.cli.run_pipeline(tokens, output_dir)` runs parsing, symbol-table building and semantic checks. It writes the three analysis files and returns a `CompilationResult`.

## What it does not do

`snlc` stops at analysis:

- It does not generate target code.
- It produces no runnable program.
- The `snlc` command does not emit quadruples. They are available only through `QuadrupleGenerator` in the library.

## Tests

```
pytest
```