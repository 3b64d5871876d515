"""Lexical analysis for SNL source text."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike

log = logging.getLogger(__name__)

RESERVED_WORDS = {
    word: word.upper()
    for word in (
        "program", "type", "var", "procedure", "begin", "end", "array", "of",
        "record", "if", "then", "else", "fi", "while", "do", "endwh", "read",
        "write", "return", "integer", "char",
    )
}

# The opening bracket's kind keeps its leading space, as written to token files.
DELIMITERS = {
    "+": "PLUS",
    "-": "MINUS",
    "*": "TIMES",
    "/": "OVER",
    "(": "LPAREN",
    ")": "RPAREN",
    "[": " LMIDPAREN",
    "]": "RMIDPAREN",
    ";": "SEMI",
    ".": "DOT",
    "<": "LT",
    ":": "COLON",
    "=": "EQ",
    "'": "COMMA",
    ">": "RT",
    '"': "SY",
    ",": "JSP1",
}


@dataclass(frozen=True)
class Token:
    """A token: its kind and the text it stands for."""

    kind: str
    value: str


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def tokenize(text: str) -> list[Token]:
    """Split SNL source text into tokens.

    Raises ValueError on a comment that is never closed.
    """
    tokens: list[Token] = []
    length = len(text)
    i = 0
    while i < length:
        ch = text[i]
        if _is_digit(ch):
            j = i + 1
            while j < length and _is_digit(text[j]):
                j += 1
            digits = text[i:j]
            kind = "UNDERANGE" if j < length and text[j] == "]" else "NUM"
            tokens.append(Token(kind, digits))
            i = j
        elif _is_letter(ch):
            j = i + 1
            while j < length and (_is_letter(text[j]) or _is_digit(text[j])):
                j += 1
            word = text[i:j]
            if len(word) == 1:
                tokens.append(Token("CHAR", word))
            elif word in RESERVED_WORDS:
                tokens.append(Token("reserved word", RESERVED_WORDS[word]))
            else:
                tokens.append(Token("ID", word))
            i = j
        elif ch == "{":
            close = text.find("}", i)
            if close < 0:
                raise ValueError(f"unterminated comment at position {i}")
            i = close + 1
        elif ch == ":" and text.startswith(":=", i):
            tokens.append(Token("ASSIGN", ":="))
            i += 2
        elif ch in DELIMITERS:
            tokens.append(Token(DELIMITERS[ch], ch))
            i += 1
        else:
            # Whitespace, a stray '}' and unknown characters are skipped.
            i += 1
    return tokens


def format_tokens(tokens: Iterable[Token]) -> str:
    """Render tokens as 'kind,value' lines followed by an EOF marker."""
    lines = [f"{tok.kind},{tok.value}" for tok in tokens]
    lines.append("EOF")
    return "\n".join(lines)


def parse_token_lines(lines: Iterable[str]) -> list[Token]:
    """Read tokens from 'kind,value' lines, skipping lines without a comma."""
    tokens: list[Token] = []
    for line in lines:
        line = line.removesuffix("\n")
        kind, sep, value = line.partition(",")
        if not sep:
            log.warning("skipping malformed token line: %s", line)
            continue
        tokens.append(Token(kind, value))
    return tokens


def read_token_file(path: str | PathLike[str]) -> list[Token]:
    """Load tokens from a token file."""
    with open(path, encoding="utf-8") as handle:
        return parse_token_lines(handle)