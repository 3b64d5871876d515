"""Filling the symbol table from a syntax tree and reading its listing back."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from snlc.symbols import SymbolTable, SymKind
from snlc.syntax_tree import Node

_LEVEL_LINE = re.compile(r"\s*---\s*Level\s*([+-]?\d+)")


@dataclass
class SymbolNode:
    """One identifier read from a symbol-table listing."""

    type: str
    name: str = ""
    level: int = 0


def _add_variables(node: Node, table: SymbolTable) -> None:
    for child in node.children:
        if child.type != "Deck":
            continue
        if child.upper_bound != "0" and child.lower_bound != "0":
            table.add_symbol_array(
                child.name,
                SymKind.VAR,
                child.var_type,
                int(child.lower_bound),
                int(child.upper_bound),
            )
        else:
            table.add_symbol(child.name, SymKind.VAR, child.var_type)


def _add_procedure(node: Node, table: SymbolTable) -> None:
    if not node.children:
        raise ValueError("PROCEDURE node has no heading")
    heading = node.children[0]
    if heading.name:
        table.add_symbol_proc(heading.name, SymKind.PROC, "PROCEDURE")
    table.enter_scope()
    for child in heading.children:
        if child.type == "Deck":
            table.add_symbol_param(heading.name, child.name, SymKind.PARAM, child.var_type)
        elif child.type == "VAR":
            build_symbol_table(child, table)
    for child in heading.children:
        if child.type not in ("Deck", "VAR"):
            build_symbol_table(child, table)
    table.exit_scope()


def build_symbol_table(node: Node | None, table: SymbolTable) -> None:
    """Record every declaration found under ``node`` in ``table``.

    Raises ValueError on a procedure without a heading or on array bounds
    that are not integers.
    """
    if node is None:
        return
    if node.type == "PheadK":
        if node.name:
            table.add_symbol_head(node.name, SymKind.PROC, "PROGRAM")
    elif node.type == "TYPE":
        for child in node.children:
            if child.type == "Deck":
                table.add_symbol_type(child.name, SymKind.TYPE, child.var_type)
    elif node.type == "VAR":
        _add_variables(node, table)
    elif node.type == "PROCEDURE":
        _add_procedure(node, table)
    else:
        for child in node.children:
            build_symbol_table(child, table)


def _classify(line: str) -> tuple[str, int]:
    """The kind of a listing line and the word index holding its name."""
    if "PROGRAM" in line:
        return "PROGRAM", 4
    if "PROCEDURE" in line:
        return "PROCEDURE", 8
    if "Parameter" in line:
        return "PARAMETER", 9
    if "DEFINE" in line:
        return "DEFINE", 2
    if "Array" in line:
        return "ARRAY", 9
    return "VARIABLE", 8


def parse_symbol_table(text: str) -> list[SymbolNode]:
    """Read the identifiers of a symbol-table listing, in listing order."""
    nodes: list[SymbolNode] = []
    level = 0
    for line in text.splitlines():
        if "Level" in line:
            match = _LEVEL_LINE.match(line)
            if match:
                level = int(match.group(1))
            continue
        if not line or "=====" in line:
            continue
        kind, index = _classify(line)
        words = line.split()
        name = words[index] if index < len(words) else ""
        nodes.append(SymbolNode(kind, name, level))
    return nodes


def format_parsed_symbols(nodes: Iterable[SymbolNode]) -> str:
    """Render parsed identifiers, last read first."""
    return "".join(
        f"Type: {node.type} | Name: {node.name} | Level: {node.level}\n"
        for node in reversed(list(nodes))
    )