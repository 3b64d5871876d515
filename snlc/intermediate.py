"""Quadruple generation from the textual syntax tree."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike


@dataclass(frozen=True)
class Quadruple:
    """A three-address instruction."""

    op: str
    arg1: str
    arg2: str
    result: str


def format_quadruple(quad: Quadruple) -> str:
    """Render a quadruple with each field right-aligned to width four."""
    return f"({quad.op:>4}, {quad.arg1:>4}, {quad.arg2:>4}, {quad.result:>4})"


def _last_word(lines: Iterator[str]) -> str:
    try:
        line = next(lines)
    except StopIteration:
        raise ValueError("unexpected end of syntax tree") from None
    return line.rpartition(" ")[2]


@dataclass
class QuadrupleGenerator:
    """Collects quadruples and hands out fresh temporaries and labels."""

    quads: list[Quadruple] = field(default_factory=list)
    temp_count: int = 0
    label_count: int = 0

    def new_temp(self) -> str:
        name = f"t{self.temp_count}"
        self.temp_count += 1
        return name

    def new_label(self) -> str:
        name = f"L{self.label_count}"
        self.label_count += 1
        return name

    def emit(self, op: str, arg1: str, arg2: str, result: str) -> Quadruple:
        quad = Quadruple(op, arg1, arg2, result)
        self.quads.append(quad)
        return quad

    def process_syntax_tree(self, lines: Iterable[str]) -> None:
        """Emit quadruples for the statements in a syntax tree listing.

        Raises ValueError if a statement is cut short by the end of input.
        """
        it = (line.rstrip("\r\n") for line in lines)
        for line in it:
            node = line.lstrip(" \t")
            if "StmtK READ" in node:
                self.emit("read", "-", "-", _last_word(it))
            elif "StmtK WRITE" in node:
                self.emit("write", "-", "-", _last_word(it))
            elif "StmtK AssignK" in node:
                left = _last_word(it)
                right = _last_word(it)
                self.emit("=", right, "-", left)
            elif "StmtK IF" in node:
                self._process_if(it)
            elif "StmtK CALL" in node:
                proc = _last_word(it)
                param = _last_word(it)
                self.emit("call", proc, param, "-")

    def _process_if(self, it: Iterator[str]) -> None:
        var1 = _last_word(it)
        op = _last_word(it)
        const_val = _last_word(it)

        label_true = self.new_label()
        label_false = self.new_label()
        label_end = self.new_label()

        self.emit(op, var1, const_val, label_true)
        self.emit("goto", "-", "-", label_false)

        self._process_branch(it)
        self.emit("goto", "-", "-", label_end)

        self.emit("label", "-", "-", label_false)
        self._process_branch(it)
        self.emit("label", "-", "-", label_end)

    def _process_branch(self, it: Iterator[str]) -> None:
        _last_word(it)  # the THEN / ELSE header
        left = _last_word(it)
        op1 = _last_word(it)
        op = _last_word(it)
        op2 = _last_word(it)
        temp = self.new_temp()
        self.emit(op, op1, op2, temp)
        self.emit("=", temp, "-", left)

    def format(self) -> str:
        """Render all quadruples, one per line."""
        return "".join(format_quadruple(q) + "\n" for q in self.quads)

    def write(self, path: str | PathLike[str]) -> None:
        """Write the rendered quadruples to a file."""
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(self.format())