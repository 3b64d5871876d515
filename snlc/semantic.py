"""Semantic checks over a syntax tree, backed by the symbol table."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from snlc.symbol_builder import SymbolNode
from snlc.symbols import SymbolEntry, SymbolTable
from snlc.syntax_tree import Node

_BASIC_TYPES = frozenset({"INTEGER", "FLOAT", "DOUBLE", "CHAR"})
_NOT_IDENT = frozenset({"const", "OP", "[", "]"})
_NOT_OPERAND = _NOT_IDENT | {"THEN", "ELSE"}
_BOOL_OPERATORS = frozenset({"<", ">", "&&", "||", "!"})


def is_number(text: str) -> bool:
    """True for a non-empty string made only of ASCII digits."""
    return bool(text) and all("0" <= ch <= "9" for ch in text)


def is_strict_bool(node: Node | None, table: SymbolTable) -> bool:
    """Whether an expression node is certainly of boolean type."""
    if node is None:
        return False
    if node.name in ("true", "false"):
        return True
    entry = table.find_entry(node.name, "one")
    if entry is not None:
        return entry.type_name == "bool"
    return node.var_type in _BOOL_OPERATORS


def _const_fits(const_type: str, type_name: str) -> bool:
    return (const_type == "INTC" and type_name == "INTEGER") or (
        const_type == "CHARC" and type_name == "CHAR"
    )


def _is_array(entry: SymbolEntry) -> bool:
    return entry.lower != 0 and entry.upper != 0


class SemanticAnalyzer:
    """Walks a syntax tree and collects semantic error messages."""

    def __init__(
        self, table: SymbolTable, parsed_symbols: Iterable[SymbolNode] = ()
    ) -> None:
        self.table = table
        self.parsed_symbols = list(parsed_symbols)
        self.messages: list[str] = []
        self._params: list[list[str]] = []
        self._enter_depth = 0
        self._in_assign = False
        self._in_call = False
        self._in_condition = False

    def analyze(self, tree: Node | None) -> list[str]:
        """Check ``tree`` and return the messages, in the order found.

        Raises ValueError when an array is used without an integer subscript.
        """
        self.messages = []
        if tree is None:
            return self.messages
        self._report_duplicates()
        self._params = self.table.procedure_params()
        self._enter_depth = 0
        self._in_assign = self._in_call = self._in_condition = False
        self.table.set_level(0)
        self._visit(tree, 0, 0)
        return self.messages

    # -- helpers ------------------------------------------------------

    def _report(self, message: str) -> None:
        self.messages.append(message)

    def _resolve(self, name: str) -> SymbolEntry | None:
        entry = self.table.find_entry(name, "one") or self.table.find_entry(name, "up")
        if entry is None:
            self._report(f"{name} 标识符未声明")
        return entry

    def _params_of(self, proc_name: str) -> list[str] | None:
        return next((g for g in self._params if g and g[-1] == proc_name), None)

    def _report_duplicates(self) -> None:
        counts = Counter(symbol.name for symbol in self.parsed_symbols)
        reported: set[str] = set()
        for symbol in reversed(self.parsed_symbols):
            if counts[symbol.name] > 1 and symbol.name not in reported:
                self._report(f"{symbol.name} 标识符重复定义")
                reported.add(symbol.name)

    # -- traversal ----------------------------------------------------

    def _visit(self, node: Node, depth: int, index: int) -> None:
        if self._enter_depth and depth == self._enter_depth:
            self._enter_depth = 0
            self.table.set_level(self.table.current_level - 1)
        if node.type == "PROCEDURE":
            self._enter_depth = depth
            self.table.set_level(self.table.current_level + 1)
        if node.type == "StmtK":
            self._in_assign = node.name in ("AssignK", "THEN", "ELSE")
            self._in_call = node.name == "CALL"
            self._in_condition = node.name in ("IF", "WHILE")
        if node.type == "ExpK":
            self._check_expression(node, index)
        for position, child in enumerate(node.children):
            self._visit(child, depth + 1, position)

    def _check_expression(self, node: Node, index: int) -> None:
        entry = None
        if node.name not in _NOT_IDENT and not is_number(node.var_type):
            entry = self._resolve(node.name)
        if node.name == "const":
            self._check_constant(node, index)
        if entry is not None:
            self._check_kind(node, entry, index)
        parent = node.parent
        if self._in_assign and parent is not None and parent.name == "AssignK":
            self._check_assignment(parent)
        if self._in_call and parent is not None and parent.name == "CALL":
            self._check_call(parent)
        if self._in_condition:
            owner = parent.name if parent is not None else ""
            self._report(f"{owner} 条件表达式条件部分不是bool类型")

    # -- individual checks --------------------------------------------

    def _check_constant(self, node: Node, index: int) -> None:
        parent = node.parent
        if parent is None:
            return
        siblings = parent.children
        position = next(
            (
                i
                for i in range(index, len(siblings))
                if siblings[i].name == "const" and siblings[i].var_type == node.var_type
            ),
            len(siblings),
        )
        if len(siblings) >= 3 and position > 0 and siblings[position - 1].name == "[":
            return  # an array subscript
        for k, other in enumerate(siblings):
            if k == position:
                continue
            other_entry = None
            if other.name not in _NOT_OPERAND and not is_number(other.name):
                other_entry = self._resolve(other.name)
            if other_entry is None or _const_fits(node.const_type, other_entry.type_name):
                continue
            if not _is_array(other_entry) or not _const_fits(
                node.const_type, other_entry.name
            ):
                self._report(
                    f"{node.const_type} {node.var_type} 和 {other.name} "
                    "表达式中运算符的分量的类型不相容"
                )

    def _check_bounds(self, node: Node, entry: SymbolEntry, index: int) -> None:
        parent = node.parent
        subscript_at = index + 2
        if parent is None or subscript_at >= len(parent.children):
            raise ValueError(f"array '{node.name}' is used without a subscript")
        raw = parent.children[subscript_at].var_type
        try:
            subscript = int(raw)
        except ValueError:
            raise ValueError(
                f"subscript of array '{node.name}' is not an integer: {raw!r}"
            ) from None
        if subscript <= entry.lower or subscript >= entry.upper:
            self._report(
                f"{node.name} 数组类型下标越界错误     下标范围{entry.lower} ~ {entry.upper}"
            )

    def _check_kind(self, node: Node, entry: SymbolEntry, index: int) -> None:
        parent = node.parent
        actual = entry.type_name
        if _is_array(entry):
            self._check_bounds(node, entry, index)

        expected = ""
        if parent is not None and parent.name == "CALL":
            expected = "PROCEDURE"
        elif parent is not None and parent.type == "AssignK":
            if actual not in _BASIC_TYPES:
                expected = "variable"
        elif parent is not None and parent.name == "TypeK":
            expected = "type"

        def report(kind: str) -> None:
            self._report(f"{node.name} 标识符为非期望的标识符类别(期望: {kind}, 实际: {actual})")

        if expected == "PROCEDURE" and parent is not None:
            if parent.children[0] is node:
                if actual != "PROCEDURE":
                    report("PROCEDURE")
            elif actual not in _BASIC_TYPES:
                report("PARAMETER")
        elif expected and actual != expected:
            report(expected)

    def _check_assignment(self, stmt: Node) -> None:
        target = stmt.children[0]
        if is_number(target.var_type) and len(stmt.children) >= 2:
            self._report(
                f"{target.var_type} :={stmt.children[1].name} 赋值语句左端不是变量标识符 "
            )
        target_entry = None
        if target.name not in _NOT_IDENT and not is_number(target.var_type):
            target_entry = self._resolve(target.name)
        for other in stmt.children[1:]:
            other_entry = None
            if other.name not in _NOT_IDENT and not is_number(other.name):
                other_entry = self._resolve(other.name)
            if (
                target_entry is not None
                and other_entry is not None
                and target_entry.type_name != other_entry.type_name
            ):
                self._report(f"{target.name} 和 {other.name} 赋值语句的左右两边类型不相容")

    def _check_call(self, stmt: Node) -> None:
        callee = stmt.children[0]
        callee_entry = None
        if callee.name not in _NOT_IDENT and not is_number(callee.var_type):
            callee_entry = self._resolve(callee.name)
        arg_entry = None
        for k, arg in enumerate(stmt.children[1:], start=1):
            if arg.name not in _NOT_IDENT and not is_number(arg.var_type):
                found = self._resolve(arg.name)
                if found is not None:
                    arg_entry = found
            if callee_entry is None or arg_entry is None:
                continue
            params = self._params_of(callee.name)
            if params is None:
                break
            param_index = len(params) - 1 - k
            if not 0 <= param_index < len(params):
                self._report("实参个数与形参个数不匹配")
                break
            if params[param_index] != arg_entry.type_name:
                self._report(f"过程调用 {callee.name} 中的实参 {arg.name} 类型与形参类型不匹配")


def analyze(
    tree: Node | None, table: SymbolTable, parsed_symbols: Iterable[SymbolNode] = ()
) -> list[str]:
    """Run every semantic check over ``tree`` and return the messages."""
    return SemanticAnalyzer(table, parsed_symbols).analyze(tree)