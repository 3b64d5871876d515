"""Recursive-descent parser producing a syntax tree and its indented listing."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from snlc.lexer import Token

_INDENT = "    "
_ARITHMETIC = frozenset({"PLUS", "MINUS", "TIMES", "OVER"})
_COMPARISON = frozenset({"LT", "RT"})
_ASSIGN_SKIPPED = frozenset({"JSP1", "ASSIGN", "EQ", "LPAREN", "RPAREN", "SY", "COMMA"})
_PARENS = frozenset({"LPAREN", "RPAREN"})


class ParseError(Exception):
    """Raised when the token stream cannot be parsed."""


@dataclass(eq=False)
class TreeNode:
    """A node of the syntax tree."""

    nodekind: str = ""
    value: str = ""
    dec: str = ""
    stmt: str = ""
    exp: str = ""
    ids: list[str] = field(default_factory=list)
    children: list[TreeNode | None] = field(default_factory=list)
    sibling: TreeNode | None = None


@dataclass
class ParseResult:
    """The tree (None when the program does not end in '.') and its listing."""

    root: TreeNode | None
    lines: list[str]

    @property
    def ok(self) -> bool:
        return self.root is not None

    @property
    def text(self) -> str:
        return "".join(line + "\n" for line in self.lines)


class Parser:
    """Parses a token sequence into a syntax tree and an indented listing."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        self._pos = 0
        self._depth = 0
        self._lines: list[str] = []

    # -- token access -------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = self._pos + offset
        if index >= len(self.tokens):
            raise ParseError(f"unexpected end of input at token {index}")
        return self.tokens[index]

    @property
    def _kind(self) -> str:
        return self._peek().kind

    @property
    def _value(self) -> str:
        return self._peek().value

    def _advance(self, count: int = 1) -> None:
        self._pos += count

    # -- listing ------------------------------------------------------

    def _line(self, text: str) -> None:
        self._lines.append(_INDENT * max(self._depth, 0) + text)

    @contextmanager
    def _indent(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    # -- grammar ------------------------------------------------------

    def parse(self) -> ParseResult:
        """Parse the whole program.

        Raises ParseError if the tokens run out in the middle of a construct.
        """
        self._pos = 0
        self._depth = 0
        self._lines = ["Prok"]
        root = TreeNode(nodekind="Prok")
        root.children = [self._program_head(), self._declare_head(), self._body()]
        ends_with_dot = self._pos < len(self.tokens) and self.tokens[self._pos].kind == "DOT"
        return ParseResult(root if ends_with_dot else None, list(self._lines))

    def _program_head(self) -> TreeNode | None:
        if self._value != "PROGRAM":
            return None
        self._advance()
        name = self._value
        with self._indent():
            self._line(f"PheadK {name}")
        self._advance()
        return TreeNode(nodekind="PheadK", value=name)

    def _declare_head(self) -> TreeNode:
        type_part = self._type_dec()
        var_part = self._var_dec()
        proc_part = self._proc_dec()
        proc_node = TreeNode(nodekind="Proc", children=[proc_part])
        var_node = TreeNode(nodekind="Varc", children=[var_part], sibling=proc_node)
        type_node = TreeNode(nodekind="TypeK", children=[type_part], sibling=var_node)
        if type_part is not None:
            return type_node
        if var_part is not None:
            return var_node
        return proc_node

    def _type_dec(self) -> TreeNode | None:
        if self._value != "TYPE":
            return None
        with self._indent():
            self._line("TYPE")
            self._advance()
            return TreeNode(nodekind="Typek", children=[self._type_dec_list()])

    def _var_dec(self) -> TreeNode | None:
        if self._value != "VAR":
            return None
        with self._indent():
            self._line("VAR")
            self._advance()
            return TreeNode(nodekind="Vark", children=[self._var_dec_list()])

    def _proc_dec(self) -> TreeNode | None:
        if self._value != "PROCEDURE":
            return None
        with self._indent():
            self._line("PROCEDURE")
            self._advance()
            return TreeNode(nodekind="PROCEDURE", children=[self._param_dec_list()])

    @staticmethod
    def _chain(nodes: list[TreeNode]) -> TreeNode | None:
        for node, following in zip(nodes, nodes[1:]):
            node.sibling = following
        return nodes[0] if nodes else None

    def _type_dec_list(self) -> TreeNode | None:
        nodes: list[TreeNode] = []
        while not (self._value in {"VAR", "PROCEDURE", "BEGIN"} or self._kind == "DOT"):
            name = self._value
            self._advance(2)
            node = TreeNode(nodekind="Deck", value=name, dec=self._value)
            self._advance(2)
            with self._indent():
                self._line(f"Deck {node.dec} {node.value}")
            nodes.append(node)
        return self._chain(nodes)

    def _var_dec_list(self) -> TreeNode | None:
        nodes: list[TreeNode] = []
        while not (self._value in {"PROCEDURE", "BEGIN"} or self._kind == "DOT"):
            if self._value == "VAR":
                self._advance()
            node = TreeNode(nodekind="Deck", dec=self._value)
            self._advance()
            while self._kind != "SEMI":
                node.ids.append(self._value)
                self._advance()
                if self._kind == "JSP1":
                    self._advance()
            self._advance()
            with self._indent():
                self._line(" ".join(["Deck", node.dec, *node.ids]))
            nodes.append(node)
        return self._chain(nodes)

    def _param_dec_list(self) -> TreeNode | None:
        if self._kind not in {"ID", "CHAR"}:
            return None
        node = TreeNode(nodekind="HDeck", value=self._value)
        self._advance()
        with self._indent():
            self._line(f"HDeck {node.value}")
            node.children = [self._param_list(), self._var_dec(), self._body()]
        return node

    def _param_list(self) -> TreeNode:
        self._advance()  # the opening parenthesis
        node = TreeNode()
        while self._kind != "RPAREN":
            if self._kind == "JSP1":
                self._advance()
            node.ids.append(self._value)
            self._advance()
        self._advance(2)  # the closing parenthesis and the semicolon
        with self._indent():
            self._line(" ".join(["Deck", "value", "param", *node.ids]))
        return node

    def _body(self) -> TreeNode | None:
        if self._value != "BEGIN":
            return None
        with self._indent():
            self._line("StmLK")
            self._advance()
            node = TreeNode(nodekind="StmLK")
            while self._value not in {"END", "ENDWH"}:
                child = self._stmt()
                if child is not None:
                    node.children.append(child)
            self._advance()
        return node

    def _stmt(self) -> TreeNode | None:
        kind, value = self._kind, self._value
        if kind in {"ID", "CHARC", "INTC"}:
            is_call = self._peek(1).kind == "LPAREN"
            label = "CALL" if is_call else "AssignK"
            node = TreeNode(nodekind="StmtK", stmt=label)
            with self._indent():
                self._line(f"StmtK {label}")
                node.children = [self._assign()]
            return node
        if value in {"WRITE", "READ"}:
            node = TreeNode(nodekind="StmtK", stmt=value)
            self._advance()
            with self._indent():
                self._line(f"StmtK {value}")
                node.children = [self._io_args()]
            return node
        if value == "WHILE":
            node = TreeNode(nodekind="StmtK", stmt="WHILE")
            self._advance()
            with self._indent():
                self._line("StmtK WHILE")
                node.children = [self._while_condition(), self._while_body()]
            return node
        if value == "IF":
            return self._if_stmt()
        self._advance()
        return None

    def _if_stmt(self) -> TreeNode:
        node = TreeNode(nodekind="StmtK", stmt="IF")
        self._advance()
        self._depth += 1
        self._line("StmtK IF")
        condition = self._if_condition()
        self._depth += 1
        self._line("StmtK THEN")
        self._advance()
        self._depth -= 1
        node.children = [condition, None, self._stmt()]
        self._depth -= 1
        if self._value == "ELSE":
            self._depth += 2
            self._advance()
            self._line("StmtK ELSE")
            self._depth -= 1
            node.children.append(self._stmt())
        self._advance(2)  # FI and the following separator
        self._depth -= 1
        return node

    def _assign(self) -> TreeNode:
        node = TreeNode()
        while not (self._kind == "SEMI" or self._value in {"END", "ENDWH", "ELSE", "FI"}):
            kind, value = self._kind, self._value
            if kind in _ASSIGN_SKIPPED:
                self._advance()
                continue
            node.nodekind = "ExpK"
            node.stmt = "IdK"
            node.ids.append(value)
            with self._indent():
                if kind in _ARITHMETIC:
                    self._line(f"ExpK OP {value}")
                elif kind in {"INTC", "CHARC"}:
                    self._line(f"ExpK const {value} {kind}")
                else:
                    self._line(f"ExpK {value} IdK")
            self._advance()
        if self._kind == "SEMI":
            self._advance()
        return node

    def _io_args(self) -> TreeNode:
        node = TreeNode()
        while not (self._kind == "SEMI" or self._value in {"END", "ENDWH"}):
            if self._kind in _PARENS:
                self._advance()
                continue
            node.nodekind = "ExpK"
            node.stmt = "IdK"
            node.ids.append(self._value)
            with self._indent():
                self._line(f"ExpK {self._value} IdK")
            self._advance()
        if self._kind == "SEMI":
            self._advance()
        return node

    def _while_condition(self) -> TreeNode:
        node = TreeNode(nodekind="ExpK", exp="Condition")
        while self._value != "DO":
            kind, value = self._kind, self._value
            if kind in {"ID", "INTC"}:
                exp = "IdK" if kind == "ID" else "ConstK"
                node.children.append(TreeNode(nodekind="ExpK", exp=exp, value=value))
                with self._indent():
                    self._line(f"ExpK {value} {exp}")
            elif kind == "LT":
                node.children.append(TreeNode(nodekind="OpK", value=value))
                with self._indent():
                    self._line(f"ExpK OP {value}")
            else:
                raise ParseError(f"unexpected token {kind} {value!r} in while condition")
            self._advance()
        return node

    def _while_body(self) -> TreeNode | None:
        if self._value != "DO":
            return None
        self._advance()
        node = TreeNode(nodekind="StmLK")
        while self._value != "ENDWH":
            child = self._stmt()
            if child is not None:
                node.children.append(child)
        self._advance()
        if self._pos < len(self.tokens) and self._kind == "SEMI":
            self._advance()
        return node

    def _if_condition(self) -> TreeNode:
        node = TreeNode()
        while self._value != "THEN":
            kind, value = self._kind, self._value
            if kind in _PARENS:
                self._advance()
                continue
            node.nodekind = "ExpK"
            node.ids.append(value)
            with self._indent():
                if kind in _ARITHMETIC or kind in _COMPARISON:
                    self._line(f"ExpK OP {value}")
                elif kind == "INTC":
                    self._line(f"ExpK const {value} INTC")
                else:
                    self._line(f"ExpK {value} IdK")
            self._advance()
        return node


def parse_program(tokens: Iterable[Token]) -> ParseResult:
    """Parse a token sequence into a syntax tree and its listing."""
    return Parser(tokens).parse()