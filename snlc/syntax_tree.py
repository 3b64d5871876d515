"""Reading the indented syntax-tree listing back into a tree of nodes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from os import PathLike

_INDENT = "    "


@dataclass(eq=False)
class Node:
    """A node of a syntax tree read from its textual listing."""

    type: str
    name: str = ""
    var_type: str = ""
    is_param: str = ""
    lower_bound: str = "0"
    upper_bound: str = "0"
    const_type: str = ""
    size: int = 0
    children: list[Node] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)

    def add_child(self, child: Node) -> None:
        """Attach ``child`` as the last child of this node."""
        self.children.append(child)
        child.parent = self


def _node_from_words(words: list[str]) -> Node:
    def word(index: int) -> str:
        return words[index] if index < len(words) else ""

    kind, second, third = word(0), word(1), word(2)
    if third == "param":
        return Node(kind, word(3), word(4), "1")
    if second == "ARRAY":
        lower, upper = word(3), word(5)
        try:
            size = int(upper) - int(lower) + 1
        except ValueError:
            raise ValueError(
                f"invalid array bounds {lower!r} .. {upper!r} in {' '.join(words)!r}"
            ) from None
        return Node(kind, word(8), word(9), "0", lower, upper, size=size)
    if second == "const":
        return Node(kind, "const", third, "0", const_type=word(3))
    return Node(kind, second, third, "0")


def parse_syntax_tree(text: str) -> Node | None:
    """Build a tree from an indented listing; the first line is the root.

    Returns None when the listing holds no nodes. Raises ValueError on an
    array declaration whose bounds are not integers.
    """
    root: Node | None = None
    stack: list[tuple[int, Node]] = []
    for raw in text.splitlines():
        line = raw.lstrip(" \t")
        if not line:
            continue
        indent = len(raw) - len(line)
        node = _node_from_words(line.split())
        if not stack:
            root = node
        else:
            while stack and stack[-1][0] >= indent:
                stack.pop()
            if stack:
                stack[-1][1].add_child(node)
        stack.append((indent, node))
    return root


def read_syntax_tree(path: str | PathLike[str]) -> Node | None:
    """Read and parse a syntax-tree listing file."""
    with open(path, encoding="utf-8") as handle:
        return parse_syntax_tree(handle.read())


def _describe(node: Node) -> str:
    text = node.type
    if node.name:
        text += f" ({node.name})"
    if node.var_type:
        text += f" : {node.var_type}"
    return text


def _plain_lines(node: Node, depth: int) -> Iterator[str]:
    yield _INDENT * depth + _describe(node)
    for child in node.children:
        yield from _plain_lines(child, depth + 1)


def _branch_lines(node: Node, depth: int, is_last: bool) -> Iterator[str]:
    prefix = ""
    if depth > 0:
        prefix = _INDENT * (depth - 1) + ("└── " if is_last else "├── ")
    yield prefix + _describe(node)
    last = len(node.children) - 1
    for index, child in enumerate(node.children):
        yield from _branch_lines(child, depth + 1, index == last)


def format_syntax_tree(node: Node | None) -> str:
    """Render the tree with four spaces of indentation per level."""
    if node is None:
        return ""
    return "".join(line + "\n" for line in _plain_lines(node, 0))


def format_syntax_tree_branches(node: Node | None) -> str:
    """Render the tree with branch connectors."""
    if node is None:
        return ""
    return "".join(line + "\n" for line in _branch_lines(node, 0, True))