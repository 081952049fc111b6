"""Raw parse tree nodes as handed over by a grammar-driven parser.

``Token`` is always a leaf. ``Tree`` is a structural node labelled with the
generated context label of the rule that produced it.
"""
from __future__ import annotations
from typing import Iterator, List, Optional, TypeGuard, Union
from typing_extensions import TypeAlias


class Token(str):
    """Leaf token: the lexer-assigned integer type plus position.

    Subclasses str so tokens can be used directly as their text.
    """
    __slots__ = ('type', 'value', 'line', 'column')

    def __new__(cls, type_: int, value: str, line: int = 1, column: int = 0):
        inst = str.__new__(cls, value)
        inst.type = type_
        inst.value = value
        inst.line = line
        inst.column = column
        return inst

    def __repr__(self) -> str:
        return f'Token({self.type!r}, {self.value!r}, {self.line}:{self.column})'


class Tree:
    __slots__ = ('label', 'children')

    def __init__(self, label: str, children: Optional[List[Union[Tree, Token]]] = None):
        self.label = label
        self.children = children if children is not None else []

    def __repr__(self) -> str:
        return f'Tree({self.label!r}, {self.children!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return False
        return self.label == other.label and self.children == other.children

    def __hash__(self) -> int:
        return hash((self.label, tuple(self.children)))


Node: TypeAlias = Tree | Token


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.label if is_tree(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def iter_nodes(node: Node) -> Iterator[Node]:
    """Pre-order walk without recursion."""
    stack: List[Node] = [node]

    while stack:
        cur = stack.pop()
        yield cur
        stack.extend(reversed(tree_children(cur)))

def count_leaves(node: Node) -> int:
    return sum(1 for n in iter_nodes(node) if is_token(n))
