"""Nodes of the simplified AST produced by :mod:`flatast.flatten`."""

from __future__ import annotations

import weakref
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from typing_extensions import TypeAlias


@dataclass(frozen=True)
class Leaf:
    token_type: int
    text: str
    line: int
    column: int


@dataclass(frozen=True)
class Rule:
    canonical_name: str
    token_type: int


Payload: TypeAlias = Union[Leaf, Rule]


class AstNode:
    """A retained node: payload, owned children, weak parent, sibling index.

    Only the flattener adds children; the public surface is read-only.
    """

    __slots__ = ("payload", "_children", "_parent", "index", "__weakref__")

    def __init__(self, payload: Payload, parent: Optional[AstNode] = None, index: int = 0):
        self.payload = payload
        self._children: List[AstNode] = []
        self._parent = weakref.ref(parent) if parent is not None else None
        self.index = index

    @property
    def children(self) -> Tuple[AstNode, ...]:
        return tuple(self._children)

    @property
    def parent(self) -> Optional[AstNode]:
        return self._parent() if self._parent is not None else None

    @property
    def is_leaf(self) -> bool:
        return isinstance(self.payload, Leaf)

    @property
    def type(self) -> int:
        return self.payload.token_type

    @property
    def text(self) -> str:
        if isinstance(self.payload, Leaf):
            return self.payload.text
        return self.payload.canonical_name

    @property
    def line(self) -> Optional[int]:
        leaf = self._first_leaf()
        return leaf.line if leaf is not None else None

    @property
    def column(self) -> Optional[int]:
        leaf = self._first_leaf()
        return leaf.column if leaf is not None else None

    def _first_leaf(self) -> Optional[Leaf]:
        for node in self.walk():
            if isinstance(node.payload, Leaf):
                return node.payload
        return None

    def walk(self) -> Iterator[AstNode]:
        """Pre-order, left to right, without recursion."""
        stack: List[AstNode] = [self]

        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def pretty(self) -> str:
        from .render import render

        return render(self)

    def __repr__(self) -> str:
        if isinstance(self.payload, Leaf):
            return f"AstNode(Leaf {self.payload.token_type} {self.payload.text!r})"
        return f"AstNode({self.payload.canonical_name}, {len(self._children)} children)"
