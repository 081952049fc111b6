"""
ASCII rendering of an AST, one line per node::

    '- STATEMENT
       |- ASSIGNMENT
       |  |- TOKEN[type: 1, text: x]
       |  '- TOKEN[type: 2, text: 1]
       '- TOKEN[type: 6, text: ;]

This is the printed form golden files are compared against.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List

from .ast_nodes import AstNode, Leaf

BRANCH = "|- "
LAST = "'- "
CONTINUE = "|  "
BLANK = "   "


def caption(node: AstNode) -> str:
    payload = node.payload
    if isinstance(payload, Leaf):
        # keep each node on exactly one line
        text = payload.text.replace("\n", "\\n")
        return f"TOKEN[type: {payload.token_type}, text: {text}]"
    return payload.canonical_name


def render(root: AstNode) -> str:
    """Pre-order rendering driven by a stack of pending sibling lists."""
    lines: List[str] = []
    levels: List[Deque[AstNode]] = [deque([root])]

    while levels:
        siblings = levels[-1]

        if not siblings:
            levels.pop()
            continue

        node = siblings.popleft()
        indent = "".join(CONTINUE if level else BLANK for level in levels[:-1])
        marker = BRANCH if siblings else LAST
        lines.append(f"{indent}{marker}{caption(node)}\n")

        children = node.children
        if children:
            levels.append(deque(children))

    return "".join(lines)
