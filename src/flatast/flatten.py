"""
Flatten a raw parse tree into a simplified AST.

Given the raw tree::

    a
    |- b
    |  '- d
    |     '- e
    |        '- f
    '- c

every inner node with a single child disappears, and the first node below
it that is a leaf or branches takes its place::

    a
    |- f
    '- c

A rule node therefore shows up in the result only when its raw node had two
or more children (or none at all). A root with one child re-roots the AST at
its first leaf or branching descendant.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Iterable, List, Optional, Tuple

from .ast_nodes import AstNode, Leaf, Rule
from .errors import UnknownTokenName
from .names import canonical_name
from .registry import TokenRegistry
from .tree import Node, is_token, is_tree, tree_children

logger = logging.getLogger(__name__)


def flatten(raw: Node, registry: TokenRegistry) -> AstNode:
    """Build the AST for ``raw``. Either the whole tree succeeds or an error is raised."""
    target = _skip_chain(raw)
    root = _make_node(target, registry, None, 0)

    # (ast node, raw node whose children still have to be attached to it)
    pending: List[Tuple[AstNode, Node]] = [(root, target)]
    count = 1

    while pending:
        node, source = pending.pop()

        for index, child in enumerate(tree_children(source)):
            child_raw = _skip_chain(child)
            child_node = _make_node(child_raw, registry, node, index)
            node._children.append(child_node)
            count += 1

            if is_tree(child_raw) and child_raw.children:
                pending.append((child_node, child_raw))

    logger.debug("flattened tree into %d AST nodes", count)
    return root


def flatten_many(
    trees: Iterable[Node],
    registry: TokenRegistry,
    max_workers: Optional[int] = None,
) -> List[AstNode]:
    """Flatten independent trees concurrently; results keep input order."""
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(partial(flatten, registry=registry), trees))


def _skip_chain(raw: Node) -> Node:
    while is_tree(raw) and len(raw.children) == 1:
        raw = raw.children[0]
    return raw


def _make_node(raw: Node, registry: TokenRegistry, parent: Optional[AstNode], index: int) -> AstNode:
    if is_token(raw):
        # leaf ids come straight from the lexer, never from the registry
        payload = Leaf(raw.type, raw.value, raw.line, raw.column)
    else:
        name = canonical_name(raw.label)
        try:
            token_id = registry.resolve(name)
        except UnknownTokenName as err:
            raise UnknownTokenName(name, label=raw.label) from err
        payload = Rule(name, token_id)

    return AstNode(payload, parent, index)
