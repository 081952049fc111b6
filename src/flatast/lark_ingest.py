"""
Boundary with the lark parser.

Lark builds the concrete parse tree; this module turns it into the raw tree
model of :mod:`flatast.tree` and derives a token table from the grammar, so
a ``.lark`` file is enough to drive the whole pipeline.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

import lark

from .ast_nodes import AstNode
from .flatten import flatten
from .names import canonical_name, rule_label
from .registry import TokenRegistry
from .tree import Node, Token, Tree

logger = logging.getLogger(__name__)

LarkNode = Union[lark.Tree, lark.Token]


def make_parser(grammar_text: str, start: str = "start", parser_kind: str = "lalr") -> lark.Lark:
    return lark.Lark(grammar_text, parser=parser_kind, start=start)


def table_from_lark(parser: lark.Lark) -> List[Tuple[str, int]]:
    """Terminals first (sorted, ids from 1), then the canonical names of rules and aliases.

    Rules starting with ``_`` are inlined by lark and never reach the tree. A
    rule named like a terminal (``number: NUMBER``) shares the terminal's id.
    """
    terminals = sorted({str(t.name) for t in parser.terminals})

    rule_names = set()
    for rule in parser.rules:
        for name in (rule.origin.name, rule.alias):
            if name and not str(name).startswith("_"):
                rule_names.add(canonical_name(rule_label(str(name))))
    rule_names.difference_update(terminals)

    table = [(name, i) for i, name in enumerate(terminals, start=1)]
    table.extend((name, i) for i, name in enumerate(sorted(rule_names), start=len(table) + 1))
    logger.debug("token table from grammar: %d terminals, %d rules", len(terminals), len(rule_names))
    return table


def from_lark(tree: LarkNode, registry: TokenRegistry, zero_based: bool = False) -> Node:
    """Convert a lark tree into raw nodes.

    Terminal names become integer token types here. Lark positions are
    1-based; ``zero_based`` shifts both line and column down by one.
    """
    offset = 1 if zero_based else 0

    if isinstance(tree, lark.Token):
        return _convert_token(tree, registry, offset)

    root = Tree(rule_label(str(tree.data)))
    pending: List[Tuple[lark.Tree, Tree]] = [(tree, root)]

    while pending:
        source, target = pending.pop()

        for child in source.children:
            if child is None:
                # placeholder for an absent [optional] item
                continue
            if isinstance(child, lark.Tree):
                node: Node = Tree(rule_label(str(child.data)))
                pending.append((child, node))
            else:
                node = _convert_token(child, registry, offset)
            target.children.append(node)

    return root


def parse_to_ast(
    source: str,
    parser: lark.Lark,
    registry: Optional[TokenRegistry] = None,
    zero_based: bool = False,
) -> AstNode:
    """Parse ``source`` and flatten the result. Lark parse errors propagate unchanged."""
    if registry is None:
        registry = TokenRegistry.build(table_from_lark(parser))

    tree = parser.parse(source)
    return flatten(from_lark(tree, registry, zero_based=zero_based), registry)


def _convert_token(tok: lark.Token, registry: TokenRegistry, offset: int) -> Token:
    line = tok.line if tok.line is not None else 1
    column = tok.column if tok.column is not None else 1
    return Token(registry.resolve(tok.type), str(tok.value), line - offset, column - offset)
