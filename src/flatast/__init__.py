"""Flatten parse trees into simplified ASTs and print them."""

from .ast_nodes import AstNode, Leaf, Rule
from .flatten import flatten, flatten_many
from .registry import TokenRegistry
from .render import render

__all__ = [
    "AstNode",
    "Leaf",
    "Rule",
    "TokenRegistry",
    "flatten",
    "flatten_many",
    "render",
]
