from __future__ import annotations

from typing import List

import pytest

from flatast.ast_nodes import AstNode, Leaf, Rule
from flatast.errors import MalformedLabel, UnknownTokenName
from flatast.flatten import flatten, flatten_many
from flatast.tree import Node, Tree, count_leaves, iter_nodes, is_token
from tests.support.trees import TT, all_nodes, ident, registry, rule, tok, wrap

REG = registry()


def _field_decl() -> Node:
    # int a = f(b, 1);
    return rule(
        "CompilationUnit",
        rule(
            "FieldDeclaration",
            ident("int", 1, 0),
            ident("a", 1, 4),
            rule(
                "Statement",
                rule(
                    "Expression",
                    ident("f", 1, 8),
                    rule("Arguments", tok(TT.LPAR, "(", 1, 9), ident("b", 1, 10), tok(TT.COMMA, ",", 1, 11),
                         wrap(tok(TT.NUMBER, "1", 1, 13), 4, "Expression"), tok(TT.RPAR, ")", 1, 14)),
                ),
            ),
            tok(TT.SEMI, ";", 1, 15),
        ),
    )


SAMPLE_TREES = {
    "leaf": lambda: tok(42, "foo", 3, 5),
    "chain-to-leaf": lambda: wrap(ident("x"), 6),
    "chain-to-rule": lambda: wrap(rule("FieldDeclaration", ident("x"), ident("y")), 2),
    "field-decl": _field_decl,
    "empty-rule": lambda: rule("Block", rule("EmptyBlock"), tok(TT.SEMI, ";")),
    "mixed-chains": lambda: rule(
        "Block",
        wrap(ident("a"), 3),
        wrap(rule("Expression", wrap(ident("b"), 2), wrap(ident("c"), 1)), 2),
        wrap(rule("Block", rule("Expression", ident("d"), ident("e")), ident("f")), 1, "Expr2"),
    ),
}


def _names(nodes: List[AstNode]) -> List[str]:
    return [n.text for n in nodes]


def test_single_leaf_keeps_all_fields() -> None:
    root = flatten(tok(42, "foo", 3, 5), REG)

    assert root.payload == Leaf(42, "foo", 3, 5)
    assert root.children == ()
    assert root.parent is None
    assert root.index == 0


def test_chain_collapses_onto_first_branching_node() -> None:
    raw = rule("CompilationUnit", rule("Statement", rule("FieldDeclaration", ident("x"), ident("y"))))
    root = flatten(raw, REG)

    assert root.payload == Rule("FIELD_DECLARATION", TT.FIELD_DECLARATION)
    assert _names(list(root.children)) == ["x", "y"]
    assert all(child.is_leaf for child in root.children)


def test_root_chain_to_leaf_re_roots_at_leaf() -> None:
    root = flatten(wrap(ident("only", 2, 7), 5), REG)

    assert root.payload == Leaf(TT.IDENT, "only", 2, 7)
    assert root.parent is None


def test_single_child_slot_attaches_descendant_directly() -> None:
    raw = rule("CompilationUnit", rule("Statement", ident("x")), tok(TT.SEMI, ";"))
    root = flatten(raw, REG)

    assert root.text == "COMPILATION_UNIT"
    assert [c.payload for c in root.children] == [
        Leaf(TT.IDENT, "x", 1, 0),
        Leaf(TT.SEMI, ";", 1, 0),
    ]


def test_nested_chain_in_child_slot_keeps_branching_node() -> None:
    root = flatten(_field_decl(), REG)

    assert root.text == "FIELD_DECLARATION"
    assert _names(list(root.children)) == ["int", "a", "EXPRESSION", ";"]

    expression = root.children[2]
    assert _names(list(expression.children)) == ["f", "ARGUMENTS"]
    assert _names(list(expression.children[1].children)) == ["(", "b", ",", "1", ")"]


def test_empty_rule_is_kept_without_children() -> None:
    root = flatten(SAMPLE_TREES["empty-rule"](), REG)

    empty = root.children[0]
    assert empty.payload == Rule("EMPTY_BLOCK", TT.EMPTY_BLOCK)
    assert empty.children == ()
    assert empty.line is None
    assert empty.column is None


def test_rule_position_comes_from_first_leaf() -> None:
    root = flatten(_field_decl(), REG)
    expression = root.children[2]

    assert (root.line, root.column) == (1, 0)
    assert (expression.line, expression.column) == (1, 8)
    assert expression.type == TT.EXPRESSION


def test_unknown_rule_name_fails_whole_flatten() -> None:
    raw = rule("Block", ident("a"), rule("Mystery", ident("b"), ident("c")))

    with pytest.raises(UnknownTokenName) as exc_info:
        flatten(raw, REG)

    err = exc_info.value
    assert (err.name, err.label) == ("MYSTERY", "MysteryContext")
    assert "MysteryContext" in str(err)
    assert isinstance(err.__cause__, UnknownTokenName)
    assert err.__cause__.label is None


def test_malformed_label_is_signalled() -> None:
    raw = Tree("Block", [ident("a"), ident("b")])

    with pytest.raises(MalformedLabel) as exc_info:
        flatten(raw, REG)

    assert exc_info.value.label == "Block"


def test_elided_nodes_are_never_classified() -> None:
    raw = wrap(rule("Expression", ident("a"), ident("b")), 3, "Mystery")
    assert flatten(raw, REG).text == "EXPRESSION"


def test_deep_trees_do_not_hit_recursion_limit() -> None:
    raw: Node = ident("x")
    for i in range(3000):
        raw = rule("Block", raw, tok(TT.SEMI, ";", i + 1, 0))
    raw = wrap(raw, 3000)

    root = flatten(raw, REG)

    assert root.text == "BLOCK"
    assert len(all_nodes(root)) == 2 * 3000 + 1
    assert root.line == 1


def test_children_cannot_be_mutated_through_public_api() -> None:
    root = flatten(_field_decl(), REG)

    with pytest.raises(AttributeError):
        root.children.append(root)  # type: ignore[attr-defined]
    with pytest.raises(AttributeError):
        root.payload.canonical_name = "OTHER"  # type: ignore[misc]


def test_parent_is_weak() -> None:
    root = flatten(_field_decl(), REG)
    child = root.children[0]

    assert child.parent is root
    del root
    assert child.parent is None


@pytest.mark.parametrize("name", list(SAMPLE_TREES))
def test_no_rule_has_exactly_one_child(name: str) -> None:
    root = flatten(SAMPLE_TREES[name](), REG)

    for node in root.walk():
        if isinstance(node.payload, Rule):
            assert len(node.children) != 1, node
        else:
            assert node.children == ()


@pytest.mark.parametrize("name", list(SAMPLE_TREES))
def test_leaves_are_preserved_in_order(name: str) -> None:
    raw = SAMPLE_TREES[name]()
    root = flatten(raw, REG)

    raw_leaves = [
        Leaf(n.type, n.value, n.line, n.column) for n in iter_nodes(raw) if is_token(n)
    ]
    ast_leaves = [n.payload for n in root.walk() if n.is_leaf]

    assert len(ast_leaves) == count_leaves(raw)
    assert ast_leaves == raw_leaves


@pytest.mark.parametrize("name", list(SAMPLE_TREES))
def test_sibling_index_matches_position(name: str) -> None:
    root = flatten(SAMPLE_TREES[name](), REG)

    for node in root.walk():
        for pos, child in enumerate(node.children):
            assert child.index == pos
            assert child.parent is node


def test_flatten_many_keeps_input_order() -> None:
    trees = [SAMPLE_TREES[name]() for name in SAMPLE_TREES]
    results = flatten_many(trees, REG, max_workers=4)

    expected = [flatten(t, REG).pretty() for t in trees]
    assert [r.pretty() for r in results] == expected


def test_flatten_many_propagates_failure() -> None:
    trees = [_field_decl(), rule("Mystery", ident("a"), ident("b"))]

    with pytest.raises(UnknownTokenName):
        flatten_many(trees, REG, max_workers=2)
