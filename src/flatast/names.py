"""
Canonical token names for structural labels.

Generated parsers name the context class of rule ``fooBar`` ``FooBarContext``.
The canonical token name of that rule is ``FOO_BAR``: strip the suffix, then
split on upper-case letters.
"""

from __future__ import annotations

from functools import lru_cache

from .errors import MalformedLabel

CONTEXT_SUFFIX = "Context"


def strip_context_suffix(label: str) -> str:
    if len(label) < len(CONTEXT_SUFFIX) or not label.endswith(CONTEXT_SUFFIX):
        raise MalformedLabel(label, CONTEXT_SUFFIX)

    return label[: len(label) - len(CONTEXT_SUFFIX)]


def camel_to_upper_snake(text: str) -> str:
    """``FieldDeclaration`` -> ``FIELD_DECLARATION``.

    One character in, one character out (plus the inserted underscores): only
    ASCII letters change case, so digits, underscores and non-ASCII letters
    pass through.
    """
    out = []

    for i, ch in enumerate(text):
        ascii_letter = ch.isascii() and ch.isalpha()
        if i > 0 and ascii_letter and ch.isupper():
            out.append("_")
        out.append(ch.upper() if ascii_letter else ch)

    return "".join(out)


@lru_cache(maxsize=None)
def canonical_name(label: str) -> str:
    return camel_to_upper_snake(strip_context_suffix(label))


def rule_label(rule_name: str) -> str:
    """Context label for a snake_case grammar rule: ``field_declaration`` -> ``FieldDeclarationContext``."""
    parts = [p for p in rule_name.split("_") if p]
    return "".join(p[0].upper() + p[1:] for p in parts) + CONTEXT_SUFFIX
