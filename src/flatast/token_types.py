"""
Token tables

A token table is any iterable of ``(name, value)`` pairs. These helpers pull
one out of the places token constants usually live: an enum of token types,
or the public int fields of a generated lexer/parser class or module.
"""

from enum import Enum
from typing import Any, Iterable, List, Tuple, Type

from typing_extensions import TypeAlias

TokenTable: TypeAlias = Iterable[Tuple[str, int]]


def table_from_enum(enum_cls: Type[Enum]) -> List[Tuple[str, int]]:
    """Members with int values, aliases included, in definition order."""
    return [
        (name, member.value)
        for name, member in enum_cls.__members__.items()
        if _is_int(member.value)
    ]


def table_from_int_fields(source: Any) -> List[Tuple[str, int]]:
    """Public int attributes of a class or module, sorted by name."""
    table = []

    for name in sorted(vars(source)):
        if name.startswith("_"):
            continue
        value = getattr(source, name)
        if _is_int(value):
            table.append((name, int(value)))

    return table


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
