"""
Token registry: bidirectional mapping between token names and ids.

Built once from a token table and read-only afterwards, so one registry can
be shared by any number of concurrent flatten calls.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from .errors import (
    DuplicateTokenName,
    RegistryAlreadyInstalled,
    RegistryNotInstalled,
    UnknownTokenId,
    UnknownTokenName,
)
from .token_types import TokenTable

logger = logging.getLogger(__name__)


class TokenRegistry:
    __slots__ = ("_by_name", "_by_id")

    def __init__(self, by_name: Mapping[str, int], by_id: Mapping[int, str]):
        self._by_name = MappingProxyType(dict(by_name))
        self._by_id = MappingProxyType(dict(by_id))

    @classmethod
    def build(cls, table: TokenTable) -> TokenRegistry:
        """Scan ``(name, value)`` pairs; a name bound to two values is fatal."""
        by_name: Dict[str, int] = {}
        by_id: Dict[int, str] = {}

        for name, value in table:
            existing = by_name.get(name)
            if existing is not None and existing != value:
                raise DuplicateTokenName(name, existing, value)
            by_name[name] = value
            # first name wins for ids shared by several names
            by_id.setdefault(value, name)

        logger.debug("token registry built with %d names, %d ids", len(by_name), len(by_id))
        return cls(by_name, by_id)

    def resolve(self, name: str) -> int:
        token_id = self._by_name.get(name)
        if token_id is None:
            raise UnknownTokenName(name)
        return token_id

    def name_of(self, token_id: int) -> str:
        name = self._by_id.get(token_id)
        if name is None:
            raise UnknownTokenId(token_id)
        return name

    def names(self) -> Iterator[str]:
        return iter(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"TokenRegistry({len(self)} names)"


# ---------- process-wide handle ----------

_installed: Optional[TokenRegistry] = None
_install_lock = threading.Lock()


def install_registry(registry: TokenRegistry) -> TokenRegistry:
    """Publish ``registry`` as the process-wide default. Allowed once."""
    global _installed

    with _install_lock:
        if _installed is not None:
            raise RegistryAlreadyInstalled("a token registry is already installed")
        _installed = registry

    return registry


def default_registry() -> TokenRegistry:
    registry = _installed
    if registry is None:
        raise RegistryNotInstalled("install_registry() must run before default_registry()")
    return registry


def _reset_default_registry() -> None:
    global _installed

    with _install_lock:
        _installed = None
