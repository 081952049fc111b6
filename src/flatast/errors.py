"""Error taxonomy shared by the registry, the name resolver and the flattener."""

from __future__ import annotations

from typing import Optional


class FlatastError(Exception):
    """Base class for every error raised by flatast itself."""


class MalformedLabel(FlatastError, ValueError):
    """A structural label does not end with the generated context suffix."""

    def __init__(self, label: str, suffix: str):
        self.label = label
        self.suffix = suffix
        super().__init__(f"Malformed label {label!r}: expected suffix {suffix!r}")


class UnknownTokenName(FlatastError, LookupError):
    """A canonical name is missing from the token registry.

    ``label`` is the structural label the name was derived from, when there is one.
    """

    def __init__(self, name: str, label: Optional[str] = None):
        self.name = name
        self.label = label
        if label is None:
            super().__init__(f"Unknown token name. Given name {name}")
        else:
            super().__init__(f"Unknown token name. Given name {name} (from label {label})")


class UnknownTokenId(FlatastError, LookupError):
    def __init__(self, token_id: int):
        self.token_id = token_id
        super().__init__(f"Unknown token id. Given id {token_id}")


class DuplicateTokenName(FlatastError):
    """Two entries of a token table share a name but not a value."""

    def __init__(self, name: str, first: int, second: int):
        self.name = name
        self.first = first
        self.second = second
        super().__init__(
            f"Duplicate token name {name!r} with conflicting values {first} and {second}"
        )


class RegistryNotInstalled(FlatastError):
    pass


class RegistryAlreadyInstalled(FlatastError):
    pass
