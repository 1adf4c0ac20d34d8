"""Immutable (key, value) pair returned by Identifier.parse()."""

from collections import namedtuple
from typing import Any

from ..error_handling import ImmutableEntryError


class Entry(namedtuple("Entry", ["key", "value"])):
    """
    A derived storage key and the fully populated record it was derived from.

    Unpacks like a tuple: ``key, value = identifier.parse(record)``.
    """

    __slots__ = ()

    def __setattr__(self, name: str, value: Any) -> None:
        raise ImmutableEntryError(
            "Entry tuple is immutable", {"attribute": name}
        )

    def __delattr__(self, name: str) -> None:
        raise ImmutableEntryError(
            "Entry tuple is immutable", {"attribute": name}
        )
