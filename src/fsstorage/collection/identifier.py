"""
Identifier
==========

Compiles a path pattern such as ``"posts/{year}/{month}/{slug}-{id}"`` into
a reusable key generator over structured records.

The parser passed alongside the pattern turns a raw record into a fully
populated field set (filling defaults such as dates or ids); the identifier
then substitutes each ``{placeholder}`` with the field of the same name.
"""

import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Tuple

from ..error_handling import InvalidPatternError, PreconditionFailedError
from .entry import Entry

Parser = Callable[[Any], Any]

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


class Identifier:
    """
    Immutable compiled key pattern.

    Attributes:
        pattern: Normalized pattern (surrounding whitespace and ``/`` removed)
        placeholders: ``{name}`` tokens in declaration order
        keys: Field names bound by each placeholder
        parser: Callable turning a record into populated fields
    """

    __slots__ = ("_pattern", "_placeholders", "_keys", "_parser")

    def __init__(self, pattern: str, parser: Parser):
        """
        Compile a pattern.

        Raises:
            InvalidPatternError: If the pattern has no ``{placeholder}``
        """
        normalized = pattern.strip().strip("/")

        tokens: Dict[str, str] = {}
        for segment in normalized.split("/"):
            for match in _PLACEHOLDER.finditer(segment):
                tokens.setdefault(match.group(0), match.group(1))

        if not tokens:
            raise InvalidPatternError(
                "Identifier pattern expects at least one `{placeholder}`",
                {"pattern": pattern},
            )

        object.__setattr__(self, "_pattern", normalized)
        object.__setattr__(self, "_placeholders", tuple(tokens))
        object.__setattr__(self, "_keys", tuple(tokens.values()))
        object.__setattr__(self, "_parser", parser)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return self._placeholders

    @property
    def keys(self) -> Tuple[str, ...]:
        return self._keys

    @property
    def parser(self) -> Parser:
        return self._parser

    def __repr__(self) -> str:
        return f"Identifier({self._pattern!r})"

    def parse(self, record: Any) -> Entry:
        """
        Derive the storage key for ``record``.

        Returns:
            Entry of (derived key, populated fields)

        Raises:
            PreconditionFailedError: If the parser's result lacks a field
                that a placeholder needs
        """
        fields = self._parser(record)

        key = self._pattern
        for placeholder, name in zip(self._placeholders, self._keys):
            key = key.replace(placeholder, _format(_lookup(fields, name)))

        return Entry(key, fields)


def _lookup(fields: Any, name: str) -> Any:
    if isinstance(fields, Mapping):
        if name in fields:
            return fields[name]
    elif hasattr(fields, name):
        return getattr(fields, name)

    raise PreconditionFailedError(
        f"Parsed record has no field '{name}'", {"field": name}
    )


def _format(value: Any) -> str:
    return "" if value is None else str(value)
