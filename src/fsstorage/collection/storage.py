"""
Collection Storage
==================

Stores records under keys derived from the records themselves.

Usage:
    from fsstorage.collection import CollectionStorage, make_date_parser
    from fsstorage.serialization import JSONSerializer
    from fsstorage.storage import KeyValueStorage

    posts = CollectionStorage(
        "{year}/{month}/{day}-{id}",
        make_date_parser(required=("id",)),
        KeyValueStorage("./.storage", "posts", JSONSerializer()),
    )
    key = posts.store({"id": 1, "title": "Hello"})   # e.g. "2024/05/17-1"
    posts.get(key)
    posts.get({"id": 1})                             # same entry
"""

import logging
from typing import Any, List, Optional, Union

from ..storage.key_value import KeyValueStorage
from .identifier import Identifier, Parser

module_logger = logging.getLogger(__name__)

KeyOrRecord = Union[str, Any]


class CollectionStorage:
    """Record store keyed by an Identifier over a KeyValueStorage."""

    def __init__(
        self,
        pattern: str,
        parser: Parser,
        storage: KeyValueStorage,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize collection storage.

        Args:
            pattern: Identifier pattern with ``{placeholder}`` tokens
            parser: Turns a record into populated fields
            storage: Key-value storage the records are written to; shared,
                not owned

        Raises:
            InvalidPatternError: If the pattern has no placeholder
        """
        self.logger = logger or module_logger
        self._identifier = Identifier(pattern, parser)
        self._storage = storage

    @property
    def identifier(self) -> Identifier:
        return self._identifier

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def __repr__(self) -> str:
        return f"CollectionStorage({self._identifier.pattern!r}, {self._storage!r})"

    def _resolve_key(self, key_or_record: KeyOrRecord) -> str:
        if isinstance(key_or_record, str):
            return key_or_record
        return self._identifier.parse(key_or_record).key

    def store(self, record: Any) -> str:
        """
        Store a record under its derived key.

        Returns:
            The derived key
        """
        key, fields = self._identifier.parse(record)
        self._storage.set(key, fields)
        self.logger.debug(f"Stored record under '{key}'")
        return key

    def get(self, key_or_record: KeyOrRecord) -> Any:
        """
        Get a record by key, or by a record that derives the key.

        Raises:
            NotFoundError: If nothing is stored under the key
        """
        return self._storage.get(self._resolve_key(key_or_record))

    def delete(self, key_or_record: KeyOrRecord) -> None:
        self._storage.delete(self._resolve_key(key_or_record))

    def has(self, key_or_record: KeyOrRecord) -> bool:
        return self._storage.has(self._resolve_key(key_or_record))

    def all(self) -> List[str]:
        """Keys of every stored record."""
        return self._storage.keys()

    def purge(self) -> None:
        self._storage.purge()
