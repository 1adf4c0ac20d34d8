"""
Key-Value Storage
=================

Maps string keys to serialized values stored as ``{key}.{extension}`` files
under ``{directory}/{namespace}``. Keys may contain ``/`` to form nested
sub-namespaces. Keys must be canonical (no empty or ``.`` segments) so that
``keys()`` returns them exactly as they were set.

Usage:
    from fsstorage.storage import KeyValueStorage
    from fsstorage.serialization import JSONSerializer

    storage = KeyValueStorage("./.storage", "settings", JSONSerializer())
    storage.set("users/42", {"name": "John"})
    storage.get("users/42")   # {"name": "John"}
    storage.keys()            # ["users/42"]
    storage.delete("users/42")
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Union

from ..error_handling import PreconditionFailedError
from ..serialization import Serializer
from .blob_storage import SAFE_TO_IGNORE, BlobStorage
from .file import File

module_logger = logging.getLogger(__name__)

_SEPARATORS = "/\\"


class KeyValueStorage:
    """Namespaced key-value store over a BlobStorage."""

    def __init__(
        self,
        directory: Union[str, Path],
        namespace: str,
        serializer: Serializer,
        logger: Optional[logging.Logger] = None,
        ignored_names: Iterable[str] = SAFE_TO_IGNORE,
    ):
        """
        Initialize key-value storage.

        Args:
            directory: Storage directory
            namespace: Subdirectory for this store; "." stores directly in
                ``directory``
            serializer: Codec for values; its extension selects the files
                this store sees
            logger: Logger passed down to the blob layer
            ignored_names: OS metadata files that do not keep a directory alive
        """
        self.logger = logger or module_logger
        self._directory = str(directory).rstrip(_SEPARATORS) or str(directory)
        self._namespace = namespace.strip(_SEPARATORS) or "."
        self._serializer = serializer

        if self._namespace == ".":
            path = Path(self._directory)
        else:
            path = Path(self._directory) / self._namespace

        self._storage = BlobStorage(path, self.logger, ignored_names)

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    @property
    def storage(self) -> BlobStorage:
        return self._storage

    @property
    def path(self) -> Path:
        return self._storage.path

    def __repr__(self) -> str:
        return (
            f"KeyValueStorage({self._directory!r}, {self._namespace!r}, "
            f"{self._serializer!r})"
        )

    def _suffix(self) -> str:
        return f".{self._serializer.extension}"

    def _file_for_key(self, key: str) -> File:
        segments = key.split("/")
        if any(segment in ("", ".") for segment in segments):
            raise PreconditionFailedError(
                f"Key '{key}' is not canonical: empty or '.' segments are not allowed",
                {"key": key},
            )
        return self._storage.file(f"{key}{self._suffix()}", self._serializer)

    def get(self, key: str) -> Any:
        """
        Get the value stored under ``key``.

        Raises:
            NotFoundError: If the key is not stored
        """
        return self._file_for_key(key).read()

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, creating directories as needed."""
        self._file_for_key(key).write(value)

    def delete(self, key: str) -> None:
        """
        Delete ``key`` and prune directories it leaves empty.

        Deleting a missing key is a no-op.
        """
        file = self._file_for_key(key).delete()
        self._storage.clear_parents(file)

    def has(self, key: str) -> bool:
        return self._file_for_key(key).exists()

    def keys(self) -> List[str]:
        """All stored keys, in sorted path order."""
        suffix = self._suffix()
        files = self._storage.list(lambda name: name.endswith(suffix))
        return [name[: -len(suffix)] for name in files]

    def purge(self) -> None:
        """Delete every key in this namespace."""
        self._storage.purge()

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
