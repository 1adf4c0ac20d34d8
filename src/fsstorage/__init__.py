"""
fsstorage - Layered filesystem persistence: blobs, key-value stores and
pattern-keyed collections.

Key Features:
- Idempotent file/directory creation and deletion
- Advisory-locked reads and writes
- Pluggable serializers (JSON via orjson, restricted pickle, blosc2 compression)
- Namespaced key-value storage with nested keys
- Collections that derive storage keys from records via path patterns
- Automatic pruning of directories left empty by deletions

Quick Start:
    >>> from fsstorage import CollectionStorage, KeyValueStorage, JSONSerializer
    >>> from fsstorage import make_date_parser
    >>>
    >>> settings = KeyValueStorage("./.storage", "settings", JSONSerializer())
    >>> settings.set("theme", "dark")
    >>> settings.get("theme")
    'dark'
    >>>
    >>> posts = CollectionStorage(
    ...     "{year}/{month}/{day}-{id}",
    ...     make_date_parser(required=("id",)),
    ...     KeyValueStorage("./.storage", "posts", JSONSerializer()),
    ... )
    >>> key = posts.store({"id": 1, "title": "Hello"})
"""

import logging

from .collection import CollectionStorage, Entry, Identifier, make_date_parser
from .config import StorageConfig, SerializerConfig, create_storage_config, load_config_from_json
from .core import (
    create_blob_storage,
    create_collection_storage,
    create_key_value_storage,
    create_serializer,
)
from .error_handling import (
    ErrorKind,
    ImmutableEntryError,
    InvalidPatternError,
    NotFoundError,
    PreconditionFailedError,
    SerializationError,
    StorageError,
    StorageIOError,
    TypeMismatchError,
)
from .serialization import (
    CompressedSerializer,
    JSONSerializer,
    NativeSerializer,
    Serializer,
    get_serializer,
    register_serializer,
)
from .storage import BlobStorage, Directory, File, KeyValueStorage

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Storage layers
    "Directory",
    "File",
    "BlobStorage",
    "KeyValueStorage",
    "Identifier",
    "Entry",
    "CollectionStorage",
    "make_date_parser",
    # Serializers
    "Serializer",
    "JSONSerializer",
    "NativeSerializer",
    "CompressedSerializer",
    "get_serializer",
    "register_serializer",
    # Configuration
    "StorageConfig",
    "SerializerConfig",
    "create_storage_config",
    "load_config_from_json",
    "create_serializer",
    "create_blob_storage",
    "create_key_value_storage",
    "create_collection_storage",
    # Errors
    "ErrorKind",
    "StorageError",
    "TypeMismatchError",
    "StorageIOError",
    "NotFoundError",
    "PreconditionFailedError",
    "InvalidPatternError",
    "SerializationError",
    "ImmutableEntryError",
    # Version info
    "__version__",
]
