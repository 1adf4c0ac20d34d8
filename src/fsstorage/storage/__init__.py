"""
Storage Layer
=============

Filesystem persistence primitives, from the bottom up:

- ``Directory`` / ``File``: stateless handles with idempotent create/delete
  and advisory-locked reads and writes
- ``BlobStorage``: a rooted factory for File handles that prunes empty
  directories after deletions
- ``KeyValueStorage``: serialized values under ``{key}.{extension}`` paths
  in a namespace

Usage:
    from fsstorage.storage import KeyValueStorage
    from fsstorage.serialization import JSONSerializer

    store = KeyValueStorage("./.storage", "settings", JSONSerializer())
    store.set("theme", "dark")
"""

from .blob_storage import SAFE_TO_IGNORE, BlobStorage
from .directory import Directory
from .file import File
from .key_value import KeyValueStorage

__all__ = [
    "Directory",
    "File",
    "BlobStorage",
    "KeyValueStorage",
    "SAFE_TO_IGNORE",
]
