"""
Shared fixtures for fsstorage tests.

Every fixture roots its storage under pytest's ``tmp_path`` so tests never
touch the working directory.
"""

from datetime import datetime

import pytest

from fsstorage.collection import CollectionStorage, make_date_parser
from fsstorage.serialization import JSONSerializer
from fsstorage.storage import BlobStorage, KeyValueStorage

TODAY = datetime(2024, 5, 17, 9, 30)


@pytest.fixture
def storage_dir(tmp_path):
    """Return the storage directory used by key-value fixtures."""
    return tmp_path / ".storage"


@pytest.fixture
def json_serializer():
    return JSONSerializer(pretty=True)


@pytest.fixture
def blob_storage(storage_dir):
    """Blob storage rooted at ``.storage/path/to/storage``."""
    return BlobStorage(storage_dir / "path" / "to" / "storage")


@pytest.fixture
def kv(storage_dir, json_serializer):
    """Key-value storage in the ``kv`` namespace."""
    return KeyValueStorage(storage_dir, "kv", json_serializer)


@pytest.fixture
def clock():
    """Fixed clock returning ``TODAY``."""
    return lambda: TODAY


@pytest.fixture
def collection(storage_dir, json_serializer, clock):
    """Date-keyed collection in the ``collection`` namespace."""
    return CollectionStorage(
        "{year}/{month}/{day}-{id}",
        make_date_parser(required=("id",), clock=clock),
        KeyValueStorage(storage_dir, "collection", json_serializer),
    )
