"""
Storage Factories
=================

Build configured storages from a StorageConfig.
"""

import logging
from typing import Optional

from .collection.identifier import Parser
from .collection.storage import CollectionStorage
from .config import StorageConfig
from .serialization import Serializer, get_serializer
from .storage.blob_storage import BlobStorage
from .storage.key_value import KeyValueStorage

logger = logging.getLogger(__name__)


def create_serializer(config: Optional[StorageConfig] = None) -> Serializer:
    """Build the serializer described by ``config.serializer``."""
    settings = (config or StorageConfig()).serializer

    if settings.format == "compressed":
        inner = _plain_serializer(settings.inner_format, settings)
        return get_serializer(
            "compressed",
            inner=inner,
            codec=settings.compression_codec,
            clevel=settings.compression_level,
        )

    return _plain_serializer(settings.format, settings)


def _plain_serializer(name: str, settings) -> Serializer:
    if name == "json":
        return get_serializer("json", pretty=settings.pretty, sort_keys=settings.sort_keys)
    return get_serializer(name)


def create_blob_storage(
    config: Optional[StorageConfig] = None, logger: Optional[logging.Logger] = None
) -> BlobStorage:
    """Blob storage rooted at ``config.storage_dir``, ignoring the namespace."""
    config = config or StorageConfig()
    return BlobStorage(config.storage_dir, logger, config.ignored_names)


def create_key_value_storage(
    config: Optional[StorageConfig] = None, logger: Optional[logging.Logger] = None
) -> KeyValueStorage:
    """Key-value storage for ``config.namespace`` under ``config.storage_dir``."""
    config = config or StorageConfig()
    return KeyValueStorage(
        config.storage_dir,
        config.namespace,
        create_serializer(config),
        logger,
        config.ignored_names,
    )


def create_collection_storage(
    pattern: str,
    parser: Parser,
    config: Optional[StorageConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> CollectionStorage:
    """Collection storage over a freshly built key-value storage."""
    return CollectionStorage(
        pattern, parser, create_key_value_storage(config, logger), logger
    )
