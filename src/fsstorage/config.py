"""
Configuration Management for fsstorage
======================================

Dataclass configuration split into focused sub-configurations: one for the
value codec and one for where and how storage lives on disk.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from . import json_utils
from .serialization import is_registered
from .storage.blob_storage import SAFE_TO_IGNORE

logger = logging.getLogger(__name__)

COMPRESSION_CODECS = {"lz4", "lz4hc", "zstd", "zlib", "blosclz"}


@dataclass
class SerializerConfig:
    """Configuration for the value serializer."""

    format: str = "json"  # any registered serializer name
    pretty: bool = False
    sort_keys: bool = False
    # Used when format == "compressed"
    inner_format: str = "json"
    compression_codec: str = "zstd"
    compression_level: int = 5

    def __post_init__(self):
        """Validate serializer configuration."""
        if not is_registered(self.format):
            raise ValueError(f"Unknown serializer format: {self.format}")

        if self.format == "compressed":
            if self.inner_format == "compressed" or not is_registered(self.inner_format):
                raise ValueError(f"Invalid inner serializer format: {self.inner_format}")

            if self.compression_codec not in COMPRESSION_CODECS:
                raise ValueError(
                    f"compression_codec must be one of {sorted(COMPRESSION_CODECS)}"
                )

            if not (0 <= self.compression_level <= 9):
                raise ValueError("compression_level must be between 0 and 9")

        logger.debug(f"Serializer configured: format={self.format}")


@dataclass
class StorageConfig:
    """Configuration for storage location and directory management."""

    storage_dir: str = "./.storage"
    namespace: str = "."
    ignored_names: Tuple[str, ...] = SAFE_TO_IGNORE
    serializer: SerializerConfig = field(default_factory=SerializerConfig)

    def __post_init__(self):
        """Validate storage configuration."""
        if not str(self.storage_dir).strip():
            raise ValueError("storage_dir must not be empty")

        self.storage_dir = str(self.storage_dir)
        self.ignored_names = tuple(self.ignored_names)

        logger.debug(
            f"Storage configured: dir={self.storage_dir}, namespace={self.namespace}"
        )


def create_storage_config(
    storage_dir: Optional[Union[str, Path]] = None,
    **overrides,
) -> StorageConfig:
    """
    Factory function for creating configurations with convenience parameters.

    Overrides are matched against StorageConfig first, then SerializerConfig.
    Unknown parameters are logged and ignored.

    Args:
        storage_dir: Directory for storage
        **overrides: Direct override values for any config parameter
    """
    storage_fields = {f.name for f in fields(StorageConfig)} - {"serializer"}
    serializer_fields = {f.name for f in fields(SerializerConfig)}

    storage_kwargs: Dict[str, Any] = {}
    serializer_kwargs: Dict[str, Any] = {}

    if storage_dir is not None:
        storage_kwargs["storage_dir"] = str(storage_dir)

    for key, value in overrides.items():
        if key in storage_fields:
            storage_kwargs[key] = value
        elif key in serializer_fields:
            serializer_kwargs[key] = value
        else:
            logger.warning(f"Unknown configuration parameter ignored: {key}")

    return StorageConfig(serializer=SerializerConfig(**serializer_kwargs), **storage_kwargs)


def load_config_from_json(path: Union[str, Path]) -> StorageConfig:
    """
    Load a StorageConfig from a JSON document.

    The document holds StorageConfig fields at the top level and an optional
    ``serializer`` object with SerializerConfig fields.
    """
    document = json_utils.loads(Path(path).read_bytes())
    if not isinstance(document, dict):
        raise ValueError(f"Configuration in {path} must be a JSON object")

    serializer = document.pop("serializer", None) or {}
    logger.info(f"Loaded storage configuration from {path}")
    return create_storage_config(**document, **serializer)
