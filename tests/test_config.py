"""
Tests for configuration dataclasses, the config factory, JSON config loading
and the storage factories built on them.
"""

import logging

import pytest

from fsstorage.collection import make_date_parser
from fsstorage.config import (
    SerializerConfig,
    StorageConfig,
    create_storage_config,
    load_config_from_json,
)
from fsstorage.core import (
    create_blob_storage,
    create_collection_storage,
    create_key_value_storage,
    create_serializer,
)
from fsstorage.serialization import CompressedSerializer, JSONSerializer, NativeSerializer
from fsstorage.storage.blob_storage import SAFE_TO_IGNORE


# =============================================================================
# Test SerializerConfig
# =============================================================================


class TestSerializerConfig:
    """Validation of serializer settings."""

    def test_default_values(self):
        """Test default serializer config values."""
        config = SerializerConfig()
        assert config.format == "json"
        assert config.pretty is False
        assert config.compression_codec == "zstd"
        assert config.compression_level == 5

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown serializer format"):
            SerializerConfig(format="yaml")

    def test_compressed_cannot_nest(self):
        with pytest.raises(ValueError, match="inner serializer"):
            SerializerConfig(format="compressed", inner_format="compressed")

    def test_invalid_codec(self):
        with pytest.raises(ValueError, match="compression_codec"):
            SerializerConfig(format="compressed", compression_codec="brotli")

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="compression_level"):
            SerializerConfig(format="compressed", compression_level=10)

    def test_compression_settings_ignored_for_plain_formats(self):
        """Codec settings only matter for the compressed format."""
        config = SerializerConfig(format="native", compression_codec="brotli")
        assert config.format == "native"


# =============================================================================
# Test StorageConfig
# =============================================================================


class TestStorageConfig:
    """Validation of storage location settings."""

    def test_default_values(self):
        config = StorageConfig()
        assert config.storage_dir == "./.storage"
        assert config.namespace == "."
        assert config.ignored_names == SAFE_TO_IGNORE
        assert isinstance(config.serializer, SerializerConfig)

    def test_path_is_stored_as_string(self, tmp_path):
        config = StorageConfig(storage_dir=tmp_path, ignored_names=[".keep"])
        assert config.storage_dir == str(tmp_path)
        assert config.ignored_names == (".keep",)

    def test_empty_storage_dir(self):
        with pytest.raises(ValueError, match="storage_dir"):
            StorageConfig(storage_dir="  ")


class TestCreateStorageConfig:
    """Routing of flat overrides to the right sub-configuration."""

    def test_routes_overrides(self, tmp_path):
        config = create_storage_config(
            tmp_path, namespace="posts", format="native", ignored_names=(".keep",)
        )

        assert config.storage_dir == str(tmp_path)
        assert config.namespace == "posts"
        assert config.ignored_names == (".keep",)
        assert config.serializer.format == "native"

    def test_unknown_parameter_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="fsstorage"):
            config = create_storage_config(colour="blue")

        assert "Unknown configuration parameter ignored: colour" in caplog.text
        assert config.storage_dir == "./.storage"

    def test_invalid_override_raises(self):
        with pytest.raises(ValueError):
            create_storage_config(format="compressed", compression_level=-1)


class TestLoadConfigFromJson:
    """Loading configuration documents."""

    def test_loads_nested_serializer_section(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(
            '{"storage_dir": "%s", "namespace": "notes", '
            '"serializer": {"format": "compressed", "compression_codec": "lz4"}}'
            % (tmp_path / "data")
        )

        config = load_config_from_json(path)

        assert config.storage_dir == str(tmp_path / "data")
        assert config.namespace == "notes"
        assert config.serializer.format == "compressed"
        assert config.serializer.compression_codec == "lz4"

    def test_rejects_non_object(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError, match="must be a JSON object"):
            load_config_from_json(path)


# =============================================================================
# Test Factories
# =============================================================================


class TestFactories:
    """Storages and serializers built from configuration."""

    def test_default_serializer_is_json(self):
        serializer = create_serializer()
        assert isinstance(serializer, JSONSerializer)

    def test_json_options_forwarded(self):
        serializer = create_serializer(create_storage_config(pretty=True, sort_keys=True))
        assert serializer.pretty is True
        assert serializer.sort_keys is True

    def test_native_serializer(self):
        assert isinstance(create_serializer(create_storage_config(format="native")), NativeSerializer)

    def test_compressed_serializer(self):
        config = create_storage_config(
            format="compressed", inner_format="json", compression_codec="lz4"
        )
        serializer = create_serializer(config)

        assert isinstance(serializer, CompressedSerializer)
        assert serializer.extension == "json.lz4"

    def test_blob_storage(self, tmp_path):
        storage = create_blob_storage(create_storage_config(tmp_path / "blobs"))
        assert storage.path == tmp_path / "blobs"
        assert storage.ignored_names == frozenset(SAFE_TO_IGNORE)

    def test_key_value_storage(self, tmp_path):
        config = create_storage_config(tmp_path, namespace="settings", format="native")
        storage = create_key_value_storage(config)

        storage.set("tags", {"a", "b"})

        assert (tmp_path / "settings" / "tags.pkl").is_file()
        assert storage.get("tags") == {"a", "b"}

    def test_collection_storage(self, tmp_path, clock):
        collection = create_collection_storage(
            "{year}/{id}",
            make_date_parser(clock=clock),
            create_storage_config(tmp_path, namespace="posts"),
        )

        assert collection.store({"id": 7}) == "2024/7"
        assert (tmp_path / "posts" / "2024" / "7.json").is_file()
