"""
Serializers
===========

Pluggable value <-> bytes codecs used by the key-value layer.

A serializer has three operations: ``serialize``, ``deserialize`` and the
``extension`` tag appended to every file it writes. The extension is the
only type discriminator the storage layers know about, so two serializers
with different extensions partition a namespace rather than sharing it.

Usage:
    from fsstorage.serialization import get_serializer, register_serializer

    serializer = get_serializer("json", pretty=True)
    data = serializer.serialize({"name": "John"})
    value = serializer.deserialize(data)

    # Wrap any codec with blosc2 compression
    compressed = get_serializer("compressed", inner=serializer, codec="zstd")
"""

import io
import logging
import pickle
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

import blosc2

from . import json_utils
from .error_handling import SerializationError, with_error_handling

logger = logging.getLogger(__name__)


class Serializer(ABC):
    """Value <-> bytes codec plus the file extension it owns."""

    @abstractmethod
    def serialize(self, value: Any) -> bytes:
        """
        Encode a value.

        Raises:
            SerializationError: If the value cannot be encoded
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> Any:
        """
        Decode bytes produced by ``serialize``.

        Raises:
            SerializationError: If the data cannot be decoded
        """
        pass

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension without the leading dot (e.g. ``json``)."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(extension={self.extension!r})"


class JSONSerializer(Serializer):
    """JSON codec backed by orjson."""

    def __init__(self, pretty: bool = False, sort_keys: bool = False):
        self.pretty = pretty
        self.sort_keys = sort_keys

    @with_error_handling(SerializationError)
    def serialize(self, value: Any) -> bytes:
        return json_utils.dumps(value, pretty=self.pretty, sort_keys=self.sort_keys)

    @with_error_handling(SerializationError)
    def deserialize(self, data: bytes) -> Any:
        return json_utils.loads(data)

    @property
    def extension(self) -> str:
        return "json"


# Builtins the native codec may reconstruct. Everything else pickle can
# express (class instances, functions, reducers) is refused.
_NATIVE_SCALARS = (type(None), bool, int, float, complex, str, bytes, bytearray)
_NATIVE_CONTAINERS = (list, tuple, set, frozenset)
_NATIVE_GLOBALS = frozenset({"complex", "bytearray", "set", "frozenset"})


class _RestrictedUnpickler(pickle.Unpickler):
    def find_class(self, module: str, name: str) -> Any:
        if module == "builtins" and name in _NATIVE_GLOBALS:
            return super().find_class(module, name)
        raise SerializationError(
            f"Refusing to reconstruct '{module}.{name}'",
            {"module": module, "name": name},
        )


def _check_native(value: Any) -> None:
    """
    Recursively verify a value only holds primitive/collection types.

    Types are matched exactly: subclasses (namedtuples, OrderedDict, IntEnum)
    pickle by class reference, which the unpickler refuses.
    """
    value_type = type(value)
    if value_type in _NATIVE_SCALARS:
        return
    if value_type is dict:
        for key, item in value.items():
            _check_native(key)
            _check_native(item)
        return
    if value_type in _NATIVE_CONTAINERS:
        for item in value:
            _check_native(item)
        return
    raise SerializationError(
        f"Type '{type(value).__name__}' is not supported by the native serializer",
        {"type": type(value).__name__},
    )


class NativeSerializer(Serializer):
    """
    Pickle codec for trusted in-process round-tripping.

    Only primitive and collection structures are accepted on the way in, and
    the unpickler refuses every global outside that set on the way out, so
    a tampered file cannot execute code when read.
    """

    protocol = pickle.HIGHEST_PROTOCOL

    @with_error_handling(SerializationError)
    def serialize(self, value: Any) -> bytes:
        _check_native(value)
        return pickle.dumps(value, protocol=self.protocol)

    @with_error_handling(SerializationError)
    def deserialize(self, data: bytes) -> Any:
        return _RestrictedUnpickler(io.BytesIO(data)).load()

    @property
    def extension(self) -> str:
        return "pkl"


_CODECS = {
    "lz4": blosc2.Codec.LZ4,
    "lz4hc": blosc2.Codec.LZ4HC,
    "zstd": blosc2.Codec.ZSTD,
    "zlib": blosc2.Codec.ZLIB,
    "blosclz": blosc2.Codec.BLOSCLZ,
}


class CompressedSerializer(Serializer):
    """
    blosc2 compression layered over another serializer.

    The extension is ``{inner.extension}.{codec}``, so compressed and plain
    entries never shadow each other in ``keys()``.
    """

    def __init__(
        self, inner: Optional[Serializer] = None, codec: str = "zstd", clevel: int = 5
    ):
        if codec not in _CODECS:
            raise ValueError(
                f"Unsupported codec: {codec}. Supported: {sorted(_CODECS)}"
            )
        if not (0 <= clevel <= 9):
            raise ValueError("clevel must be between 0 and 9")

        self.inner = inner if inner is not None else JSONSerializer()
        self.codec = codec
        self.clevel = clevel

    @with_error_handling(SerializationError)
    def serialize(self, value: Any) -> bytes:
        raw = self.inner.serialize(value)
        return blosc2.compress(
            raw,
            typesize=1,
            clevel=self.clevel,
            filter=blosc2.Filter.NOFILTER,
            codec=_CODECS[self.codec],
        )

    @with_error_handling(SerializationError)
    def deserialize(self, data: bytes) -> Any:
        return self.inner.deserialize(blosc2.decompress(data))

    @property
    def extension(self) -> str:
        return f"{self.inner.extension}.{self.codec}"


# =============================================================================
# Serializer Registry
# =============================================================================

_serializer_registry: Dict[str, Type[Serializer]] = {}
_builtin_serializers = {"json", "native", "compressed"}


def _initialize_builtin_serializers():
    """Initialize registry with built-in serializers."""
    _serializer_registry["json"] = JSONSerializer
    _serializer_registry["native"] = NativeSerializer
    _serializer_registry["compressed"] = CompressedSerializer


_initialize_builtin_serializers()


def register_serializer(
    name: str, serializer_class: Type[Serializer], force: bool = False
) -> None:
    """
    Register a custom serializer.

    Args:
        name: Unique name for the serializer (e.g., "msgpack")
        serializer_class: Class implementing the Serializer interface
        force: If True, overwrite an existing registration

    Raises:
        ValueError: If name already registered and force=False, or if
            serializer_class doesn't inherit from Serializer
    """
    if not isinstance(serializer_class, type) or not issubclass(
        serializer_class, Serializer
    ):
        raise ValueError(f"{serializer_class!r} must be a Serializer subclass")

    if name in _serializer_registry and not force:
        raise ValueError(
            f"Serializer '{name}' already registered. "
            f"Use force=True to overwrite or unregister_serializer() first."
        )

    _serializer_registry[name] = serializer_class
    logger.info(f"Registered serializer '{name}' ({serializer_class.__name__})")


def unregister_serializer(name: str) -> bool:
    """
    Unregister a serializer.

    Returns:
        True if the serializer was unregistered, False if not found
    """
    if name in _serializer_registry:
        del _serializer_registry[name]
        logger.info(f"Unregistered serializer '{name}'")
        return True

    logger.warning(f"Serializer '{name}' not found for unregistration")
    return False


def get_serializer(name: str, **options) -> Serializer:
    """
    Get a serializer instance by name.

    Args:
        name: Name of the registered serializer
        **options: Serializer-specific options

    Raises:
        ValueError: If the name is not registered or the options are invalid
    """
    if name not in _serializer_registry:
        available = list(_serializer_registry.keys())
        raise ValueError(f"Unknown serializer: '{name}'. Available serializers: {available}")

    serializer_class = _serializer_registry[name]

    try:
        return serializer_class(**options)
    except TypeError as e:
        raise ValueError(
            f"Failed to create serializer '{name}' with options {options}: {e}"
        )


def is_registered(name: str) -> bool:
    return name in _serializer_registry


def list_serializers() -> List[Dict[str, Any]]:
    """
    List all registered serializers, built-ins first.

    Returns:
        List of dictionaries with ``name``, ``class`` and ``is_builtin`` keys
    """
    result = []
    for name in sorted(_serializer_registry, key=lambda n: (n not in _builtin_serializers, n)):
        result.append(
            {
                "name": name,
                "class": _serializer_registry[name].__name__,
                "is_builtin": name in _builtin_serializers,
            }
        )
    return result
