"""
JSON Utilities
==============

Thin wrappers around orjson used by the JSON codec and by configuration
loading. orjson works on bytes natively, which is exactly what the blob
layer stores.
"""

import logging
from typing import Any, Callable, Optional, Union

import orjson

logger = logging.getLogger(__name__)


def dumps(
    obj: Any,
    pretty: bool = False,
    sort_keys: bool = False,
    default: Optional[Callable[[Any], Any]] = None,
) -> bytes:
    """
    Serialize object to JSON bytes using orjson.

    Args:
        obj: Object to serialize
        pretty: Indent output with two spaces
        sort_keys: Whether to sort dictionary keys
        default: Function to handle non-serializable objects

    Returns:
        UTF-8 encoded JSON
    """
    option = 0
    if pretty:
        option |= orjson.OPT_INDENT_2
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS

    return orjson.dumps(obj, option=option, default=default)


def loads(s: Union[str, bytes, bytearray, memoryview]) -> Any:
    """
    Deserialize JSON using orjson.

    Args:
        s: JSON string or bytes to deserialize

    Returns:
        Deserialized object
    """
    return orjson.loads(s)
