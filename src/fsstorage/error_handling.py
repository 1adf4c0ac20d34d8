"""
Standardized Error Handling for fsstorage
=========================================

Every failure raised by the storage layers derives from ``StorageError``.
Each subclass carries an ``ErrorKind`` so callers can branch on the kind of
failure instead of matching on message text.
"""

import functools
import logging
import time
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type, Union

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Kinds of storage failures."""

    STORAGE = "storage"
    TYPE_MISMATCH = "type_mismatch"
    IO = "io"
    NOT_FOUND = "not_found"
    PRECONDITION_FAILED = "precondition_failed"
    INVALID_PATTERN = "invalid_pattern"
    SERIALIZATION = "serialization"
    IMMUTABLE_MUTATION = "immutable_mutation"


class StorageError(Exception):
    """Base exception for all storage-related errors."""

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        logger.debug(
            f"Storage error ({self.kind.value}): {message}"
            + (f" ({context_str})" if context_str else "")
        )


class TypeMismatchError(StorageError):
    """Raised when a path exists but is the wrong kind (file vs directory)."""

    kind = ErrorKind.TYPE_MISMATCH


class StorageIOError(StorageError):
    """Raised when an OS-level create/read/write/delete/lock call fails."""

    kind = ErrorKind.IO


class NotFoundError(StorageError):
    """Raised when reading a file or key that does not exist."""

    kind = ErrorKind.NOT_FOUND


class PreconditionFailedError(StorageError):
    """Raised when an operation is invoked in a state it does not accept."""

    kind = ErrorKind.PRECONDITION_FAILED


class InvalidPatternError(StorageError, ValueError):
    """Raised when an identifier pattern has no placeholders."""

    kind = ErrorKind.INVALID_PATTERN


class SerializationError(StorageError):
    """Raised when a value cannot be encoded or decoded."""

    kind = ErrorKind.SERIALIZATION


class ImmutableEntryError(StorageError, AttributeError):
    """Raised on an attempt to assign to an Entry."""

    kind = ErrorKind.IMMUTABLE_MUTATION


def with_error_handling(
    error_type: Type[StorageError] = StorageError,
    context: Optional[Dict[str, Any]] = None,
):
    """
    Decorator converting unexpected exceptions into ``error_type``.

    StorageErrors raised inside the wrapped function pass through unchanged.

    Args:
        error_type: Type of StorageError to raise
        context: Additional context to include in the error
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except StorageError:
                raise
            except Exception as e:
                error_context = (context or {}).copy()
                error_context.update(
                    {
                        "function": func.__name__,
                        "original_error": str(e),
                        "original_error_type": type(e).__name__,
                    }
                )
                raise error_type(f"Error in {func.__name__}: {e}", error_context) from e

        return wrapper

    return decorator


@contextmanager
def storage_operation_context(operation: str, **context):
    """
    Context manager logging the start, duration and failure of an operation.

    Args:
        operation: Description of the operation
        **context: Additional context for logging
    """
    logger.debug(f"Starting storage operation: {operation}", extra=context)
    start_time = time.time()

    try:
        yield
    except Exception as e:
        logger.debug(f"Storage operation failed: {operation} - {e}", extra=context)
        raise

    duration = time.time() - start_time
    logger.debug(
        f"Storage operation completed: {operation} ({duration:.3f}s)", extra=context
    )


def safe_file_operation(
    operation: str, file_path: Union[str, Path], func: Callable, *args, **kwargs
):
    """
    Perform a filesystem call, converting OS failures into StorageIOError.

    Args:
        operation: Description of the operation
        file_path: Path being operated on
        func: Function to call
        *args, **kwargs: Arguments for the function

    Returns:
        Result of the function call
    """
    with storage_operation_context(operation, file_path=str(file_path)):
        try:
            return func(*args, **kwargs)
        except PermissionError as e:
            raise StorageIOError(
                f"Permission denied for {operation}: '{file_path}'",
                {"operation": operation, "file_path": str(file_path)},
            ) from e
        except OSError as e:
            raise StorageIOError(
                f"Failed to {operation} '{file_path}': {e}",
                {"operation": operation, "file_path": str(file_path)},
            ) from e
