"""
File
====

A stateless handle over a single file, optionally bound to a serializer.

Reads take a shared advisory lock and writes an exclusive one, each held
only for the duration of the call.
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Optional, Union

from ..error_handling import (
    NotFoundError,
    SerializationError,
    TypeMismatchError,
    safe_file_operation,
)
from ..serialization import Serializer
from .directory import Directory
from .locking import exclusive_lock, shared_lock

module_logger = logging.getLogger(__name__)


class File:
    """
    Handle over a file on disk.

    Attributes:
        path: File path
        serializer: Codec applied by read()/write(); raw bytes when None
    """

    def __init__(
        self,
        path: Union[str, Path],
        serializer: Optional[Serializer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path)
        self._serializer = serializer
        self.logger = logger or module_logger

    @property
    def path(self) -> Path:
        return self._path

    @property
    def serializer(self) -> Optional[Serializer]:
        return self._serializer

    def __repr__(self) -> str:
        return f"File({str(self._path)!r}, serializer={self._serializer!r})"

    def exists(self) -> bool:
        """
        Check whether the file exists.

        Raises:
            TypeMismatchError: If the path exists but is a directory
        """
        if not self._path.exists():
            return False
        if self._path.is_dir():
            raise TypeMismatchError(
                f"Path '{self._path}' is not a file", {"path": str(self._path)}
            )
        self.logger.debug(f"File '{self._path}' exists")
        return True

    def create(self) -> "File":
        """
        Create an empty file, creating parent directories as needed.

        Idempotent: existing content is never truncated.

        Raises:
            TypeMismatchError: If the path exists but is a directory
            StorageIOError: If the file cannot be created
        """
        if self.exists():
            self.logger.debug(f"File '{self._path}' already exists")
            return self

        Directory(self._path.parent, self.logger).create()
        handle = safe_file_operation("create file", self._path, open, self._path, "ab")
        handle.close()
        self.logger.info(f"Created file '{self._path}'")
        return self

    def touch(self, mtime: Optional[float] = None, atime: Optional[float] = None) -> "File":
        """
        Create the file if missing and update its timestamps.

        Args:
            mtime: Modification time (seconds since epoch); now when omitted
            atime: Access time; defaults to ``mtime``

        Raises:
            StorageIOError: If the timestamps cannot be set
        """
        if not self.exists():
            self.create()

        if mtime is None and atime is None:
            times = None
        else:
            mtime = mtime if mtime is not None else time.time()
            times = (atime if atime is not None else mtime, mtime)

        safe_file_operation("touch", self._path, os.utime, self._path, times)
        self.logger.info(f"Touched '{self._path}'")
        return self

    def read(self) -> Any:
        """
        Read the whole file under a shared lock.

        Returns:
            The deserialized value, or raw bytes when no serializer is bound

        Raises:
            NotFoundError: If the file does not exist
            StorageIOError: If the file cannot be opened, locked or read
        """
        if not self.exists():
            raise self._not_found()

        with safe_file_operation("open", self._path, self._open_for_read) as handle:
            with shared_lock(handle):
                data = safe_file_operation("read", self._path, handle.read)

        self.logger.debug(f"Read from '{self._path}'", extra={"size": len(data)})
        if self._serializer is None:
            return data
        return self._serializer.deserialize(data)

    def write(self, value: Any) -> "File":
        """
        Replace the file content under an exclusive lock.

        The value is serialized before the file is touched, so a codec
        failure leaves the previous content intact.

        Raises:
            SerializationError: If the value cannot be encoded
            StorageIOError: If the file cannot be opened, locked or written
        """
        data = self._encode(value)

        if not self.exists():
            self.create()

        with safe_file_operation("open", self._path, open, self._path, "r+b") as handle:
            with exclusive_lock(handle):
                safe_file_operation("write", self._path, _replace_content, handle, data)

        self.logger.info(f"Wrote to '{self._path}'", extra={"size": len(data)})
        return self

    def delete(self) -> "File":
        """
        Remove the file. A missing file only logs a warning.

        Raises:
            TypeMismatchError: If the path is a directory
            StorageIOError: If the file cannot be removed
        """
        if self.exists():
            safe_file_operation("delete", self._path, os.unlink, self._path)
            self.logger.info(f"Deleted '{self._path}'")
        else:
            self.logger.warning(f"File '{self._path}' is already deleted")
        return self

    def _open_for_read(self):
        try:
            return open(self._path, "rb")
        except FileNotFoundError:
            # Removed between exists() and open()
            raise self._not_found() from None

    def _not_found(self) -> NotFoundError:
        return NotFoundError(
            f"File '{self._path}' does not exist", {"path": str(self._path)}
        )

    def _encode(self, value: Any) -> bytes:
        if self._serializer is not None:
            return self._serializer.serialize(value)
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode("utf-8")
        raise SerializationError(
            f"Cannot write {type(value).__name__} to '{self._path}' without a serializer",
            {"path": str(self._path), "type": type(value).__name__},
        )


def _replace_content(handle, data: bytes) -> None:
    handle.seek(0)
    handle.truncate()
    handle.write(data)
    handle.flush()
    os.fsync(handle.fileno())
