"""
Blob Storage
============

Binds a root directory and hands out File handles scoped under it.

Usage:
    from fsstorage.storage import BlobStorage
    from fsstorage.serialization import JSONSerializer

    storage = BlobStorage("./.storage/blobs")
    file = storage.file("some/path/file.json", JSONSerializer())
    file.write({"hello": "world"})

    # After removing a file, prune directories it leaves empty
    file.delete()
    storage.clear_parents(file)
"""

import logging
import os
from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Union

from ..error_handling import PreconditionFailedError
from ..serialization import Serializer
from .directory import Directory, PathFilter
from .file import File

module_logger = logging.getLogger(__name__)

# OS metadata files that do not keep a directory "in use"
SAFE_TO_IGNORE = (".DS_Store", ".Trashes", "Thumbs.db", "desktop.ini")


class BlobStorage:
    """
    Rooted file storage.

    The root directory is created eagerly. Every File returned by
    ``file()`` lives below it.

    Attributes:
        path: Root directory path
        directory: Root Directory handle
    """

    def __init__(
        self,
        path: Union[str, Path],
        logger: Optional[logging.Logger] = None,
        ignored_names: Iterable[str] = SAFE_TO_IGNORE,
    ):
        """
        Initialize blob storage, creating the root directory.

        Args:
            path: Root directory
            logger: Logger handed to every Directory and File created here
            ignored_names: File names that clear_parents() treats as absent

        Raises:
            TypeMismatchError: If the root exists but is not a directory
            StorageIOError: If the root cannot be created
        """
        self.logger = logger or module_logger
        self._directory = Directory(path, self.logger).create()
        self.ignored_names = frozenset(ignored_names)
        self.logger.debug(f"BlobStorage initialized at {self.path}")

    @property
    def path(self) -> Path:
        return self._directory.path

    @property
    def directory(self) -> Directory:
        return self._directory

    def __repr__(self) -> str:
        return f"BlobStorage({str(self.path)!r})"

    def file(self, name: Union[str, PurePath], serializer: Optional[Serializer] = None) -> File:
        """
        Get a handle for ``root/name``. The filesystem is not touched.

        Raises:
            PreconditionFailedError: If ``name`` would resolve outside the root
        """
        relative = PurePath(name)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise PreconditionFailedError(
                f"File name '{name}' escapes storage '{self.path}'",
                {"name": str(name), "storage": str(self.path)},
            )
        return File(self.path / relative, serializer, self.logger)

    def list(self, filter: Optional[PathFilter] = None) -> List[str]:
        """List files below the root, relative to it."""
        return self._directory.list(filter)

    def purge(self) -> None:
        """Delete the root and everything below it."""
        self.logger.info(f"Purging storage '{self.path}'")
        self._directory.delete()

    def clear_parents(self, file: File) -> bool:
        """
        Remove directories left empty by a deleted file.

        Walks from the file's parent up to, but never including, the root.
        Each directory whose only contents are ignored OS metadata files is
        deleted. The walk stops at the first directory that is missing or
        still holds files.

        Returns:
            True if every directory up to the root was cleared, False if the
            walk stopped early

        Raises:
            PreconditionFailedError: If the file still exists or lies outside
                this storage
        """
        if file.exists():
            raise PreconditionFailedError(
                f"File '{file.path}' still exists", {"path": str(file.path)}
            )

        parent = file.path.parent
        if parent != self.path and self.path not in parent.parents:
            raise PreconditionFailedError(
                f"Path '{parent}' is not in storage '{self.path}'",
                {"path": str(parent), "storage": str(self.path)},
            )

        while parent != self.path:
            directory = Directory(parent, self.logger)
            if not directory.exists():
                self.logger.info(f"Directory '{parent}' does not exist")
                return False

            remaining = directory.list(self._is_significant)
            if remaining:
                self.logger.warning(
                    f"Directory '{parent}' is not empty", extra={"remaining": remaining}
                )
                return False

            self.logger.info(f"Deleting empty directory '{parent}'")
            directory.delete()
            parent = parent.parent

        return True

    def _is_significant(self, relative_path: str) -> bool:
        return os.path.basename(relative_path) not in self.ignored_names
