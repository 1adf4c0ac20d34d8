"""
Directory
=========

A stateless handle over a directory path: existence check, idempotent
recursive creation, recursive filtered listing and recursive deletion.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from ..error_handling import TypeMismatchError, safe_file_operation

module_logger = logging.getLogger(__name__)

PathFilter = Callable[[str], bool]


class Directory:
    """
    Handle over a directory on disk.

    Nothing is cached; every call inspects the filesystem again.

    Attributes:
        path: Directory path, without trailing separator
    """

    def __init__(self, path: Union[str, Path], logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self.logger = logger or module_logger

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"Directory({str(self._path)!r})"

    def exists(self) -> bool:
        """
        Check whether the directory exists.

        Raises:
            TypeMismatchError: If the path exists but is not a directory
        """
        if not self._path.exists():
            return False
        if not self._path.is_dir():
            raise TypeMismatchError(
                f"Path '{self._path}' is not a directory", {"path": str(self._path)}
            )
        self.logger.debug(f"Directory '{self._path}' exists")
        return True

    def create(self) -> "Directory":
        """
        Create the directory and any missing parents.

        Idempotent: an existing directory is left as it is.

        Raises:
            TypeMismatchError: If the path exists but is not a directory
            StorageIOError: If the directory cannot be created
        """
        if self.exists():
            self.logger.debug(f"Directory '{self._path}' already exists")
            return self

        safe_file_operation(
            "create directory",
            self._path,
            self._path.mkdir,
            parents=True,
            exist_ok=True,
        )
        self.logger.info(f"Created directory '{self._path}'")
        return self

    def list(self, filter: Optional[PathFilter] = None, reverse: bool = False) -> List[str]:
        """
        List every regular file below this directory.

        Args:
            filter: Predicate receiving a relative path; files for which it
                returns False are left out
            reverse: Sort each level in descending name order

        Returns:
            Paths relative to this directory, joined with ``os.sep``. Empty if
            the directory does not exist.
        """
        if not self.exists():
            return []
        return list(self._walk(self._path, "", filter, reverse))

    def _walk(
        self,
        directory: Path,
        prefix: str,
        filter: Optional[PathFilter],
        reverse: bool,
    ) -> Iterator[str]:
        entries = safe_file_operation("list directory", directory, _scandir, directory)
        for entry in sorted(entries, key=lambda e: e.name, reverse=reverse):
            relative_path = prefix + entry.name
            if entry.is_dir():
                yield from self._walk(
                    Path(entry.path), relative_path + os.sep, filter, reverse
                )
            elif entry.is_file():
                if filter is None or filter(relative_path):
                    yield relative_path

    def delete(self) -> None:
        """
        Delete the directory and everything below it, depth-first.

        A missing directory is a no-op.

        Raises:
            TypeMismatchError: If the path exists but is not a directory
            StorageIOError: If a file or directory cannot be removed
        """
        if not self.exists():
            self.logger.debug(f"Directory '{self._path}' does not exist")
            return

        entries = safe_file_operation("list directory", self._path, _scandir, self._path)
        self.logger.info(
            f"Purging directory '{self._path}'",
            extra={"entries": [entry.name for entry in entries]},
        )
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                Directory(entry.path, self.logger).delete()
            else:
                safe_file_operation("delete file", entry.path, os.unlink, entry.path)

        safe_file_operation("delete directory", self._path, os.rmdir, self._path)
        self.logger.info(f"Deleted directory '{self._path}'")


def _scandir(path: Union[str, Path]) -> List[os.DirEntry]:
    with os.scandir(path) as iterator:
        return list(iterator)
