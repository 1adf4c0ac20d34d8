"""
Advisory File Locks
===================

POSIX ``flock`` locks taken on an open file handle. Locks are cooperative:
only processes that take them are serialized. Each lock covers one file and
is released as soon as the ``with`` block exits.
"""

import fcntl
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from ..error_handling import safe_file_operation


@contextmanager
def shared_lock(handle: BinaryIO) -> Iterator[BinaryIO]:
    """Hold a shared (read) lock on ``handle`` for the duration of the block."""
    with _flock(handle, fcntl.LOCK_SH):
        yield handle


@contextmanager
def exclusive_lock(handle: BinaryIO) -> Iterator[BinaryIO]:
    """Hold an exclusive (write) lock on ``handle`` for the duration of the block."""
    with _flock(handle, fcntl.LOCK_EX):
        yield handle


@contextmanager
def _flock(handle: BinaryIO, operation: int) -> Iterator[None]:
    safe_file_operation("lock", handle.name, fcntl.flock, handle.fileno(), operation)
    try:
        yield
    finally:
        safe_file_operation(
            "unlock", handle.name, fcntl.flock, handle.fileno(), fcntl.LOCK_UN
        )
