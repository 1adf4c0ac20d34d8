"""
Concurrency Stress Tests for locked File reads and writes
=========================================================

Writes hold an exclusive flock and readers a shared one, so a reader must
never observe a truncated or half-written value, and concurrent writers to
one key must leave exactly one complete value behind.

Covers:
- Concurrent set() to same key (last-writer-wins, no corruption)
- Concurrent set() to distinct keys (all succeed)
- Concurrent get() during set() (no partial reads)
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from fsstorage.serialization import JSONSerializer
from fsstorage.storage import KeyValueStorage


@pytest.fixture
def stress_storage(tmp_path):
    """Key-value storage for stress testing."""
    return KeyValueStorage(tmp_path, "stress", JSONSerializer())


def _payload(writer_id, size=2000):
    return {"writer": writer_id, "data": [writer_id] * size}


def _is_complete(value):
    return value["data"] == [value["writer"]] * len(value["data"]) and len(value["data"]) == 2000


class TestConcurrentSetSameKey:
    """Concurrent set() to the same key must not corrupt state."""

    def test_last_writer_wins_no_corruption(self, stress_storage):
        """Multiple threads writing to the same key leave one valid value."""
        num_threads = 8

        with ThreadPoolExecutor(max_workers=num_threads) as pool:
            futures = [
                pool.submit(stress_storage.set, "shared", _payload(i))
                for i in range(num_threads)
            ]
            for future in futures:
                future.result(timeout=30)

        value = stress_storage.get("shared")
        assert value["writer"] in range(num_threads)
        assert _is_complete(value)


class TestConcurrentSetDistinctKeys:
    """Concurrent set() to distinct nested keys."""

    def test_all_writes_succeed(self, stress_storage):
        keys = [f"group{i % 3}/item{i}" for i in range(30)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda key: stress_storage.set(key, {"key": key}), keys))

        assert sorted(stress_storage.keys()) == sorted(keys)
        for key in keys:
            assert stress_storage.get(key) == {"key": key}


class TestConcurrentReadDuringWrite:
    """get() running alongside set() must see complete values only."""

    def test_no_partial_reads(self, stress_storage):
        stress_storage.set("hot", _payload(0))
        stop = threading.Event()
        errors = []

        def writer(writer_id):
            for _ in range(25):
                stress_storage.set("hot", _payload(writer_id))

        def reader():
            while not stop.is_set():
                try:
                    value = stress_storage.get("hot")
                except Exception as e:
                    errors.append(f"read failed: {e}")
                    return
                if not _is_complete(value):
                    errors.append(f"partial read: writer={value['writer']}")
                    return

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()

        with ThreadPoolExecutor(max_workers=4) as pool:
            for future in [pool.submit(writer, i) for i in range(1, 5)]:
                future.result(timeout=60)

        stop.set()
        for t in readers:
            t.join(timeout=30)

        assert errors == []

