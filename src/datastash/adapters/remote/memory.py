"""In-memory remote store backend.

This module provides a tiny, dependency-free `RemoteStore` meant for **tests**,
examples, and local development. Objects are kept entirely in RAM keyed by
their remote key. There is no persistence across process restarts and no
sharing between processes.

Key behaviors
-------------
- **Atomic visibility**: `put()` stages the whole stream before installing it
  under the lock, so readers see either the old object or the new one.
- **Overwrite**: `put()` replaces an existing object.
- **Thread-safety**: All installs/lookups happen under an `RLock`.
- **Read counters**: `reads[key]` counts `open_read()` calls per key, which
  lets tests assert how many physical downloads happened.

Typical usage
-------------
    store = MemoryRemoteStore()
    store.put("g/a-v1", io.BytesIO(b"hello"))
    with store.open_read("g/a-v1") as fp:
        data = fp.read()  # b"hello"
"""

from __future__ import annotations

import io
import threading
from collections import Counter
from collections.abc import Iterator
from typing import BinaryIO

from datastash.interfaces.remote_store import CHUNK_SIZE, NotFound, RemoteStore

__all__ = ["MemoryRemoteStore"]


class MemoryRemoteStore(RemoteStore):
    """In-memory `RemoteStore`, non-durable and process-local."""

    def __init__(self) -> None:
        self._objects: dict[str, bytes] = {}
        self._lock = threading.RLock()
        self.reads: Counter[str] = Counter()

    # ---- RemoteStore ----

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._objects

    def open_read(self, key: str) -> io.BytesIO:
        with self._lock:
            try:
                data = self._objects[key]
            except KeyError as e:
                raise NotFound(key) from e
            self.reads[key] += 1
        # Caller must close the stream; BytesIO supports context manager usage
        return io.BytesIO(data)

    def put(self, key: str, fileobj: BinaryIO) -> None:
        buffer = bytearray()
        for chunk in iter(lambda: fileobj.read(CHUNK_SIZE), b""):
            buffer.extend(chunk)
        with self._lock:
            self._objects[key] = bytes(buffer)

    def list_keys(self, prefix: str = "") -> Iterator[str]:
        with self._lock:
            keys = sorted(k for k in self._objects if k.startswith(prefix))
        yield from keys

    def delete(self, key: str) -> None:
        with self._lock:
            self._objects.pop(key, None)
