"""Remote object-store interface.

This module defines the narrow, backend-agnostic contract DATASTASH consumes
from an object store (S3, a shared directory, an in-memory dict in tests).
Objects are addressed by opaque string keys; the store knows nothing about
coordinates.

Public API:
    - Exceptions: `RemoteStoreError`, `NotFound`
    - Abstract interface: `RemoteStore`

Contract:
    - **Atomic visibility**: an object is either fully there or not there. A
      reader never observes a partially uploaded object. Backends whose
      storage can expose partial writes must hide them (e.g., temp +
      `os.replace`).
    - **Overwrite**: `put()` replaces any existing object at the key.
    - **Streams**: `put()` reads from the stream's *current position* until
      EOF and never closes the caller's stream. `open_read()` returns a stream
      the **caller** must close.

Typical usage:
    ```py
    store.put_path("models/encoder-v3", Path("encoder.bin"))
    with store.open_read("models/encoder-v3") as fp:
        head = fp.read(1024)
    ```
"""

import abc
import shutil
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from datastash.utils.paths import PathLike


CHUNK_SIZE = 1024 * 1024  # 1 MiB


class RemoteStoreError(Exception):
    """Base class for all remote-store errors."""


class NotFound(RemoteStoreError):
    """Requested key is absent from the store."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object {key!r} not found")
        self.key = key


class RemoteStore(abc.ABC):
    """Abstract base class for remote object-store operations."""

    # --- Core Operations ---

    @abc.abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether an object exists at `key`.

        Args:
            key (str): Object key.

        Returns:
            bool: True if the object exists, False otherwise.
        """

    @abc.abstractmethod
    def open_read(self, key: str) -> BinaryIO:
        """Open the object at `key` for reading in binary mode.

        Args:
            key (str): Object key.

        Returns:
            BinaryIO: A binary stream over the object's bytes.

        Raises:
            NotFound: If no object exists at `key`.

        Example:
            with store.open_read(key) as f:
                data = f.read()
        """

    @abc.abstractmethod
    def put(self, key: str, fileobj: BinaryIO) -> None:
        """Upload bytes from `fileobj` to `key`, replacing any existing object.

        The store reads from the stream's *current position* until EOF and
        does not close it.

        Args:
            key (str): Object key.
            fileobj (BinaryIO): Binary stream to read from.
        """

    @abc.abstractmethod
    def list_keys(self, prefix: str = "") -> Iterator[str]:
        """Yield every key starting with `prefix`, in lexicographic order."""

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Delete the object at `key`. Deleting a missing key is a no-op."""

    # --- Convenience Methods ---

    def delete_prefix(self, prefix: str) -> int:
        """Delete every object whose key starts with `prefix`.

        Returns:
            int: Number of objects deleted.
        """
        keys = list(self.list_keys(prefix))
        for key in keys:
            self.delete(key)
        return len(keys)

    def put_path(self, key: str, path: PathLike) -> None:
        """Upload the regular file at `path` to `key`.

        Raises:
            FileNotFoundError: If `path` does not exist.
            IsADirectoryError: If `path` is a directory.
        """
        p = Path(path)
        if p.is_dir():
            raise IsADirectoryError(str(p))
        with p.open("rb") as fileobj:
            self.put(key, fileobj)

    def download_to(self, key: str, dest: PathLike) -> int:
        """Copy the object at `key` into the local file `dest`.

        Returns:
            int: Number of bytes written.

        Raises:
            NotFound: If no object exists at `key`.
        """
        with self.open_read(key) as src, Path(dest).open("wb") as out:
            shutil.copyfileobj(src, out, CHUNK_SIZE)
            return out.tell()
