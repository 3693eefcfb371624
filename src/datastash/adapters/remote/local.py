"""Local-directory remote store adapter.

Treats a directory as a bucket: the object at key ``"a/b-v1"`` lives at
``<root>/a/b-v1``. Useful for offline work, for sharing artifacts over a
network mount, and for tests that need a store visible to several processes.
"""

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from datastash.interfaces.remote_store import CHUNK_SIZE, NotFound, RemoteStore
from datastash.utils.paths import PathLike

STAGING_DIR = ".staging"


class LocalRemoteStore(RemoteStore):
    """RemoteStore implementation that uses a local directory as the bucket."""

    def __init__(self, root: PathLike) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        """Directory holding the objects."""
        return self._root

    # --- Core Operations ---

    def exists(self, key: str) -> bool:
        return self._determine_path(key).is_file()

    def open_read(self, key: str) -> BinaryIO:
        path = self._determine_path(key)
        try:
            return path.open("rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise NotFound(key) from None

    def put(self, key: str, fileobj: BinaryIO) -> None:
        dest = self._determine_path(key)
        staging = self._root / STAGING_DIR
        staging.mkdir(parents=True, exist_ok=True)

        # disable mutmut because it likes to replace False with None,
        # which is falsy and thus equivalent here
        with tempfile.NamedTemporaryFile(dir=staging, delete=False) as tmp:  # pragma: no mutate # fmt: skip # pylint:disable=line-too-long
            tmp_path = Path(tmp.name)
            try:
                for chunk in iter(lambda: fileobj.read(CHUNK_SIZE), b""):
                    tmp.write(chunk)
            except BaseException:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise

        # Atomic move; replaces an existing object
        dest.parent.mkdir(parents=True, exist_ok=True)
        os.replace(tmp_path, dest)

    def list_keys(self, prefix: str = "") -> Iterator[str]:
        keys = []
        for path in self._root.rglob("*"):
            relative = path.relative_to(self._root)
            if relative.parts[0] == STAGING_DIR or not path.is_file():
                continue
            key = relative.as_posix()
            if key.startswith(prefix):
                keys.append(key)
        yield from sorted(keys)

    def delete(self, key: str) -> None:
        self._determine_path(key).unlink(missing_ok=True)

    # --- Internal Helpers ---

    def _determine_path(self, key: str) -> Path:
        """Map `key` to a path under the root.

        Raises:
            ValueError: If `key` is empty, absolute, escapes the root, or names
                the staging area.
        """
        if not key or "\\" in key:  # pylint: disable=magic-value-comparison
            raise ValueError(f"Invalid object key {key!r}")

        parts = PurePosixPath(key).parts
        if key.startswith("/") or key.endswith("/") or ".." in parts:
            raise ValueError(f"Invalid object key {key!r}")
        if parts[0] == STAGING_DIR:
            raise ValueError(f"Object key {key!r} uses a reserved prefix")

        return self._root.joinpath(*parts)
