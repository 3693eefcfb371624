"""Publish artifacts to a remote store and resolve them into a local cache.

`Datastore` is the application's single use-case object. It composes a
`RemoteStore`, a `CacheDirectory` and a `LockProvider`:

- **publish** writes straight to the remote store at the coordinate's key; the
  local cache is not touched.
- **resolve** returns a present cache entry immediately (no lock, no remote
  call). On a miss it takes the coordinate's lock, checks presence again, and
  only then checks the remote store, downloads into a staging area, unpacks
  directory archives, and atomically installs the result.

Resolvers sharing a cache root (threads or processes on one machine) perform
at most one download per coordinate; the others wait on the lock and find the
entry present on the recheck.

Errors
------
- `DoesNotExistError` when no object is published at the coordinate. It is
  raised the same way whether the group, name, version or kind is wrong.
- Everything else (remote-store failures, `OSError`, `ArchiveError`,
  `LockError`) propagates unchanged. Nothing is retried, and a failed install
  never leaves a visible cache entry.

Staleness
---------
Republishing a coordinate replaces the remote object but does not invalidate
entries already present in a cache. Bump the version to ship new content, or
call `wipe_cache()` to drop every local entry.
"""

from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path

from datastash.adapters.archive import pack_directory, unpack_archive
from datastash.adapters.cache_dir import CacheDirectory
from datastash.adapters.locks import FileLockProvider
from datastash.domain.coordinates import (
    Coordinate,
    Kind,
    lock_name,
    parse_remote_key,
    remote_key,
)
from datastash.domain.errors import DoesNotExistError, InvalidCoordinateError
from datastash.interfaces.locks import LockProvider
from datastash.interfaces.remote_store import NotFound, RemoteStore
from datastash.utils.paths import PathLike

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "artifact.zip"
PAYLOAD_NAME = "payload"


class Datastore:
    """Versioned artifact cache over one remote store and one cache root.

    Args:
        remote: Object store holding published artifacts.
        cache_root: Local directory for resolved artifacts; created lazily.
        lock_provider: Provider of per-coordinate locks. Defaults to a
            `FileLockProvider` in the cache root's lock area.
        lock_timeout: Seconds a resolver waits for another resolver of the
            same coordinate. `None` (default) waits indefinitely.
    """

    def __init__(
        self,
        remote: RemoteStore,
        cache_root: PathLike,
        *,
        lock_provider: LockProvider | None = None,
        lock_timeout: float | None = None,
    ) -> None:
        self.remote = remote
        self.cache = CacheDirectory(cache_root)
        self.locks = lock_provider or FileLockProvider(self.cache.lock_dir)
        self.lock_timeout = lock_timeout

    def __repr__(self) -> str:
        return (
            f"Datastore(remote={self.remote!r}, "
            f"cache_root={str(self.cache.root)!r})"
        )

    @property
    def cache_root(self) -> Path:
        """Local cache root of this datastore."""
        return self.cache.root

    # ========================================================================
    #                               Publishing
    # ========================================================================

    def publish_file(
        self, local_path: PathLike, group: str, name: str, version: int
    ) -> Coordinate:
        """Upload a file under the FILE coordinate `(group, name, version)`.

        Overwrites any object already published at that coordinate. Caches
        that already hold the coordinate keep their copy.

        Raises:
            FileNotFoundError: If `local_path` does not exist.
            IsADirectoryError: If `local_path` is a directory.
        """
        coordinate = Coordinate.file(group, name, version)
        start = time.monotonic()
        self.remote.put_path(remote_key(coordinate), local_path)
        logger.info(
            "Published %s from %s in %.3fs",
            coordinate,
            local_path,
            time.monotonic() - start,
        )
        return coordinate

    def publish_directory(
        self, local_dir: PathLike, group: str, name: str, version: int
    ) -> Coordinate:
        """Archive a directory tree and upload it under the DIRECTORY coordinate.

        Raises:
            NotADirectoryError: If `local_dir` is not a directory.
            ArchiveError: If the tree holds something other than regular files
                and directories.
        """
        coordinate = Coordinate.directory(group, name, version)
        source = Path(local_dir)
        if not source.is_dir():
            raise NotADirectoryError(str(source))

        start = time.monotonic()
        with tempfile.TemporaryDirectory(prefix="datastash-publish-") as tmp:
            archive = Path(tmp) / ARCHIVE_NAME
            entries = pack_directory(source, archive)
            self.remote.put_path(remote_key(coordinate), archive)
        logger.info(
            "Published %s from %s (%d entries) in %.3fs",
            coordinate,
            source,
            entries,
            time.monotonic() - start,
        )
        return coordinate

    def delete_published(
        self, group: str, name: str, version: int, kind: Kind = Kind.FILE
    ) -> None:
        """Remove a published object from the remote store.

        Local caches that already hold the coordinate are not touched.
        """
        coordinate = Coordinate(group, name, version, kind)
        self.remote.delete(remote_key(coordinate))
        logger.info("Deleted published %s", coordinate)

    # ========================================================================
    #                               Resolution
    # ========================================================================

    def file_path(self, group: str, name: str, version: int) -> Path:
        """Return the local path of a published file, downloading it if needed.

        Raises:
            DoesNotExistError: If no file is published at the coordinate.
        """
        return self.path(Coordinate.file(group, name, version))

    def directory_path(self, group: str, name: str, version: int) -> Path:
        """Return the local path of a published directory, fetching it if needed.

        Raises:
            DoesNotExistError: If no directory is published at the coordinate.
        """
        return self.path(Coordinate.directory(group, name, version))

    def path(self, coordinate: Coordinate) -> Path:
        """Resolve `coordinate` to a present cache entry."""
        entry = self.cache.entry_path(coordinate)
        if entry.exists():
            logger.debug("Cache hit for %s", coordinate)
            return entry

        logger.debug("Cache miss for %s; waiting for its lock", coordinate)
        with self.locks.hold(lock_name(coordinate), timeout=self.lock_timeout):
            # Another resolver may have installed it while we waited
            if entry.exists():
                logger.debug("%s installed while waiting for its lock", coordinate)
                return entry
            return self._fetch(coordinate)

    def _fetch(self, coordinate: Coordinate) -> Path:
        key = remote_key(coordinate)
        if not self.remote.exists(key):
            raise DoesNotExistError.for_coordinate(coordinate)

        start = time.monotonic()
        with self.cache.staging() as area:
            payload = area / PAYLOAD_NAME
            try:
                if coordinate.kind is Kind.FILE:
                    size = self.remote.download_to(key, payload)
                else:
                    archive = area / ARCHIVE_NAME
                    size = self.remote.download_to(key, archive)
                    unpack_archive(archive, payload)
            except NotFound as e:
                # Deleted between the existence check and the download
                raise DoesNotExistError.for_coordinate(coordinate) from e
            installed = self.cache.install(payload, coordinate)

        logger.info(
            "Downloaded %s (%d bytes) in %.3fs",
            coordinate,
            size,
            time.monotonic() - start,
        )
        return installed

    def is_cached(self, coordinate: Coordinate) -> bool:
        """True if `coordinate` is present in the local cache."""
        return self.cache.is_present(coordinate)

    # ========================================================================
    #                               Discovery
    # ========================================================================

    def exists(
        self, group: str, name: str, version: int, kind: Kind = Kind.FILE
    ) -> bool:
        """True if an artifact is published at the coordinate (no download)."""
        return self.remote.exists(remote_key(Coordinate(group, name, version, kind)))

    def list_coordinates(self, group: str | None = None) -> list[Coordinate]:
        """List published coordinates, optionally restricted to one group.

        Remote keys that were not written by DATASTASH are skipped.
        """
        prefix = "" if group is None else f"{group}/"
        coordinates = []
        for key in self.remote.list_keys(prefix):
            try:
                coordinates.append(parse_remote_key(key))
            except InvalidCoordinateError:
                logger.debug("Skipping foreign remote key %r", key)
        return sorted(
            coordinates, key=lambda c: (c.group, c.name, c.kind.value, c.version)
        )

    def versions(self, group: str, name: str, kind: Kind = Kind.FILE) -> list[int]:
        """Published versions of `(group, name, kind)`, ascending."""
        return sorted(
            c.version
            for c in self.list_coordinates(group)
            if c.name == name and c.kind is kind
        )

    def latest_version(self, group: str, name: str, kind: Kind = Kind.FILE) -> int:
        """Highest published version of `(group, name, kind)`.

        Raises:
            DoesNotExistError: If no version is published.
        """
        if not (found := self.versions(group, name, kind)):
            raise DoesNotExistError(group, name, None, kind)
        return found[-1]

    # ========================================================================
    #                               Maintenance
    # ========================================================================

    def wipe_cache(self) -> None:
        """Delete every local cache entry, lock file and staging area.

        Must not run while other resolutions against the same cache root are
        in flight; callers serialize it themselves.
        """
        self.cache.wipe()
        logger.info("Wiped cache at %s", self.cache.root)
