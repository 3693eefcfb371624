"""On-disk layout of the local cache root and atomic installation into it.

Layout under the root::

    <root>/<group>/<name>-v<N>                 installed file
    <root>/<group>/<name>-d<N>/                installed directory tree
    <root>/.locks/<group>/<name>-<v|d><N>.lock per-coordinate lock files
    <root>/.tmp/<random>/                      staging areas of in-flight installs

An entry is *present* exactly when its canonical path exists. Installers build
the artifact inside a staging area on the same filesystem and then move it
onto the canonical path (a hard link for files, a rename for directories), so
a reader never sees a partially written entry and an existing entry is never
replaced.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from datastash.domain.coordinates import Coordinate, local_path, lock_name
from datastash.utils.paths import PathLike, remove_path

logger = logging.getLogger(__name__)

LOCKS_DIR = ".locks"
STAGING_DIR = ".tmp"


def _discard(staged: Path, coordinate: Coordinate) -> None:
    logger.warning(
        "%s was installed concurrently; discarding staged copy", coordinate
    )
    remove_path(staged)


class CacheDirectory:
    """A cache root holding one entry per coordinate.

    The root is created lazily on the first write, so constructing a
    `CacheDirectory` has no side effects.
    """

    def __init__(self, root: PathLike) -> None:
        self._root = Path(root)

    def __repr__(self) -> str:
        return f"CacheDirectory({str(self._root)!r})"

    @property
    def root(self) -> Path:
        """The cache root directory."""
        return self._root

    @property
    def lock_dir(self) -> Path:
        """Directory holding the per-coordinate lock files."""
        return self._root / LOCKS_DIR

    # --- Layout ---

    def entry_path(self, coordinate: Coordinate) -> Path:
        """Canonical path of `coordinate` in this cache."""
        return local_path(coordinate, self._root)

    def lock_path(self, coordinate: Coordinate) -> Path:
        """Lock file guarding installation of `coordinate`."""
        return self.lock_dir / lock_name(coordinate)

    def is_present(self, coordinate: Coordinate) -> bool:
        """True if `coordinate` is fully installed."""
        return self.entry_path(coordinate).exists()

    # --- Installation ---

    @contextmanager
    def staging(self) -> Iterator[Path]:
        """Yield a fresh, empty staging directory under the root.

        The directory and whatever is left in it are removed when the context
        exits, whether the install succeeded or failed.
        """
        staging_root = self._root / STAGING_DIR
        staging_root.mkdir(parents=True, exist_ok=True)
        area = Path(tempfile.mkdtemp(dir=staging_root))
        try:
            yield area
        finally:
            shutil.rmtree(area, ignore_errors=True)

    def install(self, staged: Path, coordinate: Coordinate) -> Path:
        """Atomically move `staged` onto the canonical path of `coordinate`.

        `staged` must live inside a staging area of this cache (same
        filesystem). If the canonical path already exists (a racing installer
        finished first), `staged` is discarded and the existing entry is kept.

        Returns:
            Path: The canonical path, now present.
        """
        dest = self.entry_path(coordinate)
        dest.parent.mkdir(parents=True, exist_ok=True)

        if dest.exists():
            _discard(staged, coordinate)
            return dest

        try:
            if staged.is_dir():
                os.rename(staged, dest)
            else:
                # rename() would silently replace a file that appeared since
                # the check; link() refuses to
                os.link(staged, dest)
                staged.unlink()
        except FileExistsError:
            _discard(staged, coordinate)
        except OSError:
            # A directory rename onto a non-empty directory fails; if the
            # target now exists another installer won the race.
            if not dest.exists():
                raise
            _discard(staged, coordinate)
        return dest

    # --- Maintenance ---

    def wipe(self) -> None:
        """Delete the whole cache root, including locks and staging areas."""
        if self._root.exists():
            shutil.rmtree(self._root)
