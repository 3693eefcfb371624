"""Zip archive codec for directory artifacts.

A published directory travels as a single zip object. `pack_directory` writes
the tree (files *and* directories, including empty ones) with entries sorted
by relative path, a fixed timestamp and normalised permissions, so the same
tree always yields the same archive bytes. `unpack_archive` restores the exact
relative-path structure and file contents under a destination directory.

Only regular files and directories are archived; symlinks are refused rather
than silently followed or dropped. On unpack, entries that would land outside
the destination (absolute paths, ``..`` segments) are refused.
"""

from __future__ import annotations

import os
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath

from datastash.utils.paths import PathLike

FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)  # earliest timestamp zip can encode
CHUNK_SIZE = 1024 * 1024
DIR_MODE = 0o755
FILE_MODE = 0o644
EXEC_FILE_MODE = 0o755


class ArchiveError(Exception):
    """Raised when a tree cannot be archived or an archive is unsafe to unpack."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


# ============================================================================
#                                 Packing
# ============================================================================


def pack_directory(src_dir: PathLike, dest: PathLike) -> int:
    """Write the tree rooted at `src_dir` into the zip file `dest`.

    Args:
        src_dir: Directory to archive. The directory itself is not an entry;
            its children are stored relative to it.
        dest: Path of the archive to create (overwritten if present).

    Returns:
        int: Number of entries written (files plus directories).

    Raises:
        NotADirectoryError: If `src_dir` is not a directory.
        ArchiveError: If the tree contains a symlink or another non-regular file.
    """
    root = Path(src_dir)
    if not root.is_dir():
        raise NotADirectoryError(str(root))

    entries = sorted(
        (path.relative_to(root).as_posix(), path) for path in root.rglob("*")
    )

    with zipfile.ZipFile(dest, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for relative, path in entries:
            mode = path.lstat().st_mode
            if stat.S_ISLNK(mode):
                raise ArchiveError(relative, "symlinks cannot be archived")
            if stat.S_ISDIR(mode):
                _write_dir(zf, relative)
            elif stat.S_ISREG(mode):
                _write_file(zf, relative, path, executable=bool(mode & stat.S_IXUSR))
            else:
                raise ArchiveError(
                    relative, "only regular files and directories can be archived"
                )

    return len(entries)


def _write_dir(zf: zipfile.ZipFile, relative: str) -> None:
    info = zipfile.ZipInfo(f"{relative}/", date_time=FIXED_DATE_TIME)
    info.external_attr = ((stat.S_IFDIR | DIR_MODE) << 16) | 0x10  # MS-DOS dir flag
    zf.writestr(info, b"")


def _write_file(
    zf: zipfile.ZipFile, relative: str, path: Path, *, executable: bool
) -> None:
    info = zipfile.ZipInfo(relative, date_time=FIXED_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    perms = EXEC_FILE_MODE if executable else FILE_MODE
    info.external_attr = (stat.S_IFREG | perms) << 16
    with path.open("rb") as src, zf.open(info, "w", force_zip64=True) as out:
        shutil.copyfileobj(src, out, CHUNK_SIZE)


# ============================================================================
#                                Unpacking
# ============================================================================


def unpack_archive(archive: PathLike, dest_dir: PathLike) -> int:
    """Extract the zip file `archive` into `dest_dir`.

    Args:
        archive: Zip file produced by `pack_directory`.
        dest_dir: Directory to extract into; created if missing.

    Returns:
        int: Number of entries extracted.

    Raises:
        ArchiveError: If an entry would escape `dest_dir`.
        zipfile.BadZipFile: If `archive` is not a valid zip file.
    """
    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(archive) as zf:
        infos = zf.infolist()
        for info in infos:
            target = _safe_target(dest, info.filename)
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, target.open("wb") as out:
                shutil.copyfileobj(src, out, CHUNK_SIZE)
            if (info.external_attr >> 16) & stat.S_IXUSR:
                target.chmod(EXEC_FILE_MODE)

    return len(infos)


def _safe_target(dest: Path, name: str) -> Path:
    """Map an entry name to a path under `dest`, refusing anything outside it."""
    if "\\" in name or name.startswith("/") or os.path.isabs(name):
        raise ArchiveError(name, "absolute or non-POSIX entry name")
    parts = PurePosixPath(name).parts
    if not parts or ".." in parts:
        raise ArchiveError(name, "entry escapes the destination directory")
    return dest.joinpath(*parts)
