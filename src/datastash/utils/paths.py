"""Filesystem path helpers."""

import os
import shutil
from pathlib import Path

PathLike = str | os.PathLike[str]


def remove_path(path: PathLike) -> None:
    """Remove a file, a symlink or a directory tree. Missing paths are ignored."""
    p = Path(path)
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p, ignore_errors=False)
    else:
        p.unlink(missing_ok=True)
